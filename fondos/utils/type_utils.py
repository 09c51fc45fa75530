# fondos/utils/type_utils.py
import math
from datetime import date

import fondos.config as config
from fondos.domain.errors import FormatError
from fondos.utils.row_context import RowContext

_ASCII_DIGITS = frozenset("0123456789")
_PERCENT_TERMINATORS = (" ", "%")
_DATE_FORMAT_HINT = "expected day/month/year with a 2 or 4 digit year, e.g. 31/12/2021 or 31/12/21"


def is_ascii_digits(text: str) -> bool:
    return bool(text) and all(ch in _ASCII_DIGITS for ch in text)


def parse_cents(raw: str, context: RowContext) -> int:
    """
    Parses a currency cell such as "$1,234.56" into integer cents.

    The grammar is strict: a leading '$', an integer part that is either
    ungrouped or grouped by commas every three digits, a '.', and exactly two
    decimal digits. "$.00" is zero. Anything else raises FormatError naming
    the specific violation; nothing is rounded or guessed.
    """
    text = raw.strip()
    if not text.startswith("$"):
        raise FormatError("Currency value must start with '$'", raw, context)
    body = text[1:]
    if not body:
        raise FormatError("Currency value is empty after '$'", raw, context)
    if "." not in body:
        raise FormatError("Currency value has no decimal point", raw, context)

    integer_part, _, decimals = body.partition(".")
    groups = integer_part.split(",") if integer_part else []
    if groups:
        first = groups[0]
        if first == "":
            raise FormatError("Currency value starts with a comma", raw, context)
        if not is_ascii_digits(first):
            raise FormatError("Currency value has non-digit characters in its integer part", raw, context)
        if len(groups) > 1 and len(first) > 3:
            raise FormatError("Currency value has more than 3 digits before the first comma", raw, context)
        for group in groups[1:]:
            if group == "":
                raise FormatError("Currency value has an empty digit group between commas", raw, context)
            if not is_ascii_digits(group):
                raise FormatError("Currency value has non-digit characters in its integer part", raw, context)
            if len(group) != 3:
                raise FormatError(f"Currency digit group '{group}' after a comma must have exactly 3 digits", raw, context)

    if not is_ascii_digits(decimals):
        raise FormatError("Currency value has non-digit characters after the decimal point", raw, context)
    if len(decimals) != 2:
        raise FormatError(f"Currency value must have exactly 2 decimal digits, found {len(decimals)}", raw, context)

    units = int("".join(groups)) if groups else 0
    return units * 100 + int(decimals)


def parse_percent(raw: str, context: RowContext) -> float:
    """
    Parses a percentage cell ("3 %EA", "-.003 %EA", "1,204.5%") into a float.
    "NA" yields NaN. The number must be terminated by a space or '%'; whatever
    follows the terminator (EA, E.A., ...) is ignored.
    Thousands commas follow the same grouping rules as currency values.
    """
    if raw.strip() == "NA":
        return math.nan
    text = raw.lstrip()
    if not text:
        raise FormatError("Percentage value is empty", raw, context)

    negative = text.startswith("-")
    position = 1 if negative else 0
    integer_chars = []
    fraction_digits = []
    seen_point = False
    terminated = False
    for ch in text[position:]:
        if ch in _PERCENT_TERMINATORS:
            terminated = True
            break
        if ch in _ASCII_DIGITS:
            (fraction_digits if seen_point else integer_chars).append(ch)
        elif ch == ".":
            if seen_point:
                raise FormatError("Percentage value has more than one decimal point", raw, context)
            seen_point = True
        elif ch == ",":
            if seen_point:
                raise FormatError("Percentage value has a comma after the decimal point", raw, context)
            integer_chars.append(ch)
        else:
            raise FormatError(f"Percentage value has an unexpected character '{ch}'", raw, context)

    if not terminated:
        raise FormatError("Percentage value must end with a space or '%'", raw, context)
    integer_text = "".join(integer_chars)
    if "," in integer_text:
        _check_percent_grouping(integer_text, raw, context)
    integer_digits = integer_text.replace(",", "")
    if not integer_digits and not fraction_digits:
        raise FormatError("Percentage value has no digits", raw, context)

    value = float(f"{integer_digits or '0'}.{''.join(fraction_digits) or '0'}")
    return -value if negative else value


def _check_percent_grouping(integer_text: str, raw: str, context: RowContext):
    groups = integer_text.split(",")
    first = groups[0]
    if first == "":
        raise FormatError("Percentage value starts with a comma", raw, context)
    if len(first) > 3:
        raise FormatError("Percentage value has more than 3 digits before the first comma", raw, context)
    for group in groups[1:]:
        if group == "":
            raise FormatError("Percentage value has an empty digit group between commas", raw, context)
        if len(group) != 3:
            raise FormatError(f"Percentage digit group '{group}' after a comma must have exactly 3 digits", raw, context)


def parse_report_date(raw: str, context: RowContext) -> date:
    cleaned = raw.replace("$", "").replace(",", "").replace(" ", "").strip()
    parts = cleaned.split("/")
    if len(parts) != 3 or not all(is_ascii_digits(p) for p in parts):
        raise FormatError(f"Invalid date '{cleaned}', {_DATE_FORMAT_HINT}", raw, context)

    day_str, month_str, year_str = parts
    year = int(year_str)
    if len(year_str) == 2:
        year += config.TWO_DIGIT_YEAR_BASE
    elif len(year_str) != 4:
        raise FormatError(f"Invalid year in date '{cleaned}', {_DATE_FORMAT_HINT}", raw, context)

    try:
        return date(year, int(month_str), int(day_str))
    except ValueError as e:
        raise FormatError(f"Invalid date '{cleaned}' ({e}), {_DATE_FORMAT_HINT}", raw, context) from e


def parse_fund_name(raw: str, context: RowContext) -> str:
    name = raw.strip()
    if not name:
        raise FormatError("Fund name is empty", raw, context)
    return name


def format_cents(cents: int) -> str:
    """Renders cents the way the bank prints them, e.g. 123456 -> "$1,234.56"."""
    sign = "-" if cents < 0 else ""
    units, remainder = divmod(abs(cents), 100)
    return f"{sign}${units:,}.{remainder:02d}"
