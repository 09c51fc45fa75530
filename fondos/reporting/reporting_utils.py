# fondos/reporting/reporting_utils.py
import math
from datetime import date
from typing import Optional

from fondos.utils.type_utils import format_cents

__all__ = ["format_cents", "format_percent", "format_report_date", "NOT_AVAILABLE"]

NOT_AVAILABLE = "NA"


def format_percent(value: Optional[float], decimals: int = 2) -> str:
    """NaN and None render as NA, the marker the bank uses for missing returns."""
    if value is None or math.isnan(value):
        return NOT_AVAILABLE
    return f"{value:,.{decimals}f}%"


def format_report_date(dt: Optional[date]) -> str:
    """Formats a date as DD/MM/YYYY, as printed in the bank reports."""
    if dt is None:
        return ""
    return dt.strftime("%d/%m/%Y")
