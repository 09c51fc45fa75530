# fondos/utils/row_context.py
from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class RowContext:
    """
    Where a value came from: report section, line number, the raw line and
    the fields parsed so far. Each parsing step extends it with with_field(),
    so an error raised deep inside a row still names everything that led to it.
    """
    section: str
    line_number: int
    raw_line: str
    fields: Tuple[Tuple[str, str], ...] = ()

    def with_field(self, name: str, value: str) -> "RowContext":
        return replace(self, fields=self.fields + ((name, value),))

    def describe(self) -> str:
        text = f"{self.section}, line {self.line_number}: {self.raw_line!r}"
        if self.fields:
            pairs = ", ".join(f"{name} = '{value}'" for name, value in self.fields)
            text += f" ({pairs})"
        return text
