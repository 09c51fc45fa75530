# fondos/domain/errors.py
from dataclasses import dataclass
from datetime import date
from typing import Optional

from fondos.utils.row_context import RowContext


class FondosError(Exception):
    """Base class for errors raised by the ledger engines."""


class FormatError(FondosError):
    """A report field does not follow its grammar. Aborts the ingestion pass."""

    def __init__(self, message: str, raw: Optional[str] = None, context: Optional[RowContext] = None):
        self.message = message
        self.raw = raw
        self.context = context
        super().__init__(self._render())

    def _render(self) -> str:
        text = self.message
        if self.raw is not None:
            text = f"{text} (got {self.raw!r})"
        if self.context is not None:
            text = f"{self.context.describe()}: {text}"
        return text


class UnrecognizedCategoryError(FormatError):
    """A movement label that maps to no known action direction."""


class SnapshotError(FondosError):
    """The ledger snapshot cannot be read back as a ledger."""


class ImpossibleDateArithmeticError(FondosError):
    def __init__(self, today: date, window_days: int):
        self.today = today
        self.window_days = window_days
        super().__init__(f"Cannot compute the start of a {window_days}-day window ending {today.isoformat()}")


@dataclass
class SemanticWarning:
    """A stored value was overwritten by a different re-observation of the same date."""
    fund_name: str
    record_kind: str
    record_date: date
    previous_value: str
    new_value: str

    def message(self) -> str:
        return (f"{self.record_kind} for '{self.fund_name}' on {self.record_date.isoformat()} changed "
                f"from {self.previous_value} to {self.new_value}")
