# fondos/domain/records.py
import math
from dataclasses import dataclass, field, fields
from datetime import date
from typing import List, Optional

from .enums import ReturnPeriod


def normalize_fund_name(raw_name: str) -> str:
    """Fund names are matched case-insensitively and without surrounding whitespace."""
    return raw_name.strip().lower()


@dataclass
class Balance:
    date: date
    balance: int  # cents


@dataclass
class Action:
    date: date
    change: int  # cents, signed

    def signature(self):
        return (self.date, self.change)


@dataclass
class FundValue:
    date: date
    fund_value: int  # cents
    unit_value: int  # cents


@dataclass
class Series:
    fund_name: str
    balances: List[Balance] = field(default_factory=list)
    actions: List[Action] = field(default_factory=list)
    fund_values: List[FundValue] = field(default_factory=list)

    def sort_records(self):
        # Stable sort keeps insertion order among actions sharing a date
        self.balances.sort(key=lambda b: b.date)
        self.actions.sort(key=lambda a: a.date)
        self.fund_values.sort(key=lambda v: v.date)

    def balance_on(self, on_date: date) -> Optional[Balance]:
        for balance in self.balances:
            if balance.date == on_date:
                return balance
        return None

    def fund_value_on(self, on_date: date) -> Optional[FundValue]:
        for value in self.fund_values:
            if value.date == on_date:
                return value
        return None

    def latest_balance(self) -> Optional[Balance]:
        if not self.balances:
            return None
        return max(self.balances, key=lambda b: b.date)

    def count_actions(self, on_date: date, change: int) -> int:
        return sum(1 for a in self.actions if a.date == on_date and a.change == change)


@dataclass
class FundReturns:
    """
    Published return percentages for one fund, merged from both sub-tables of
    the fund returns report. NaN means the bank reported "NA" or the value was
    never observed, which is not the same as 0.
    """
    fund_name: str
    roe_next_to_last_year: float = math.nan
    roe_last_year: float = math.nan
    roe_year_to_date: float = math.nan
    roe_day: float = math.nan
    roe_day_annualized: float = math.nan
    roe_month: float = math.nan
    roe_trimester: float = math.nan
    roe_semester: float = math.nan
    roe_year: float = math.nan
    roe_two_years: float = math.nan
    roe_total: float = math.nan

    def get(self, period: ReturnPeriod) -> float:
        return getattr(self, period.value)

    def set(self, period: ReturnPeriod, value: float):
        setattr(self, period.value, value)

    def observed_periods(self) -> List[ReturnPeriod]:
        return [p for p in ReturnPeriod if not math.isnan(self.get(p))]


RETURN_FIELD_NAMES = [f.name for f in fields(FundReturns) if f.name != "fund_name"]
