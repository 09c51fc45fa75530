# fondos/domain/enums.py
from enum import Enum, auto


class ReportSection(Enum):
    ACCOUNT_STATUS = "account status"
    MOVEMENTS = "movements"
    FUND_RETURNS_YEARLY = "fund returns (yearly)"
    FUND_RETURNS_PERIODIC = "fund returns (periodic)"


class ScanState(Enum):
    HEADER = auto()
    TABLE = auto()
    FOOTER = auto()
    SKIP_SUB_HEADER = auto()
    INTERMISSION = auto()
    SECOND_TABLE = auto()


class ReturnPeriod(Enum):
    """Published return percentages, in report column order."""
    NEXT_TO_LAST_YEAR = "roe_next_to_last_year"
    LAST_YEAR = "roe_last_year"
    YEAR_TO_DATE = "roe_year_to_date"
    DAY = "roe_day"
    DAY_ANNUALIZED = "roe_day_annualized"
    MONTH = "roe_month"
    TRIMESTER = "roe_trimester"
    SEMESTER = "roe_semester"
    YEAR = "roe_year"
    TWO_YEARS = "roe_two_years"
    TOTAL = "roe_total"
