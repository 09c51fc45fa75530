# fondos/domain/results.py
import logging
import math
from dataclasses import dataclass, field, KW_ONLY
from datetime import date
from typing import Dict, List, Optional

from .errors import SemanticWarning
from .records import Balance, FundReturns

logger = logging.getLogger(__name__)


@dataclass
class IngestionOutcome:
    """What one ingestion pass changed, plus the recoverable warnings it raised."""
    _: KW_ONLY
    records_added: int = 0
    records_updated: int = 0
    series_created: List[str] = field(default_factory=list)
    warnings: List[SemanticWarning] = field(default_factory=list)

    def absorb(self, other: "IngestionOutcome"):
        self.records_added += other.records_added
        self.records_updated += other.records_updated
        self.series_created.extend(other.series_created)
        self.warnings.extend(other.warnings)


@dataclass
class VariationPoint:
    date: date
    variation: int  # cents of growth since the window start, flows removed


@dataclass
class UnitValuePoint:
    date: date
    percent: float


@dataclass
class FundWindowSeries:
    fund_name: str
    initial_balance: Balance
    variations: List[VariationPoint] = field(default_factory=list)

    @property
    def latest_variation(self) -> int:
        return self.variations[-1].variation if self.variations else 0


@dataclass
class ConsolidatedFigures:
    last_balance_total: int
    invested_total: int

    @property
    def profit(self) -> int:
        return self.last_balance_total - self.invested_total

    @property
    def profit_percent(self) -> float:
        if self.invested_total == 0:
            return math.nan
        return self.profit / self.invested_total * 100.0


@dataclass
class WindowResult:
    window_days: int
    _: KW_ONLY
    start_date: Optional[date] = None
    fund_series: Dict[str, FundWindowSeries] = field(default_factory=dict)
    unit_value_returns: Dict[str, List[UnitValuePoint]] = field(default_factory=dict)
    consolidated: Optional[ConsolidatedFigures] = None
    diagnostics: List[str] = field(default_factory=list)

    @property
    def skipped(self) -> bool:
        return self.start_date is None


@dataclass
class ConsistencyMismatch:
    """An outgoing or incoming transfer with no opposite action on the same day in any fund."""
    fund_name: str
    action_date: date
    change: int
    expected_counterpart_balance: int
    closest_fund_name: Optional[str] = None
    closest_fund_balance: Optional[int] = None


@dataclass
class ReturnsReport:
    """Fund returns aggregated for one run; not persisted."""
    by_fund: Dict[str, FundReturns] = field(default_factory=dict)

    def get_or_create(self, fund_name: str) -> FundReturns:
        if fund_name not in self.by_fund:
            self.by_fund[fund_name] = FundReturns(fund_name=fund_name)
        return self.by_fund[fund_name]

    def sorted_funds(self) -> List[FundReturns]:
        return [self.by_fund[name] for name in sorted(self.by_fund)]
