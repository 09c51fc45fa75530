# fondos/engine/returns_engine.py
import logging
from datetime import date, timedelta
from typing import Iterable, List, Optional

from fondos.domain.errors import ImpossibleDateArithmeticError
from fondos.domain.ledger import Ledger
from fondos.domain.records import Series
from fondos.domain.results import (
    ConsolidatedFigures, FundWindowSeries, UnitValuePoint, VariationPoint, WindowResult
)

logger = logging.getLogger(__name__)


def window_start_date(today: date, window_days: int) -> date:
    try:
        return today - timedelta(days=window_days)
    except OverflowError as e:
        raise ImpossibleDateArithmeticError(today, window_days) from e


def compute_fund_variations(series: Series, start_date: date) -> Optional[FundWindowSeries]:
    """
    Flow-adjusted variation of one fund from its first balance inside the window.

    running_balance starts at the initial balance and only moves by cash flows,
    so for every later balance b the emitted value is the growth since the
    window started with contributions and withdrawals taken out. Actions are
    consumed once, when the first balance dated after them is reached.

    Both formulations below are kept and the one with the smaller magnitude is
    emitted. In integer cents they always agree; the pick only matters if the
    arithmetic ever stops being exact.
    """
    balances = sorted((b for b in series.balances if b.date >= start_date), key=lambda b: b.date)
    if not balances:
        return None
    initial = balances[0]
    actions = sorted((a for a in series.actions if a.date >= initial.date), key=lambda a: a.date)

    result = FundWindowSeries(fund_name=series.fund_name, initial_balance=initial)
    result.variations.append(VariationPoint(date=initial.date, variation=0))

    running_balance = initial.balance
    next_action = 0
    for current in balances[1:]:
        flows = 0
        while next_action < len(actions) and actions[next_action].date < current.date:
            flows += actions[next_action].change
            next_action += 1
        adjusted_current_balance = current.balance - flows
        variation1 = adjusted_current_balance - running_balance
        running_balance += flows
        variation2 = current.balance - running_balance
        variation = variation1 if abs(variation1) <= abs(variation2) else variation2
        result.variations.append(VariationPoint(date=current.date, variation=variation))
    return result


def compute_unit_value_returns(series: Series, start_date: date) -> List[UnitValuePoint]:
    """Percent change of the unit value against the first one inside the window. Not flow adjusted."""
    values = sorted((v for v in series.fund_values if v.date >= start_date), key=lambda v: v.date)
    if not values:
        return []
    base = values[0].unit_value
    if base == 0:
        raise ZeroDivisionError(f"Unit value of '{series.fund_name}' is zero on {values[0].date.isoformat()}")
    return [UnitValuePoint(date=v.date, percent=(v.unit_value - base) / base * 100.0) for v in values]


def invested_amount(series: Series, fund_series: FundWindowSeries) -> int:
    initial = fund_series.initial_balance
    return initial.balance + sum(a.change for a in series.actions if a.date >= initial.date)


class ReturnsEngine:
    """Computes per-window variation, consolidated and unit value figures from a read-only ledger."""

    def __init__(self, ledger: Ledger, today: date):
        self.ledger = ledger
        self.today = today

    def compute_window(self, window_days: int) -> WindowResult:
        result = WindowResult(window_days=window_days)
        try:
            start_date = window_start_date(self.today, window_days)
        except ImpossibleDateArithmeticError as e:
            logger.warning(f"Skipping window: {e}")
            result.diagnostics.append(str(e))
            return result
        result.start_date = start_date

        last_total = 0
        invested_total = 0
        for series in self.ledger.series:
            fund_series = compute_fund_variations(series, start_date)
            if fund_series is not None:
                result.fund_series[series.fund_name] = fund_series
                last_total += max(series.balances, key=lambda b: b.date).balance
                invested_total += invested_amount(series, fund_series)

            try:
                unit_points = compute_unit_value_returns(series, start_date)
            except ZeroDivisionError as e:
                logger.warning(f"{window_days}-day window: {e}; unit value return omitted.")
                result.diagnostics.append(str(e))
                unit_points = []
            if unit_points:
                result.unit_value_returns[series.fund_name] = unit_points

        if result.fund_series:
            result.consolidated = ConsolidatedFigures(last_balance_total=last_total, invested_total=invested_total)
        else:
            result.diagnostics.append(f"No fund has a balance on or after {start_date.isoformat()}")
        logger.info(f"{window_days}-day window from {start_date.isoformat()}: "
                    f"{len(result.fund_series)} funds with balances, {len(result.unit_value_returns)} with unit values.")
        return result

    def compute_windows(self, windows: Iterable[int]) -> List[WindowResult]:
        return [self.compute_window(days) for days in windows]
