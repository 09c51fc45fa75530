# fondos/engine/merge_engine.py
import logging
from datetime import date
from typing import List

from fondos.domain.errors import SemanticWarning
from fondos.domain.ledger import Ledger
from fondos.domain.records import Balance, FundValue, Series, normalize_fund_name
from fondos.domain.results import IngestionOutcome, ReturnsReport
from fondos.parsers.record_factory import (
    ActionObservation, BalanceObservation, FundValueObservation, PeriodicReturnObservation
)
from fondos.utils.type_utils import format_cents
from .action_reconciler import ActionReconciler

logger = logging.getLogger(__name__)


class LedgerMerger:
    """
    Applies parsed observations to the ledger. Callers hand over fully parsed
    passes, so a malformed row has already aborted the pass before anything here
    mutates the ledger.
    """

    def __init__(self, ledger: Ledger, run_date: date):
        self.ledger = ledger
        self.run_date = run_date
        self.action_reconciler = ActionReconciler(ledger)

    def _series_for(self, fund_name: str, outcome: IngestionOutcome) -> Series:
        series = self.ledger.find_series(fund_name)
        if series is None:
            series = self.ledger.get_or_create_series(fund_name)
            outcome.series_created.append(series.fund_name)
        return series

    def _warn(self, outcome: IngestionOutcome, warning: SemanticWarning):
        outcome.warnings.append(warning)
        logger.warning(warning.message())

    def merge_balances(self, observations: List[BalanceObservation]) -> IngestionOutcome:
        """Upserts one balance per fund for the run date; later rows for the same fund win."""
        outcome = IngestionOutcome()
        for obs in observations:
            series = self._series_for(obs.fund_name, outcome)
            existing = series.balance_on(self.run_date)
            if existing is None:
                series.balances.append(Balance(date=self.run_date, balance=obs.balance))
                outcome.records_added += 1
            elif existing.balance != obs.balance:
                self._warn(outcome, SemanticWarning(
                    fund_name=series.fund_name, record_kind="Balance", record_date=self.run_date,
                    previous_value=format_cents(existing.balance), new_value=format_cents(obs.balance),
                ))
                existing.balance = obs.balance
                outcome.records_updated += 1
        logger.info(f"Merged {len(observations)} balances: {outcome.records_added} new, {outcome.records_updated} changed.")
        return outcome

    def merge_action_batches(self, batches: List[List[ActionObservation]]) -> IngestionOutcome:
        return self.action_reconciler.reconcile_batches(batches)

    def merge_fund_values(self, observations: List[FundValueObservation]) -> IngestionOutcome:
        outcome = IngestionOutcome()
        for obs in observations:
            series = self._series_for(obs.fund_name, outcome)
            incoming = obs.fund_value
            existing = series.fund_value_on(incoming.date)
            if existing is None:
                series.fund_values.append(FundValue(date=incoming.date, fund_value=incoming.fund_value,
                                                    unit_value=incoming.unit_value))
                outcome.records_added += 1
            elif (existing.fund_value, existing.unit_value) != (incoming.fund_value, incoming.unit_value):
                self._warn(outcome, SemanticWarning(
                    fund_name=series.fund_name, record_kind="Fund value", record_date=incoming.date,
                    previous_value=f"{format_cents(existing.fund_value)} / unit {format_cents(existing.unit_value)}",
                    new_value=f"{format_cents(incoming.fund_value)} / unit {format_cents(incoming.unit_value)}",
                ))
                existing.fund_value = incoming.fund_value
                existing.unit_value = incoming.unit_value
                outcome.records_updated += 1
        logger.info(f"Merged {len(observations)} fund values: {outcome.records_added} new, {outcome.records_updated} changed.")
        return outcome


def merge_fund_returns(yearly: List[FundValueObservation],
                       periodic: List[PeriodicReturnObservation]) -> ReturnsReport:
    """Combines both return tables into one aggregate per normalized fund name."""
    report = ReturnsReport()
    for obs in yearly:
        aggregate = report.get_or_create(normalize_fund_name(obs.fund_name))
        for period, value in obs.returns.items():
            aggregate.set(period, value)
    for obs in periodic:
        aggregate = report.get_or_create(normalize_fund_name(obs.fund_name))
        for period, value in obs.returns.items():
            aggregate.set(period, value)
    return report
