# fondos/reporting/diagnostic_reports.py
import logging
from typing import List

from fondos.domain.ledger import Ledger
from fondos.domain.records import Series
from fondos.domain.results import ConsistencyMismatch, IngestionOutcome
from .reporting_utils import format_cents, format_report_date

logger = logging.getLogger(__name__)


def print_ledger_overview(ledger: Ledger):
    """Prints record counts and the latest balance of every fund."""
    print("\n--- Ledger Overview ---")
    if not ledger.series:
        print("  Ledger is empty.")
        return
    print(f"  {'Fund':<45} {'Balances':>9} {'Actions':>8} {'Values':>7} {'Latest balance':>18}")
    for series in sorted(ledger.series, key=lambda s: s.fund_name):
        latest = series.latest_balance()
        latest_text = f"{format_cents(latest.balance)} ({format_report_date(latest.date)})" if latest else "-"
        print(f"  {series.fund_name:<45} {len(series.balances):>9} {len(series.actions):>8} "
              f"{len(series.fund_values):>7} {latest_text:>18}")


def print_fund_actions(series: Series):
    print(f"\n--- Actions of '{series.fund_name}' ---")
    for action in series.actions:
        print(f"  {format_report_date(action.date)}  {format_cents(action.change):>16}")


def print_ingestion_warnings(outcome: IngestionOutcome):
    if not outcome.warnings:
        return
    print(f"\n--- {len(outcome.warnings)} value(s) changed on re-observation ---")
    for warning in outcome.warnings:
        print(f"  {warning.message()}")


def print_consistency_mismatches(mismatches: List[ConsistencyMismatch]):
    if not mismatches:
        return
    print(f"\n--- {len(mismatches)} movement(s) without a transfer counterpart ---")
    for m in mismatches:
        closest = (f"{m.closest_fund_name} ({format_cents(m.closest_fund_balance)})"
                   if m.closest_fund_name is not None else "none")
        print(f"  {format_report_date(m.action_date)}  {m.fund_name:<40} {format_cents(m.change):>16}  "
              f"closest to {format_cents(m.expected_counterpart_balance)}: {closest}")
