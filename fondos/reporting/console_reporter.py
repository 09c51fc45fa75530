# fondos/reporting/console_reporter.py
import logging
from datetime import date
from typing import List

from fondos.domain.enums import ReturnPeriod
from fondos.domain.results import ReturnsReport, WindowResult
from .reporting_utils import format_cents, format_percent, format_report_date

logger = logging.getLogger(__name__)


def print_window_results(window_results: List[WindowResult], run_date: date):
    logger.info(f"Generating console performance summary for {run_date.isoformat()}...")
    print(f"\n--- Fund performance as of {format_report_date(run_date)} ---")
    for result in window_results:
        print(f"\n  Last {result.window_days} days")
        if result.skipped:
            for diagnostic in result.diagnostics:
                print(f"    skipped: {diagnostic}")
            continue
        print(f"    From {format_report_date(result.start_date)}")
        for fund_name in sorted(result.fund_series):
            fund_series = result.fund_series[fund_name]
            print(f"    {fund_name:<45} since {format_report_date(fund_series.initial_balance.date)}: "
                  f"{format_cents(fund_series.latest_variation):>16}")
        if result.consolidated is not None:
            c = result.consolidated
            print(f"    {'Total':<45} invested {format_cents(c.invested_total)}, now {format_cents(c.last_balance_total)}, "
                  f"profit {format_cents(c.profit)} ({format_percent(c.profit_percent)})")
        for fund_name in sorted(result.unit_value_returns):
            points = result.unit_value_returns[fund_name]
            print(f"    {fund_name:<45} unit value {format_percent(points[-1].percent, decimals=3)} "
                  f"since {format_report_date(points[0].date)}")
        for diagnostic in result.diagnostics:
            print(f"    note: {diagnostic}")


def print_fund_returns(report: ReturnsReport):
    if not report.by_fund:
        return
    print("\n--- Published fund returns ---")
    headers = ["2y ago", "Last y", "YTD", "Day", "Day EA", "Month", "Trim", "Sem", "Year", "2y", "Total"]
    print(f"  {'Fund':<40}" + "".join(f"{h:>10}" for h in headers))
    for fund_returns in report.sorted_funds():
        values = [format_percent(fund_returns.get(period), decimals=3) for period in ReturnPeriod]
        print(f"  {fund_returns.fund_name:<40}" + "".join(f"{v:>10}" for v in values))
