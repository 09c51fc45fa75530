# fondos/cli.py
import argparse
from datetime import date

import fondos.config as config  # For default paths and settings


def _positive_days(value: str) -> int:
    days = int(value)
    if days <= 0:
        raise argparse.ArgumentTypeError(f"window length must be a positive number of days, got {value}")
    return days


def parse_arguments(argv=None):
    """Parses command line arguments for the application."""
    parser = argparse.ArgumentParser(description="Fund ledger reconciliation and returns")

    # Files
    parser.add_argument("--ledger", default=config.LEDGER_FILE_PATH, help="Path to the ledger snapshot.")
    parser.add_argument("--input", default=None,
                        help="File with the pasted reports (account status, movements, fund returns). Defaults to stdin.")
    parser.add_argument("--returns-csv", nargs="?", const=config.FUND_RETURNS_CSV_PATH, default=None,
                        help="Write the published fund returns to a CSV file (default path from config if none given).")
    parser.add_argument("--pdf-output-file", nargs="?", const=config.PERFORMANCE_PDF_PATH, default=None,
                        help="Write a PDF performance report (default path from config if none given).")

    # Run settings
    parser.add_argument("--today", type=date.fromisoformat, default=None,
                        help="Run date (YYYY-MM-DD) used for balances and windows. Defaults to the current date.")
    parser.add_argument("--windows", type=_positive_days, nargs="+", default=None, metavar="DAYS",
                        help="Lookback windows in days. Defaults to the configured windows.")
    parser.add_argument("--no-consistency-check", dest="consistency_check", action="store_false",
                        help="Skip the cross-fund transfer check.")
    parser.add_argument("--dry-run", action="store_true", help="Ingest and report without writing the snapshot.")

    # Reporting options
    parser.add_argument("--ledger-overview", action="store_true", help="Print record counts and latest balance per fund.")
    parser.add_argument("--fund-actions", type=str, metavar="FUND", help="Print every stored action of one fund.")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging verbosity.")

    args = parser.parse_args(argv)

    if args.today is None:
        args.today = date.today()
    if args.windows is None:
        args.windows = list(config.LOOKBACK_WINDOWS_DAYS)
    return args
