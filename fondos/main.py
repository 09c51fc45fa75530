# fondos/main.py
import logging
import sys

# Configuration and CLI
import fondos.config as config
from fondos.cli import parse_arguments

# Core pipeline runner
from fondos.domain.errors import FondosError
from fondos.pipeline_runner import run_core_processing_pipeline, ProcessingOutput

# Reporting
from fondos.reporting.console_reporter import print_fund_returns, print_window_results
from fondos.reporting.diagnostic_reports import (
    print_consistency_mismatches,
    print_fund_actions,
    print_ingestion_warnings,
    print_ledger_overview,
)
from fondos.reporting.pdf_generator import PerformanceReportGenerator
from fondos.reporting.returns_table import write_fund_returns_csv

logger = logging.getLogger(__name__)


def configure_logging(level_name: str = config.LOG_LEVEL):
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=config.LOG_FORMAT)


def main_application(argv=None):
    """
    Main application entry point.
    Reads the pasted reports, updates the ledger and prints the performance summary.
    """
    args = parse_arguments(argv)
    configure_logging(args.log_level)

    logger.info("Starting fund ledger run...")

    input_stream = sys.stdin
    try:
        if args.input:
            input_stream = open(args.input, 'r', encoding='utf-8')
        prompt = print if input_stream is sys.stdin and sys.stdin.isatty() else None
        results: ProcessingOutput = run_core_processing_pipeline(
            input_lines=input_stream,
            run_date=args.today,
            ledger_file_path=args.ledger,
            lookback_windows=args.windows,
            check_consistency=args.consistency_check,
            persist=not args.dry_run,
            prompt=prompt,
        )
    except FondosError as e:
        print(f"\n{e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        logger.critical(f"File error: {e}. Exiting.")
        sys.exit(1)
    except Exception as e:
        logger.critical(f"Core processing pipeline failed: {e}. Exiting.", exc_info=True)
        sys.exit(1)
    finally:
        if input_stream is not sys.stdin:
            input_stream.close()

    print_ingestion_warnings(results.ingestion_outcome)
    if args.ledger_overview:
        print_ledger_overview(results.ledger)
    if args.fund_actions:
        series = results.ledger.find_series(args.fund_actions)
        if series is None:
            logger.error(f"Fund '{args.fund_actions}' is not in the ledger.")
        else:
            print_fund_actions(series)

    print_window_results(results.window_results, args.today)
    print_fund_returns(results.returns_report)
    print_consistency_mismatches(results.consistency_mismatches)

    if args.returns_csv:
        write_fund_returns_csv(results.returns_report, args.returns_csv)

    if args.pdf_output_file:
        pdf_generator = PerformanceReportGenerator(
            window_results=results.window_results,
            returns_report=results.returns_report,
            run_date=args.today,
            consistency_mismatches=results.consistency_mismatches,
        )
        pdf_generator.generate_report(args.pdf_output_file)

    logger.info("Processing finished.")
    if results.ingestion_outcome.warnings:
        logger.warning(f"There were {len(results.ingestion_outcome.warnings)} changed values. Review the output carefully.")


if __name__ == "__main__":
    main_application()
