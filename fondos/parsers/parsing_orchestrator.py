# fondos/parsers/parsing_orchestrator.py
import logging
from datetime import date
from typing import Callable, Iterable, Optional, Tuple

from fondos.domain.ledger import Ledger
from fondos.domain.results import IngestionOutcome, ReturnsReport
from fondos.engine.merge_engine import LedgerMerger, merge_fund_returns
from .account_status_parser import parse_account_status
from .fund_returns_parser import parse_fund_returns
from .line_source import LineSource
from .movements_parser import parse_movement_pages
from .record_factory import RecordFactory

logger = logging.getLogger(__name__)

ACCOUNT_STATUS_PROMPT = ("Paste the account status here. You can enter EOF if you have no data, "
                         "or Ctrl + C to close this program:")
MOVEMENTS_PROMPT = ("Paste the 'Ultimos Movimientos' pages here, one after the other. "
                    "Enter EOF when you are done, or Ctrl + C to close this program:")
FUND_RETURNS_PROMPT = ("Paste the fund returns page here. You can enter EOF if you have no data, "
                       "or Ctrl + C to close this program:")


class ParsingOrchestrator:
    """
    Runs the three ingestion passes over one stream of pasted lines, in order:
    account status, movements, fund returns. Each pass parses all of its rows
    before merging any of them, so a FormatError leaves the ledger untouched by
    that pass.
    """

    def __init__(self, ledger: Ledger, run_date: date, prompt: Optional[Callable[[str], None]] = None):
        self.ledger = ledger
        self.run_date = run_date
        self.prompt = prompt
        self.factory = RecordFactory()
        self.merger = LedgerMerger(ledger, run_date)

    def _announce(self, message: str):
        if self.prompt is not None:
            self.prompt(message)

    def ingest_account_status(self, lines: LineSource) -> IngestionOutcome:
        self._announce(ACCOUNT_STATUS_PROMPT)
        observations = self.factory.create_balances(parse_account_status(lines))
        return self.merger.merge_balances(observations)

    def ingest_movements(self, lines: LineSource) -> IngestionOutcome:
        self._announce(MOVEMENTS_PROMPT)
        batches = self.factory.create_action_batches(parse_movement_pages(lines))
        return self.merger.merge_action_batches(batches)

    def ingest_fund_returns(self, lines: LineSource) -> Tuple[IngestionOutcome, ReturnsReport]:
        self._announce(FUND_RETURNS_PROMPT)
        yearly_rows, periodic_rows = parse_fund_returns(lines)
        yearly = [self.factory.create_fund_value(r) for r in yearly_rows]
        periodic = [self.factory.create_periodic_returns(r) for r in periodic_rows]
        outcome = self.merger.merge_fund_values(yearly)
        return outcome, merge_fund_returns(yearly, periodic)

    def run_ingestion(self, raw_lines: Iterable[str]) -> Tuple[IngestionOutcome, ReturnsReport]:
        """
        Returns:
            Tuple of (combined IngestionOutcome, ReturnsReport for this run)
        """
        lines = LineSource(raw_lines)
        outcome = IngestionOutcome()

        logger.info("Ingesting account status...")
        outcome.absorb(self.ingest_account_status(lines))

        logger.info("Ingesting movements...")
        outcome.absorb(self.ingest_movements(lines))

        logger.info("Ingesting fund returns...")
        fund_value_outcome, returns_report = self.ingest_fund_returns(lines)
        outcome.absorb(fund_value_outcome)

        self.ledger.sort_all()
        logger.info(f"Ingestion completed: {outcome.records_added} records added, {outcome.records_updated} updated, "
                    f"{len(outcome.series_created)} new funds, {len(outcome.warnings)} warnings.")
        return outcome, returns_report
