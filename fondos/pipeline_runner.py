# fondos/pipeline_runner.py
import logging
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional

import fondos.config as config
from fondos.domain.errors import FondosError
from fondos.domain.ledger import Ledger
from fondos.domain.results import ConsistencyMismatch, IngestionOutcome, ReturnsReport, WindowResult
from fondos.engine.returns_engine import ReturnsEngine
from fondos.parsers.parsing_orchestrator import ParsingOrchestrator
from fondos.processing.transfer_linker import TransferConsistencyChecker
from fondos.storage.snapshot_store import SnapshotStore

logger = logging.getLogger(__name__)


class ProcessingOutput:
    """
    Encapsulates the results of one run: the merged ledger and everything derived from it.
    """
    def __init__(self,
                 ledger: Ledger,
                 ingestion_outcome: IngestionOutcome,
                 returns_report: ReturnsReport,
                 window_results: List[WindowResult],
                 consistency_mismatches: List[ConsistencyMismatch],
                 ledger_changed: bool,
                 persisted: bool):
        self.ledger = ledger
        self.ingestion_outcome = ingestion_outcome
        self.returns_report = returns_report
        self.window_results = window_results
        self.consistency_mismatches = consistency_mismatches
        self.ledger_changed = ledger_changed
        self.persisted = persisted


def run_core_processing_pipeline(
    input_lines: Iterable[str],
    run_date: date,
    ledger_file_path: Optional[str] = None,
    lookback_windows: Optional[List[int]] = None,
    check_consistency: bool = True,
    persist: bool = True,
    prompt: Optional[Callable[[str], None]] = None,
    now: Optional[datetime] = None,
) -> ProcessingOutput:
    """
    Runs one batch: load the snapshot, ingest the pasted reports, persist if the
    ledger changed, then compute returns and the transfer consistency check on
    the read-only result.
    A parsing error aborts the run before anything is written.
    """
    ledger_file_path = ledger_file_path or config.LEDGER_FILE_PATH
    windows = lookback_windows if lookback_windows is not None else config.LOOKBACK_WINDOWS_DAYS
    store = SnapshotStore(ledger_file_path)

    ledger = store.load()
    original_hash = ledger.structural_hash()

    logger.info(f"Starting ingestion for run date {run_date.isoformat()}...")
    orchestrator = ParsingOrchestrator(ledger, run_date, prompt=prompt)
    try:
        ingestion_outcome, returns_report = orchestrator.run_ingestion(input_lines)
    except FondosError as e:
        logger.critical(f"Ingestion failed: {e}. Nothing was saved; fix the input and run again.")
        raise
    except Exception as e:
        logger.critical(f"Ingestion failed with unexpected error: {e}", exc_info=True)
        raise

    ledger_changed = ledger.structural_hash() != original_hash
    persisted = False
    if not persist:
        logger.info("Persistence disabled for this run.")
    else:
        persisted = store.save_if_changed(ledger, original_hash, now=now)

    logger.info(f"Computing returns for windows {windows}...")
    window_results = ReturnsEngine(ledger, run_date).compute_windows(windows)

    consistency_mismatches: List[ConsistencyMismatch] = []
    if check_consistency:
        _, consistency_mismatches = TransferConsistencyChecker().check(ledger)

    return ProcessingOutput(
        ledger=ledger,
        ingestion_outcome=ingestion_outcome,
        returns_report=returns_report,
        window_results=window_results,
        consistency_mismatches=consistency_mismatches,
        ledger_changed=ledger_changed,
        persisted=persisted,
    )
