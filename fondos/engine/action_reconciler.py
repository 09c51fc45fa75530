# fondos/engine/action_reconciler.py
import logging
from collections import Counter
from typing import List

from fondos.domain.ledger import Ledger
from fondos.domain.records import Action, normalize_fund_name
from fondos.domain.results import IngestionOutcome
from fondos.parsers.record_factory import ActionObservation

logger = logging.getLogger(__name__)


class ActionReconciler:
    """
    Merges batches of observed actions into the ledger without double counting.

    The bank repeats movements across overlapping pages and the same (date, amount)
    can legitimately occur more than once in a single page. Within one batch every
    occurrence is real, so for each (fund, date, change) signature the ledger must
    end up holding at least as many copies as the batch shows. Copies already
    stored are never removed: a batch showing fewer occurrences than the ledger
    holds is treated as a partial view.
    """

    def __init__(self, ledger: Ledger):
        self.ledger = ledger

    def reconcile_batch(self, batch: List[ActionObservation]) -> IngestionOutcome:
        outcome = IngestionOutcome()
        observed = Counter(
            (normalize_fund_name(obs.fund_name), obs.action.date, obs.action.change) for obs in batch
        )
        for (fund_key, action_date, change), batch_count in observed.items():
            series = self.ledger.find_series(fund_key)
            if series is None:
                series = self.ledger.get_or_create_series(fund_key)
                outcome.series_created.append(fund_key)

            stored_count = series.count_actions(action_date, change)
            missing = max(0, batch_count - stored_count)
            for _ in range(missing):
                series.actions.append(Action(date=action_date, change=change))
            outcome.records_added += missing
            if missing:
                logger.debug(f"Added {missing} action(s) {change} on {action_date} to '{fund_key}' "
                             f"(batch shows {batch_count}, ledger held {stored_count}).")
        return outcome

    def reconcile_batches(self, batches: List[List[ActionObservation]]) -> IngestionOutcome:
        outcome = IngestionOutcome()
        for index, batch in enumerate(batches, start=1):
            batch_outcome = self.reconcile_batch(batch)
            logger.info(f"Movements page {index}: {len(batch)} rows, {batch_outcome.records_added} new actions.")
            outcome.absorb(batch_outcome)
        return outcome
