# fondos/processing/transfer_linker.py
import logging
from datetime import date
from typing import List, Optional, Set, Tuple

import fondos.config as config
from fondos.domain.ledger import Ledger
from fondos.domain.records import Series
from fondos.domain.results import ConsistencyMismatch
from fondos.utils.type_utils import format_cents

logger = logging.getLogger(__name__)


class TransferConsistencyChecker:
    """
    Looks for the other leg of every recent movement in funds that still hold money.
    A transfer between portfolios shows up as a withdrawal in one fund and a
    contribution of the same amount on the same day in another. A movement with no
    opposite leg anywhere is reported together with the fund most likely meant as
    its counterpart. The ledger is never modified.
    """

    def __init__(self, cutover_date: Optional[date] = None):
        self.cutover_date = cutover_date if cutover_date is not None else config.TRANSFER_CHECK_CUTOVER_DATE

    def check(self, ledger: Ledger) -> Tuple[int, List[ConsistencyMismatch]]:
        """
        Returns:
            Tuple of (number_of_actions_checked, mismatches)
        """
        signatures: Set[Tuple[date, int]] = {a.signature() for s in ledger.series for a in s.actions}
        checked = 0
        mismatches: List[ConsistencyMismatch] = []

        for series in ledger.series:
            latest = series.latest_balance()
            if latest is None or latest.balance == 0:
                continue
            for action in series.actions:
                if action.date <= self.cutover_date:
                    continue
                checked += 1
                if (action.date, -action.change) in signatures:
                    continue
                mismatch = self._describe_mismatch(ledger, series, latest.balance, action.date, action.change)
                mismatches.append(mismatch)
                closest = (f"'{mismatch.closest_fund_name}' ({format_cents(mismatch.closest_fund_balance)})"
                           if mismatch.closest_fund_name else "no other fund")
                logger.warning(
                    f"No counterpart for {format_cents(action.change)} in '{series.fund_name}' on "
                    f"{action.date.isoformat()}. Closest balance to {format_cents(mismatch.expected_counterpart_balance)}: {closest}."
                )

        logger.info(f"Transfer consistency check: {checked} actions checked, {len(mismatches)} without counterpart.")
        return checked, mismatches

    def _describe_mismatch(self, ledger: Ledger, series: Series, balance: int,
                           action_date: date, change: int) -> ConsistencyMismatch:
        target = balance - change
        best_name: Optional[str] = None
        best_balance: Optional[int] = None
        for other in ledger.series:
            if other is series:
                continue
            other_latest = other.latest_balance()
            if other_latest is None:
                continue
            if best_balance is None or abs(other_latest.balance - target) < abs(best_balance - target):
                best_name = other.fund_name
                best_balance = other_latest.balance
        return ConsistencyMismatch(
            fund_name=series.fund_name,
            action_date=action_date,
            change=change,
            expected_counterpart_balance=target,
            closest_fund_name=best_name,
            closest_fund_balance=best_balance,
        )
