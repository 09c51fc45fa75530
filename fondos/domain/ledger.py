# fondos/domain/ledger.py
import hashlib
import json
import logging
from dataclasses import asdict
from typing import List, Optional

from .records import Series, normalize_fund_name

logger = logging.getLogger(__name__)


class Ledger:
    """Per-fund time series of balances, actions and fund values."""

    def __init__(self, series: Optional[List[Series]] = None):
        self.series: List[Series] = series if series is not None else []

    def find_series(self, fund_name: str) -> Optional[Series]:
        key = normalize_fund_name(fund_name)
        for series in self.series:
            if series.fund_name == key:
                return series
        return None

    def get_or_create_series(self, fund_name: str) -> Series:
        existing = self.find_series(fund_name)
        if existing is not None:
            return existing
        key = normalize_fund_name(fund_name)
        created = Series(fund_name=key)
        self.series.append(created)
        logger.info(f"Created new series for fund '{key}'.")
        return created

    def fund_names(self) -> List[str]:
        return [s.fund_name for s in self.series]

    def sort_all(self):
        for series in self.series:
            series.sort_records()

    def structural_hash(self) -> str:
        """
        Digest of the ledger contents. Two ledgers holding the same records in the
        same order hash equal, which is what decides whether a run needs to persist.
        """
        payload = [asdict(s) for s in self.series]
        canonical = json.dumps(payload, sort_keys=True, default=str, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    def __len__(self):
        return len(self.series)
