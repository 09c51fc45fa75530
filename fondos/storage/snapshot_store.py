# fondos/storage/snapshot_store.py
import logging
import os
import pickle
from datetime import datetime
from typing import Optional

import fondos.config as config
from fondos.domain.errors import SnapshotError
from fondos.domain.ledger import Ledger

logger = logging.getLogger(__name__)


class SnapshotStore:
    """
    Loads and persists the ledger as a single binary snapshot.

    Saving never leaves a half-written snapshot in place: the new ledger is
    written to a temporary file, the current snapshot is renamed to a
    timestamped backup, and the temporary file is moved into place.
    """

    def __init__(self, file_path: str = config.LEDGER_FILE_PATH):
        self.file_path = file_path
        stem, suffix = os.path.splitext(file_path)
        self._stem = stem
        self._suffix = suffix
        self.temp_path = f"{stem}{config.LEDGER_TEMP_SUFFIX}"

    def exists(self) -> bool:
        return os.path.exists(self.file_path)

    def load(self) -> Ledger:
        if not self.exists():
            logger.warning(f"No ledger snapshot at {self.file_path}. Starting a new ledger.")
            return Ledger()
        try:
            with open(self.file_path, 'rb') as f:
                ledger = pickle.load(f)
        except (pickle.UnpicklingError, EOFError, AttributeError, ImportError, ValueError, IndexError) as e:
            raise SnapshotError(f"Error reading the ledger snapshot {self.file_path}: {e}") from e
        if not isinstance(ledger, Ledger):
            raise SnapshotError(f"{self.file_path} does not contain a ledger (found {type(ledger).__name__}).")
        logger.info(f"Loaded ledger with {len(ledger)} funds from {self.file_path}.")
        return ledger

    def backup_path_for(self, now: datetime) -> str:
        """Timestamped backup name; a counter is appended when that second is already taken."""
        base = f"{self._stem}_backup{now.strftime(config.LEDGER_BACKUP_TIMESTAMP_FORMAT)}"
        candidate = f"{base}{self._suffix}"
        counter = 1
        while os.path.exists(candidate):
            candidate = f"{base}_{counter}{self._suffix}"
            counter += 1
        return candidate

    def save(self, ledger: Ledger, now: Optional[datetime] = None) -> Optional[str]:
        """Writes the snapshot and returns the backup path, or None when there was nothing to back up."""
        directory = os.path.dirname(self.file_path)
        if directory:
            os.makedirs(directory, exist_ok=True)

        with open(self.temp_path, 'wb') as f:
            pickle.dump(ledger, f, protocol=pickle.HIGHEST_PROTOCOL)
            f.flush()
            os.fsync(f.fileno())

        backup_path = None
        if self.exists():
            backup_path = self.backup_path_for(now or datetime.now())
            os.rename(self.file_path, backup_path)
            logger.info(f"Previous snapshot kept as {backup_path}.")
        os.replace(self.temp_path, self.file_path)
        logger.info(f"Ledger snapshot written to {self.file_path}.")
        return backup_path

    def save_if_changed(self, ledger: Ledger, original_hash: str, now: Optional[datetime] = None) -> bool:
        if ledger.structural_hash() == original_hash:
            logger.info("Data remains the same. Files remain unchanged.")
            return False
        self.save(ledger, now=now)
        return True
