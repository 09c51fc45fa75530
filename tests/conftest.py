# tests/conftest.py
import os
import tempfile
from datetime import date

import pytest

from fondos import config as app_config


@pytest.fixture
def temp_data_dir():
    """
    Creates a temporary directory for ledger snapshots and report outputs.
    Yields the path to this directory.
    Cleans up the directory after the test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        os.makedirs(os.path.join(tmpdir, "output"), exist_ok=True)
        yield tmpdir


@pytest.fixture
def mock_config_paths(temp_data_dir, monkeypatch):
    """
    Points every file path in fondos.config at temp_data_dir.
    Returns a dictionary of these temporary paths for explicit use in tests.
    """
    paths_dict = {
        "ledger": os.path.join(temp_data_dir, "funds.dat"),
        "returns_csv": os.path.join(temp_data_dir, "output", "fund_returns.csv"),
        "pdf": os.path.join(temp_data_dir, "output", "performance_report.pdf"),
        "temp_dir_root": temp_data_dir,
    }
    monkeypatch.setattr(app_config, "LEDGER_FILE_PATH", paths_dict["ledger"])
    monkeypatch.setattr(app_config, "FUND_RETURNS_CSV_PATH", paths_dict["returns_csv"])
    monkeypatch.setattr(app_config, "PERFORMANCE_PDF_PATH", paths_dict["pdf"])
    # Keep transfer checks independent of the real cutover date
    monkeypatch.setattr(app_config, "TRANSFER_CHECK_CUTOVER_DATE", date(2000, 1, 1))
    return paths_dict
