# fondos/reporting/returns_table.py
import csv
import math
import logging
import os
from typing import Dict, List

from fondos.domain.records import RETURN_FIELD_NAMES
from fondos.domain.results import ReturnsReport
from .reporting_utils import NOT_AVAILABLE

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["fund_name"] + RETURN_FIELD_NAMES


def fund_returns_to_rows(report: ReturnsReport) -> List[Dict[str, str]]:
    """One row per fund, sorted by name. Percentages keep full precision; missing values are NA."""
    rows = []
    for fund_returns in report.sorted_funds():
        row = {"fund_name": fund_returns.fund_name}
        for name in RETURN_FIELD_NAMES:
            value = getattr(fund_returns, name)
            row[name] = NOT_AVAILABLE if math.isnan(value) else repr(value)
        rows.append(row)
    return rows


def write_fund_returns_csv(report: ReturnsReport, output_file_path: str) -> int:
    rows = fund_returns_to_rows(report)
    directory = os.path.dirname(output_file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(output_file_path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)
    logger.info(f"Wrote returns for {len(rows)} funds to {output_file_path}.")
    return len(rows)
