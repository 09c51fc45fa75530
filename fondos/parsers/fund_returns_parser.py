# fondos/parsers/fund_returns_parser.py
import logging
from typing import List, Tuple

import fondos.config as config
from fondos.domain.enums import ScanState
from .line_source import LineSource, is_end_of_input, split_row
from .raw_models import RawPeriodicReturnRow, RawYearlyReturnRow

logger = logging.getLogger(__name__)


def parse_fund_returns(lines: LineSource) -> Tuple[List[RawYearlyReturnRow], List[RawPeriodicReturnRow]]:
    """
    Reads the fund returns page, which holds two tables: yearly figures with the
    fund and unit values, then periodic figures. The line right after the page
    title carries the first table's column titles and is skipped; the second
    table starts after its own column title line.
    """
    yearly: List[RawYearlyReturnRow] = []
    periodic: List[RawPeriodicReturnRow] = []
    state = ScanState.HEADER
    for line_number, line in lines:
        if is_end_of_input(line):
            break
        if state is ScanState.HEADER:
            if line.startswith(config.FUND_RETURNS_TABLE_START):
                state = ScanState.SKIP_SUB_HEADER
        elif state is ScanState.SKIP_SUB_HEADER:
            state = ScanState.TABLE
        elif state is ScanState.TABLE:
            if line.strip() == "":
                state = ScanState.INTERMISSION
            else:
                yearly.append(RawYearlyReturnRow.from_scanned(split_row(line_number, line)))
        elif state is ScanState.INTERMISSION:
            if line.startswith(config.FUND_RETURNS_PERIODIC_TABLE_START):
                state = ScanState.SECOND_TABLE
        else:
            if line.strip() == "":
                break
            periodic.append(RawPeriodicReturnRow.from_scanned(split_row(line_number, line)))

    logger.debug(f"Scanned {len(yearly)} yearly and {len(periodic)} periodic fund return rows.")
    return yearly, periodic
