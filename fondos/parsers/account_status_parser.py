# fondos/parsers/account_status_parser.py
import logging
from typing import List

import fondos.config as config
from fondos.domain.enums import ScanState
from .line_source import LineSource, is_end_of_input, split_row
from .raw_models import RawBalanceRow

logger = logging.getLogger(__name__)


def parse_account_status(lines: LineSource) -> List[RawBalanceRow]:
    """
    Reads the pasted "account status" page: everything before the table title is
    page chrome, table rows follow until the "Total" line, then the footer runs
    until the product link line. EOF ends the report in any state.
    """
    rows: List[RawBalanceRow] = []
    state = ScanState.HEADER
    for line_number, line in lines:
        if is_end_of_input(line):
            break
        if state is ScanState.HEADER:
            if line == config.ACCOUNT_STATUS_TABLE_START:
                state = ScanState.TABLE
        elif state is ScanState.TABLE:
            if line.startswith(config.ACCOUNT_STATUS_TABLE_END_PREFIX):
                state = ScanState.FOOTER
            else:
                rows.append(RawBalanceRow.from_scanned(split_row(line_number, line)))
        elif line == config.ACCOUNT_STATUS_FOOTER_END:
            break

    if state is ScanState.HEADER:
        logger.info("No account status table found in input.")
    logger.debug(f"Scanned {len(rows)} account status rows.")
    return rows
