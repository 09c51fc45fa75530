# fondos/parsers/movements_parser.py
import logging
from typing import List

import fondos.config as config
from fondos.domain.enums import ScanState
from .line_source import LineSource, is_end_of_input, split_row
from .raw_models import RawMovementRow

logger = logging.getLogger(__name__)


def parse_movement_pages(lines: LineSource) -> List[List[RawMovementRow]]:
    """
    Reads consecutive "latest movements" pages. Each page is one batch for action
    reconciliation, so pages are returned separately. A page's table starts at the
    column title line and ends at the first empty line; the page ends at the
    transaction disclaimer. EOF ends the last page, keeping rows already read.
    """
    pages: List[List[RawMovementRow]] = []
    current: List[RawMovementRow] = []
    state = ScanState.HEADER
    for line_number, line in lines:
        if is_end_of_input(line):
            break
        if state is ScanState.HEADER:
            if line.startswith(config.MOVEMENTS_TABLE_START_PREFIX):
                current = []
                state = ScanState.TABLE
        elif state is ScanState.TABLE:
            if line.strip() == "":
                pages.append(current)
                state = ScanState.FOOTER
            else:
                current.append(RawMovementRow.from_scanned(split_row(line_number, line)))
        elif line == config.MOVEMENTS_PAGE_END:
            state = ScanState.HEADER

    if state is ScanState.TABLE:
        pages.append(current)
    logger.debug(f"Scanned {len(pages)} movement pages with {sum(len(p) for p in pages)} rows.")
    return pages
