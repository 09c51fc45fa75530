# fondos/parsers/line_source.py
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Tuple

import fondos.config as config


@dataclass
class ScannedRow:
    """One table line, split into its tab-separated cells."""
    line_number: int
    raw_line: str
    fields: List[str]


class LineSource:
    """
    Numbered lines shared by the report scanners. Each scanner consumes lines up
    to the end of its report and leaves the rest for the next one.
    """

    def __init__(self, lines: Iterable[str]):
        self._lines: Iterator[str] = iter(lines)
        self.line_number = 0

    def __iter__(self) -> "LineSource":
        return self

    def __next__(self) -> Tuple[int, str]:
        line = next(self._lines)
        self.line_number += 1
        return self.line_number, line.rstrip("\r\n")


def is_end_of_input(line: str) -> bool:
    return line.strip() == config.END_OF_INPUT_MARKER


def split_row(line_number: int, line: str) -> ScannedRow:
    # Fund names and movement labels contain spaces, so only tabs separate cells
    return ScannedRow(line_number=line_number, raw_line=line, fields=line.split(config.FIELD_SEPARATOR))
