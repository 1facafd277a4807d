"""
Cell tokenizer and layout detection.

A line is split on the delimiter outside quotes. Inside quotes a doubled
quote is one literal quote. A field that opens with a triple quote is a
preserved literal: it keeps one quote at each end instead of having them
stripped, so a triple-quoted ``Exact Literal`` reads back as
``"Exact Literal"``.
Malformed quoting never raises; an unterminated quote keeps the rest of the
line as literal text.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import List, NamedTuple


class Cell(NamedTuple):
    value: str
    preserved: bool = False


class Layout(str, Enum):
    CSV = "csv"
    WHITESPACE = "whitespace"
    LINES = "lines"


def parse_cells(line: str, delimiter: str = ",") -> List[Cell]:
    cells: List[Cell] = []
    current: List[str] = []
    in_quotes = False
    preserved = False
    i = 0
    n = len(line)

    while i < n:
        ch = line[i]

        if ch == '"':
            # Longest match first: the triple marker before the escaped pair.
            if line.startswith('"""', i):
                if not in_quotes and not current:
                    after = line[i + 3:i + 4]
                    if after in ("", delimiter):
                        # Bare triple quote: the field is one literal quote.
                        current.append('"')
                        i += 3
                        continue
                    if after != '"':
                        current.append('"')
                        in_quotes = preserved = True
                        i += 3
                        continue
                if in_quotes and preserved:
                    current.append('"')
                    in_quotes = False
                    i += 3
                    continue

            if in_quotes and line.startswith('""', i):
                current.append('"')
                i += 2
                continue

            if in_quotes and preserved:
                current.append('"')
                i += 1
                continue

            in_quotes = not in_quotes
            i += 1
            continue

        if ch == delimiter and not in_quotes:
            cells.append(Cell("".join(current), preserved))
            current = []
            preserved = False
            i += 1
            continue

        current.append(ch)
        i += 1

    if line or cells:
        cells.append(Cell("".join(current), preserved))

    return cells


def parse_line(line: str, delimiter: str = ",") -> List[str]:
    return [cell.value for cell in parse_cells(line, delimiter)]


def has_unquoted_delimiter(line: str, delimiter: str = ",") -> bool:
    inside = False
    for ch in line:
        if ch == '"':
            inside = not inside
        elif ch == delimiter and not inside:
            return True
    return False


def strip_outer_quotes(line: str) -> str:
    """Drop one leading and one trailing quote, independently."""
    if line.startswith('"'):
        line = line[1:]
    if line.endswith('"'):
        line = line[:-1]
    return line


def split_whitespace_run(line: str, min_run: int) -> List[str]:
    """Split a wide-spaced line on runs of at least ``min_run`` whitespace characters."""
    return re.split(r"\s{%d,}" % min_run, strip_outer_quotes(line.strip()))


def detect_layout(first_line: str | None, shape) -> Layout:
    """
    Pick the layout for a whole file from its first non-blank line.

    An unquoted comma always means one CSV line per record. Failing that,
    shapes with a whitespace threshold look for a wide gap, and shapes that
    accept grouped lines fall back to one line per field.
    """
    if not first_line or not first_line.strip():
        return Layout.CSV

    if has_unquoted_delimiter(first_line, ","):
        return Layout.CSV

    if shape.whitespace_run:
        probe = strip_outer_quotes(first_line.strip())
        if re.search(r"\s{%d,}" % shape.whitespace_run, probe):
            return Layout.WHITESPACE

    if shape.line_groups:
        return Layout.LINES

    return Layout.CSV
