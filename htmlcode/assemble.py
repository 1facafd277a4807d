"""
Record assembly and tabular export.

Each accepted record becomes a fixed envelope tagged with its 1-based index,
plus one export row. Indexes are handed out in acceptance order and never
reused.
"""

from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Tuple, Union

from .rules import (
    ENVELOPE_CLOSE,
    ENVELOPE_OPEN,
    ENVELOPE_TAG,
    EXPORT_DELIMITER,
    TAG_COLUMN,
)

FieldPairs = Union[Mapping[str, str], Iterable[Tuple[str, str]]]

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class OutputRecord:
    index: int
    fields: Tuple[Tuple[str, str], ...]

    @property
    def tag(self) -> str:
        return f"{ENVELOPE_TAG}{self.index}"

    def envelope(self) -> str:
        lines = [ENVELOPE_OPEN[0].format(tag=self.tag), *ENVELOPE_OPEN[1:]]
        lines.extend(value for _, value in self.fields)
        lines.extend(ENVELOPE_CLOSE)
        return "\n".join(lines) + "\n"

    def row(self) -> Dict[str, str]:
        row = {TAG_COLUMN: self.tag}
        row.update(self.fields)
        return row


def assemble(index: int, fields: FieldPairs) -> OutputRecord:
    items = fields.items() if isinstance(fields, Mapping) else fields
    return OutputRecord(index, tuple((label, value) for label, value in items))


class RecordAssembler:
    """Hands out record indexes and accumulates envelopes and export rows."""

    def __init__(self, start: int = 1):
        self._next_index = start
        self.records: List[OutputRecord] = []
        self.rows: List[Dict[str, str]] = []

    def add(self, fields: FieldPairs) -> OutputRecord:
        record = assemble(self._next_index, fields)
        self._next_index += 1
        self.records.append(record)
        self.rows.append(record.row())
        return record

    @property
    def html(self) -> str:
        return "".join(record.envelope() for record in self.records)


def _export_value(value: str) -> str:
    return _WHITESPACE.sub(" ", value or "").strip()


def to_tsv(rows: List[Dict[str, str]]) -> str:
    """
    Tab-separated export.

    The column set comes from the first row. Later rows of another shape are
    written as-is against those columns (missing keys become empty).
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    outp = io.StringIO(newline="")
    outp.write(EXPORT_DELIMITER.join(headers) + "\n")

    writer = csv.writer(
        outp,
        delimiter=EXPORT_DELIMITER,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    for row in rows:
        writer.writerow([_export_value(row.get(h, "")) for h in headers])

    return outp.getvalue()
