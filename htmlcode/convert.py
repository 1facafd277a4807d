"""
Conversion pipeline.

lines -> layout detection -> raw records -> segmentation (combined fields)
-> encoding per field role -> assembled envelopes and export rows.

Records that do not fit the shape are skipped, never padded, and every
record gets an outcome so callers can report what was dropped and why.
"""

from __future__ import annotations

import base64
import hashlib
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .assemble import OutputRecord, RecordAssembler, to_tsv
from .cells import Cell, Layout, detect_layout, parse_cells, split_whitespace_run
from .encode import EncodingMode, encode
from .errors import EmptyInputError
from .normalize import clean_lines, decode_upload
from .rules import DOUBLE_QUOTE_CLOSE, DOUBLE_QUOTE_OPEN, EXPORT_ENCODING
from .segment import split_code_location, split_combined_field
from .shapes import (
    CODE_LOCATION,
    FieldRole,
    FieldSpec,
    RecordShapeConfig,
    get_shape,
    mode_for,
)

logger = logging.getLogger(__name__)

ACCEPTED = "accepted"
SKIPPED = "skipped"

TOO_FEW_FIELDS = "too_few_fields"
EMPTY_RECORD = "empty_record"


@dataclass(frozen=True)
class RecordOutcome:
    line: int
    status: str
    reason: Optional[str] = None
    index: Optional[int] = None
    fields_found: int = 0


@dataclass
class ConversionResult:
    shape: RecordShapeConfig
    layout: Layout
    records: List[OutputRecord] = field(default_factory=list)
    rows: List[Dict[str, str]] = field(default_factory=list)
    outcomes: List[RecordOutcome] = field(default_factory=list)
    html: str = ""

    @property
    def accepted(self) -> int:
        return sum(1 for o in self.outcomes if o.status == ACCEPTED)

    @property
    def skipped(self) -> int:
        return sum(1 for o in self.outcomes if o.status == SKIPPED)

    def to_tsv(self) -> str:
        return to_tsv(self.rows)


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _curly_quoted(value: str) -> str:
    return f"{DOUBLE_QUOTE_OPEN}{value}{DOUBLE_QUOTE_CLOSE}" if value else ""


def _raw_records(
    lines: List[str], layout: Layout, shape: RecordShapeConfig
) -> Iterator[Tuple[int, List[Cell]]]:
    """Yield (1-based line number, cells) for each raw record."""
    if layout is Layout.LINES:
        for start in range(0, len(lines), shape.arity):
            group = lines[start:start + shape.arity]
            yield start + 1, [Cell(line) for line in group]
    elif layout is Layout.WHITESPACE:
        for line_no, line in enumerate(lines, start=1):
            parts = split_whitespace_run(line, shape.whitespace_run)
            yield line_no, [Cell(part) for part in parts]
    else:
        for line_no, line in enumerate(lines, start=1):
            yield line_no, parse_cells(line)


def encode_field(column: FieldSpec, cell: Cell) -> List[Tuple[str, str]]:
    """Encode one raw cell into one or two (label, value) pairs."""
    if column.role is FieldRole.COMBINED:
        if column.splitter == CODE_LOCATION:
            first, rest = split_code_location(cell.value)
        else:
            first, rest = split_combined_field(cell.value)
        first = encode(first, EncodingMode.WITH_SPACING)
        rest = encode(rest, EncodingMode.WITH_SPACING)
        if column.quoted:
            rest = _curly_quoted(rest)
        return [(column.labels[0], first), (column.labels[1], rest)]

    value = encode(cell.value, mode_for(column.role), keep_quotes=cell.preserved)
    if column.quoted:
        value = _curly_quoted(value)
    return [(column.labels[0], value)]


def convert_lines(
    lines: Iterable[str], shape: Union[str, RecordShapeConfig]
) -> ConversionResult:
    if isinstance(shape, str):
        shape = get_shape(shape)

    lines = [line for line in lines if line and line.strip()]
    if not lines:
        raise EmptyInputError()

    layout = detect_layout(lines[0], shape)
    logger.info("%s: %s layout, %d non-blank lines", shape.key, layout.value, len(lines))

    assembler = RecordAssembler()
    outcomes: List[RecordOutcome] = []

    for line_no, cells in _raw_records(lines, layout, shape):
        if len(cells) < shape.arity:
            logger.warning(
                "%s: record at line %d has %d of %d fields, skipped",
                shape.key, line_no, len(cells), shape.arity,
            )
            outcomes.append(RecordOutcome(line_no, SKIPPED, TOO_FEW_FIELDS, fields_found=len(cells)))
            continue

        cells = cells[:shape.arity]
        if not any(cell.value.strip() for cell in cells):
            logger.warning("%s: record at line %d is empty, skipped", shape.key, line_no)
            outcomes.append(RecordOutcome(line_no, SKIPPED, EMPTY_RECORD, fields_found=len(cells)))
            continue

        fields: List[Tuple[str, str]] = []
        for column, cell in zip(shape.fields, cells):
            fields.extend(encode_field(column, cell))

        record = assembler.add(fields)
        outcomes.append(
            RecordOutcome(line_no, ACCEPTED, index=record.index, fields_found=len(cells))
        )

    result = ConversionResult(
        shape=shape,
        layout=layout,
        records=assembler.records,
        rows=assembler.rows,
        outcomes=outcomes,
        html=assembler.html,
    )
    logger.info("%s: %d records, %d skipped", shape.key, result.accepted, result.skipped)
    return result


def convert_text(
    text: str,
    shape: Union[str, RecordShapeConfig],
    strip_excel_metadata: bool = True,
) -> ConversionResult:
    return convert_lines(clean_lines(text, strip_metadata=strip_excel_metadata), shape)


def convert_upload_bytes(
    raw: bytes,
    shape: Union[str, RecordShapeConfig],
    strip_excel_metadata: bool = True,
) -> Dict[str, Any]:
    """
    Decode an upload, convert it, and return a dict matching the API's
    response envelope.
    """
    if isinstance(shape, str):
        shape = get_shape(shape)

    text, enc_report = decode_upload(raw)
    lines = clean_lines(text, strip_metadata=strip_excel_metadata)
    result = convert_lines(lines, shape)

    export_bytes = result.to_tsv().encode(EXPORT_ENCODING)
    warnings = [
        {
            "row": o.line,
            "column": None,
            "issue": o.reason,
            "value": str(o.fields_found),
            "action": "skipped",
        }
        for o in result.outcomes
        if o.status == SKIPPED
    ]

    return {
        "shape": shape.key,
        "layout": result.layout.value,
        "html": result.html,
        "records": result.rows,
        "export": {
            "sha256": _sha256_hex(export_bytes),
            "encoding": EXPORT_ENCODING,
            "filename": f"converted_{shape.key}.txt",
            "content_b64": base64.b64encode(export_bytes).decode("ascii"),
        },
        "report": {
            "summary": {
                "records": result.accepted,
                "skipped": result.skipped,
                "warnings": len(warnings),
                "errors": 0,
                "deterministic": True,
            },
            "normalizations": {
                **enc_report,
                "lines": {
                    "non_blank": len(lines),
                    "excel_metadata_stripped": strip_excel_metadata,
                },
                "layout": {
                    "detected": result.layout.value,
                    "fields_per_record": shape.arity,
                    "policy": {"short_records": "skip", "long_records": "truncate"},
                },
            },
            "warnings": warnings,
            "errors": [],
        },
    }
