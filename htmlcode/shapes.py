"""
Record shapes.

A shape says how many fields a record has, which role each one plays, and
which input layouts it accepts. One table replaces a processor per format.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from .encode import EncodingMode
from .errors import UnknownShapeError


class FieldRole(str, Enum):
    FREE_TEXT = "free-text"
    LINK = "link-or-code"
    COMBINED = "combined"


NAME_ADDRESS = "name_address"
CODE_LOCATION = "code_location"


def mode_for(role: FieldRole) -> EncodingMode:
    # Both halves of a combined field are prose.
    if role is FieldRole.LINK:
        return EncodingMode.NO_SPACING
    return EncodingMode.WITH_SPACING


@dataclass(frozen=True)
class FieldSpec:
    labels: Tuple[str, ...]
    role: FieldRole = FieldRole.FREE_TEXT
    splitter: Optional[str] = None
    # Wrap the encoded value (or the second half of a combined field) in curly quotes.
    quoted: bool = False

    def __post_init__(self):
        if self.role is FieldRole.COMBINED:
            if len(self.labels) != 2 or self.splitter not in (NAME_ADDRESS, CODE_LOCATION):
                raise ValueError("combined fields need two labels and a splitter")
        elif len(self.labels) != 1:
            raise ValueError("plain fields carry exactly one label")


@dataclass(frozen=True)
class RecordShapeConfig:
    key: str
    title: str
    fields: Tuple[FieldSpec, ...]
    # Minimum whitespace run that separates fields when a line has no comma.
    whitespace_run: Optional[int] = None
    # Without a comma, each field sits on its own line, len(fields) lines per record.
    line_groups: bool = False

    @property
    def arity(self) -> int:
        return len(self.fields)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(label for column in self.fields for label in column.labels)

    @property
    def roles(self) -> Tuple[FieldRole, ...]:
        """One role per output label, so it zips with ``labels``."""
        return tuple(column.role for column in self.fields for _ in column.labels)


def _text(label: str, quoted: bool = False) -> FieldSpec:
    return FieldSpec((label,), FieldRole.FREE_TEXT, quoted=quoted)


def _link(label: str) -> FieldSpec:
    return FieldSpec((label,), FieldRole.LINK)


def _combined(first: str, rest: str, splitter: str, quoted: bool = False) -> FieldSpec:
    return FieldSpec((first, rest), FieldRole.COMBINED, splitter=splitter, quoted=quoted)


SHAPES: Tuple[RecordShapeConfig, ...] = (
    RecordShapeConfig(
        "bookpage", "Book Page",
        (_text("Address"), _link("Link")),
        whitespace_run=10,
    ),
    RecordShapeConfig(
        "2rows", "2 Rows",
        (
            _combined("Code", "Location", CODE_LOCATION),
            _combined("Company Name", "Address", NAME_ADDRESS, quoted=True),
        ),
    ),
    RecordShapeConfig(
        "4rows", "4 Rows",
        (_text("Code"), _text("Location"), _text("Company Name"), _text("Address")),
    ),
    RecordShapeConfig(
        "website", "Website",
        (_text("Company Name 1"), _text("Address"), _text("Company Name 2"), _link("Website")),
        line_groups=True,
    ),
    RecordShapeConfig(
        "page20000", "20000 Page",
        (_text("Details"), _link("Link"), _text("Address")),
        whitespace_run=3,
    ),
    RecordShapeConfig(
        "page30000", "30000 Page",
        (_text("Details 1"), _text("Details 2"), _text("Company Name")),
        line_groups=True,
    ),
    RecordShapeConfig(
        "page40000", "40000 Page",
        (_text("Details 1"), _text("Details 2"), _link("Link")),
    ),
    RecordShapeConfig(
        "mdpage", "MD Page",
        (_text("Details"), _text("Company Address 1"), _text("Company Address 2")),
    ),
    RecordShapeConfig(
        "adpage", "AD Page",
        (_combined("Company Name", "Company Address", NAME_ADDRESS), _link("Link")),
        whitespace_run=10,
    ),
    RecordShapeConfig(
        "aformat", "A Format",
        (_text("Company Name 1"), _text("Address"), _text("Company Name 2"), _text("Details")),
        line_groups=True,
    ),
    RecordShapeConfig(
        "bcformat", "B and C Format",
        (_text("Company Name 1"), _text("Address"), _text("Company Name 2"), _text("Company Name 3")),
        line_groups=True,
    ),
    RecordShapeConfig(
        "bwformat", "BW and NW Format",
        (_text("Company Name"), _text("Address"), _text("Details")),
        line_groups=True,
    ),
)

_BY_KEY: Dict[str, RecordShapeConfig] = {shape.key: shape for shape in SHAPES}


def get_shape(key: str) -> RecordShapeConfig:
    try:
        return _BY_KEY[key]
    except KeyError:
        raise UnknownShapeError(key) from None
