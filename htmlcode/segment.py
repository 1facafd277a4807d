"""
Split a combined field into its two logical parts.

Strategies are tried in a fixed order and the first that applies wins:

1. explicit quote marker (Name""Address)
2. address keyword anchor (Suite, Floor, PO Box, street number, ...)
3. organization entity suffix (CORP, LTD, INC, L.L.C., ...)
4. capitalization transition (upper-case name running into a mixed-case address)
5. everything is the first part

The order matters: moving the entity step ahead of the address step changes
which side an ambiguous suffix lands on.
"""

from __future__ import annotations

import re
from typing import NamedTuple, Optional


class Split(NamedTuple):
    first: str
    rest: str


# Text between two entity matches shorter than this (punctuation and
# whitespace removed) joins them into one suffix run.
ENTITY_GAP_MIN_WORD = 5

_ADDRESS_ANCHORS = (
    re.compile(r"(?<=\s)(?:Suite|Ste|Floor|Fl|Building|Bldg|Room|Rm|Unit)\b", re.IGNORECASE),
    re.compile(r"(?<=\s)P\.?\s?O\.?\s+Box\b", re.IGNORECASE),
    re.compile(
        r"(?<=\s)\d+\s+[A-Z][a-z]+\s+"
        r"(?:Street|St|Avenue|Ave|Road|Rd|Drive|Dr|Boulevard|Blvd|Lane|Ln)\b",
        re.IGNORECASE,
    ),
    re.compile(r"(?<=\s)(?:Float Plant|Automotive Plant|Business Center)\b", re.IGNORECASE),
    re.compile(r"(?<=\s)\d{3,}\s+[A-Z]"),
)

_ENTITY = re.compile(
    r"(?<![A-Za-z0-9])(?:"
    r"L\.?\s*L\.?\s*[CP]\.?"
    r"|L\.\s*P\.?|LP"
    r"|COMPANY|CORPORATION|CORP\.?|CO\.?"
    r"|LIMITED|LTD\.?"
    r"|INCORPORATED|INC\.?"
    r")(?![A-Za-z0-9]|-[A-Za-z])",
    re.IGNORECASE,
)

_TRAILING_SEPARATORS = re.compile(r"[\s.,;:!|/\-]*")
_PUNCT_OR_SPACE = re.compile(r"[\W_]+")
_MIXED_CASE_WORD = re.compile(r"[A-Z][a-z]{3,}")


def _by_marker(text: str) -> Optional[Split]:
    pos = text.find('""')
    if pos > 0:
        first = text[:pos].strip()
        rest = text[pos + 2:].strip().strip('"').strip()
        if first and rest:
            return Split(first, rest)

    # The tokenizer unescapes a CSV marker to one quote: Name"Address, or
    # Name"Address" when the cell closed on a triple quote.
    body = text[:-1] if text.endswith('"') and text.count('"') == 2 else text
    if body.count('"') == 1:
        pos = body.index('"')
        first = body[:pos].strip()
        rest = body[pos + 1:].strip()
        if first and rest:
            return Split(first, rest)

    return None


def _by_address_anchor(text: str) -> Optional[Split]:
    starts = [m.start() for m in (p.search(text) for p in _ADDRESS_ANCHORS) if m]
    if not starts:
        return None
    pos = min(starts)
    return Split(text[:pos].strip(), text[pos:].strip())


def _by_entity(text: str) -> Optional[Split]:
    matches = list(_ENTITY.finditer(text))
    if not matches:
        return None

    end = matches[0].end()
    for prev, nxt in zip(matches, matches[1:]):
        between = _PUNCT_OR_SPACE.sub("", text[prev.end():nxt.start()])
        if len(between) >= ENTITY_GAP_MIN_WORD:
            break
        end = nxt.end()

    end = _TRAILING_SEPARATORS.match(text, end).end()
    return Split(text[:end].strip(), text[end:].strip())


def _by_capitalization(text: str) -> Optional[Split]:
    for match in _MIXED_CASE_WORD.finditer(text):
        head = text[:match.start()]
        if any(c.islower() for c in head):
            return None
        if any(c.isupper() for c in head):
            return Split(head.strip(), text[match.start():].strip())
    return None


def split_combined_field(text: Optional[str]) -> Split:
    """Split "Name + Address" text. Never raises; the fallback keeps it all as the name."""
    text = (text or "").strip()
    if not text:
        return Split("", "")

    for strategy in (_by_marker, _by_address_anchor, _by_entity, _by_capitalization):
        found = strategy(text)
        if found is not None:
            return found

    return Split(text, "")


def split_code_location(text: Optional[str]) -> Split:
    """Leading digits are the code, the remainder the location."""
    text = (text or "").strip()
    match = re.match(r"\d+", text)
    if not match:
        return Split(text, "")
    return Split(match.group(0), text[match.end():].strip())
