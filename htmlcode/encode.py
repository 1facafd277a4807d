"""
Punctuation encoding.

Responsibilities:
- replace the fixed punctuation table with character-reference codes
- tell decimal dots from separator dots
- turn straight quotes into alternating open/close codes
- apply role-specific spacing (prose fields get spaces, links get none)

Characters are swapped for single-character placeholders first and only then
for their codes, so a code inserted for one character is never re-matched by
the substitution for another (``;`` is both a mapped character and the last
character of every code). References already present in the input are
shielded for the same reason, which is what makes ``encode`` idempotent.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Dict, List, Optional

from .rules import (
    AFTER,
    BEFORE,
    BOTH,
    DECIMAL_RULE,
    DOT_RULE,
    DOUBLE_QUOTE_CLOSE,
    DOUBLE_QUOTE_OPEN,
    PUNCTUATION_RULES,
    SINGLE_QUOTE_CLOSE,
    SINGLE_QUOTE_OPEN,
    PunctuationRule,
)


class EncodingMode(str, Enum):
    WITH_SPACING = "with-spacing"
    NO_SPACING = "no-spacing"


# Private-use code points never appear in company data.
_PRIVATE = re.compile("[\ue000-\ue01f]")
_SHIELD = "\ue01f"
_DECIMAL = "\ue010"
_DOT = "\ue011"

_PLACEHOLDERS: Dict[str, str] = {
    rule.char: chr(0xE000 + i) for i, rule in enumerate(PUNCTUATION_RULES)
}
_TO_PLACEHOLDER = str.maketrans(_PLACEHOLDERS)
_RULE_BY_PLACEHOLDER: Dict[str, PunctuationRule] = {
    chr(0xE000 + i): rule for i, rule in enumerate(PUNCTUATION_RULES)
}
_RULE_BY_PLACEHOLDER[_DECIMAL] = DECIMAL_RULE
_RULE_BY_PLACEHOLDER[_DOT] = DOT_RULE

_REFERENCE = re.compile(r"&(?:#\d+|[lr][sd]quo);")
_DECIMAL_DOT = re.compile(r"(?<=\d)\.(?=\d)")
_WHITESPACE = re.compile(r"\s+")

_QUOTE_CODES = {
    '"': (DOUBLE_QUOTE_OPEN, DOUBLE_QUOTE_CLOSE),
    "'": (SINGLE_QUOTE_OPEN, SINGLE_QUOTE_CLOSE),
}


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def _strip_enclosing_quotes(text: str) -> str:
    # Only a bare wrapper pair; '"a" "b"' holds real content quotes.
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"' and '"' not in text[1:-1]:
        return text[1:-1].strip()
    return text


def _substitute_codes(text: str, spaced: bool) -> str:
    out: List[str] = []
    last = len(text) - 1

    for i, ch in enumerate(text):
        rule = _RULE_BY_PLACEHOLDER.get(ch)
        if rule is None:
            out.append(ch)
            continue

        if spaced and rule.spacing in (BEFORE, BOTH) and out and not out[-1].endswith(" "):
            out.append(" ")
        out.append(rule.code)
        if spaced and rule.spacing in (AFTER, BOTH) and i < last and text[i + 1] != " ":
            out.append(" ")

    return "".join(out)


def _convert_quotes(text: str, spaced: bool) -> str:
    """Replace straight quotes, alternating open/close per quote type."""
    opening = {'"': True, "'": True}
    out: List[str] = []
    last = len(text) - 1

    for i, ch in enumerate(text):
        codes = _QUOTE_CODES.get(ch)
        if codes is None:
            out.append(ch)
            continue

        if opening[ch]:
            if spaced and i > 0 and text[i - 1] != " ":
                out.append(" ")
            out.append(codes[0])
        else:
            out.append(codes[1])
            if spaced and i < last and text[i + 1] != " ":
                out.append(" ")
        opening[ch] = not opening[ch]

    return "".join(out)


def encode(
    text: Optional[str],
    mode: EncodingMode = EncodingMode.WITH_SPACING,
    keep_quotes: bool = False,
) -> str:
    """
    Encode one field value.

    Rules:
    - Empty, None or whitespace-only input returns "".
    - WITH_SPACING collapses whitespace and spaces codes per their rule,
      never doubling a space that is already there.
    - NO_SPACING un-escapes CSV "" pairs and removes every whitespace
      character; no spacing is ever added.
    - One enclosing "..." pair is dropped unless ``keep_quotes`` is set
      (preserved literals keep theirs).
    - "&" is left verbatim.
    """
    if not text or not text.strip():
        return ""

    spaced = mode is EncodingMode.WITH_SPACING
    shielded: List[str] = []

    def _shield(match: re.Match) -> str:
        shielded.append(match.group(0))
        return _SHIELD

    result = _REFERENCE.sub(_shield, _PRIVATE.sub("", text))

    if spaced:
        result = _collapse(result)
    else:
        result = _WHITESPACE.sub("", result.replace('""', '"'))

    if not keep_quotes:
        result = _strip_enclosing_quotes(result)

    result = result.translate(_TO_PLACEHOLDER)
    result = _DECIMAL_DOT.sub(_DECIMAL, result)
    result = result.replace(".", _DOT)

    result = _substitute_codes(result, spaced)
    if spaced:
        result = _collapse(result)

    result = _convert_quotes(result, spaced)
    if spaced:
        result = _collapse(result)

    if shielded:
        restore = iter(shielded)
        result = re.sub(_SHIELD, lambda _m: next(restore), result)

    return result


def encode_with_spacing(text: Optional[str]) -> str:
    return encode(text, EncodingMode.WITH_SPACING)


def encode_no_spacing(text: Optional[str]) -> str:
    return encode(text, EncodingMode.NO_SPACING)
