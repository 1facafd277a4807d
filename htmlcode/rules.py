"""
Deterministic encoding rules.

This file exists to make the character table explicit and enforceable.
Nothing here varies by record shape; only whether spacing is honoured does.
"""

from __future__ import annotations

from dataclasses import dataclass

NONE = "none"
BEFORE = "before"
AFTER = "after"
BOTH = "both"


@dataclass(frozen=True)
class PunctuationRule:
    char: str
    code: str
    spacing: str = NONE


PUNCTUATION_RULES: tuple[PunctuationRule, ...] = (
    PunctuationRule(":", "&#58;", AFTER),
    PunctuationRule("+", "&#43;", BOTH),
    PunctuationRule("-", "&#45;", BOTH),
    PunctuationRule(",", "&#44;", AFTER),
    PunctuationRule(";", "&#59;", AFTER),
    PunctuationRule("/", "&#47;", NONE),
    PunctuationRule("\\", "&#92;", NONE),
    PunctuationRule("(", "&#40;", BEFORE),
    PunctuationRule(")", "&#41;", AFTER),
    PunctuationRule("!", "&#33;", AFTER),
    PunctuationRule("<", "&#60;", BEFORE),
    PunctuationRule(">", "&#62;", AFTER),
    PunctuationRule("_", "&#95;", NONE),
)

# Dots are not in the table: a dot between two digits is a decimal marker,
# any other dot is the mid-word separator.
DECIMAL_RULE = PunctuationRule(".", "&#69;", NONE)
DOT_RULE = PunctuationRule(".", "&#8901;", AFTER)

DOUBLE_QUOTE_OPEN = "&ldquo;"
DOUBLE_QUOTE_CLOSE = "&rdquo;"
SINGLE_QUOTE_OPEN = "&lsquo;"
SINGLE_QUOTE_CLOSE = "&rsquo;"

# Record envelope. The first line carries the record index.
ENVELOPE_TAG = "doctypehtml"
ENVELOPE_OPEN = ("<{tag}>", "<html>", "<body>")
ENVELOPE_CLOSE = ("</body>", "</html>")

TAG_COLUMN = "HTML Tag"

# Export table output.
EXPORT_ENCODING = "utf-8-sig"  # UTF-8 with BOM, opens cleanly in spreadsheets
EXPORT_DELIMITER = "\t"
