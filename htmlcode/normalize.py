"""
Upload normalization.

Responsibilities:
- encoding detection + decoding
- newline normalization
- spreadsheet metadata cleanup
- blank line removal
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List

from charset_normalizer import from_bytes

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"

# Cell-reference debris left behind by spreadsheet exports, e.g.
# A157A1A101 or A157A1A101:A169A101.
_EXCEL_CELL_CHAIN = re.compile(r"[A-Z]\d+A\d+A\d+(?::\d+)?")
_EXCEL_RANGE_CHAIN = re.compile(r"(?:[A-Z]\d+A\d+:\d+)+")
_EXCEL_REPEATED_REFS = re.compile(r"(?:[A-Z]\d{2,}){2,}")


def decode_upload(raw: bytes) -> tuple[str, Dict[str, Any]]:
    """
    Decode uploaded bytes to text with LF newlines.

    Rules:
    - Detect encoding best-effort via charset-normalizer.
    - If decode fails, fall back to UTF-8, then to UTF-8 with replacement
      characters, and report it.
    - CRLF and lone CR become LF.
    """
    detected = None

    match = from_bytes(raw).best()
    if match is not None:
        detected = match.encoding

    decode_used = detected or "utf-8"
    # A UTF-8 BOM must not survive into the first cell.
    if raw.startswith(_UTF8_BOM) and (decode_used.lower().replace("-", "_") in ("utf_8", "utf8")):
        decode_used = "utf-8-sig"

    decode_fallback = False

    try:
        text = raw.decode(decode_used)
    except (UnicodeDecodeError, LookupError):
        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            text = raw.decode("utf-8", errors="replace")
        decode_used = "utf-8"
        decode_fallback = True
        logger.warning("decode with %s failed, fell back to utf-8", detected)

    if text.startswith("\ufeff"):
        text = text[1:]

    # --- Newline normalization: CRLF/CR -> LF ---
    nl_before = {
        "crlf": text.count("\r\n"),
        "cr": text.count("\r") - text.count("\r\n"),
        "lf": text.count("\n"),
    }

    text = text.replace("\r\n", "\n").replace("\r", "\n")

    nl_after = {
        "crlf": text.count("\r\n"),
        "cr": text.count("\r"),
        "lf": text.count("\n"),
    }

    report = {
        "encoding": {
            "detected": detected,
            "decode_used": decode_used,
            "decode_fallback": decode_fallback,
        },
        "newlines": {
            "policy": "lf",
            "before": nl_before,
            "after": nl_after,
            "changed": (nl_before["crlf"] > 0) or (nl_before["cr"] > 0),
        },
    }

    return text, report


def clean_excel_metadata(text: str) -> str:
    if not text:
        return text
    text = _EXCEL_CELL_CHAIN.sub("", text)
    text = _EXCEL_RANGE_CHAIN.sub("", text)
    text = _EXCEL_REPEATED_REFS.sub("", text)
    return text.strip()


def clean_lines(text: str, strip_metadata: bool = True) -> List[str]:
    """Split text into lines, clean each one, and drop the blank ones."""
    if not text:
        return []

    lines = []
    for line in re.split(r"\r\n|\r|\n", text):
        if strip_metadata:
            line = clean_excel_metadata(line)
        if line.strip():
            lines.append(line)
    return lines
