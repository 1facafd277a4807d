from __future__ import annotations


class HtmlCodeError(Exception):
    """Base class for conversion errors surfaced to callers."""


class EmptyInputError(HtmlCodeError):
    def __init__(self, message: str = "File contains only empty lines."):
        super().__init__(message)
        self.message = message


class UnknownShapeError(HtmlCodeError, KeyError):
    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown record shape: {self.key!r}"


__all__ = ["HtmlCodeError", "EmptyInputError", "UnknownShapeError"]
