import logging
from dataclasses import dataclass
from typing import Tuple

from environs import Env

env = Env()
env.read_env()

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class Settings:
    """Environment-backed settings for the HTTP host."""

    log_level: str
    max_upload_bytes: int
    allowed_extensions: Tuple[str, ...]
    strip_excel_metadata: bool


def get_settings() -> Settings:
    """Read settings from the environment on every call."""
    extensions = env.list("HTMLCODE_ALLOWED_EXTENSIONS", [".csv", ".txt"])
    return Settings(
        log_level=env.str("HTMLCODE_LOG_LEVEL", "INFO").upper(),
        max_upload_bytes=env.int("HTMLCODE_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES),
        allowed_extensions=tuple(ext.strip().lower() for ext in extensions if ext.strip()),
        strip_excel_metadata=env.bool("HTMLCODE_STRIP_EXCEL_METADATA", True),
    )


def configure_logging(level: str = "INFO") -> logging.Logger:
    _logger = logging.getLogger("htmlcode")
    if not _logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
        _logger.addHandler(handler)
    _logger.setLevel(level)
    return _logger
