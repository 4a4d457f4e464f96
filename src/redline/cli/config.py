"""Runtime configuration for the extraction CLI."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from typing import Mapping


DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_DOCUMENT_TIMEOUT_SECONDS = 0.0
DEFAULT_MAX_CONCURRENCY = 4

_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}


def _parse_int(*, name: str, raw_value: str, minimum: int) -> int:
    try:
        value = int(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _parse_float(*, name: str, raw_value: str, minimum: float) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class ExtractSettings:
    """Validated settings for batch track-change extraction."""

    log_level: str = DEFAULT_LOG_LEVEL
    document_timeout_seconds: float = DEFAULT_DOCUMENT_TIMEOUT_SECONDS
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level)

    @property
    def timeout(self) -> float | None:
        """Per-document timeout, or None when disabled."""

        return self.document_timeout_seconds or None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ExtractSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        log_level = source.get("REDLINE_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
        timeout_raw = source.get("REDLINE_DOCUMENT_TIMEOUT_SECONDS", str(DEFAULT_DOCUMENT_TIMEOUT_SECONDS)).strip()
        concurrency_raw = source.get("REDLINE_MAX_CONCURRENCY", str(DEFAULT_MAX_CONCURRENCY)).strip()

        if log_level not in _LOG_LEVELS:
            raise ValueError(f"REDLINE_LOG_LEVEL must be one of: {', '.join(sorted(_LOG_LEVELS))}")
        if not timeout_raw:
            raise ValueError("REDLINE_DOCUMENT_TIMEOUT_SECONDS cannot be empty")
        if not concurrency_raw:
            raise ValueError("REDLINE_MAX_CONCURRENCY cannot be empty")

        return cls(
            log_level=log_level,
            document_timeout_seconds=_parse_float(
                name="REDLINE_DOCUMENT_TIMEOUT_SECONDS",
                raw_value=timeout_raw,
                minimum=0.0,
            ),
            max_concurrency=_parse_int(
                name="REDLINE_MAX_CONCURRENCY",
                raw_value=concurrency_raw,
                minimum=1,
            ),
        )
