"""Configurable limits for reading scanner reports."""

from __future__ import annotations

from dataclasses import dataclass

from .settings import env_int

DEFAULT_MAX_REPORT_BYTES = 256 * 1024 * 1024
"""Generous default; dependency-check reports for large monorepos run to tens of MiB."""

MAX_REPORT_BYTES_ENV = "MAX_REPORT_BYTES"
"""Suffix of the ``PACMON_MAX_REPORT_BYTES`` environment variable."""


@dataclass(frozen=True)
class ReportLimitConfig:
    """Container describing the configurable report limits."""

    max_report_bytes: int

    @classmethod
    def from_env(cls) -> "ReportLimitConfig":
        """Return a limit set using the configured environment variables."""

        return cls(
            max_report_bytes=env_int(
                MAX_REPORT_BYTES_ENV,
                DEFAULT_MAX_REPORT_BYTES,
                min_value=1,
            ),
        )
