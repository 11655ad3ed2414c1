"""Terminal states of a scan run."""

from __future__ import annotations

from enum import Enum


class RunOutcome(Enum):
    """How a pipeline run ended; the CI surface maps these to exit statuses."""

    REPORTED = "REPORTED"
    EMPTY_REPORT = "EMPTY_REPORT"
    REPORT_MISSING = "REPORT_MISSING"
    REPORT_MALFORMED = "REPORT_MALFORMED"

    @property
    def failed(self) -> bool:
        return self in (RunOutcome.REPORT_MISSING, RunOutcome.REPORT_MALFORMED)
