"""Process exit statuses reported to the CI server."""

from __future__ import annotations

from ..services.run_outcome import RunOutcome

OK = 0
"""Scan processed, including a scan that listed no dependencies."""

REPORT_FAILURE = 1
"""The transient report was missing or did not have the analysis structure."""

USAGE_ERROR = 2
"""Invalid command line or configuration (argparse convention)."""


def exit_status(outcome: RunOutcome) -> int:
    """Map a pipeline outcome onto the process exit status."""

    return REPORT_FAILURE if outcome.failed else OK
