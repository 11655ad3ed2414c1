"""Sequence the scanner passes around report parsing and emission."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

from .finding_emitter import EmissionResult, emit_findings
from .report_limits import ReportLimitConfig
from .report_parser import ReportMalformed, ReportMissing, load_and_validate
from .run_outcome import RunOutcome
from .scanner import ScanRunner
from .settings import TRANSIENT_FORMAT, PacmonConfig, report_format_for

_LOG = logging.getLogger(__name__)


def discard_report(path: Path) -> None:
    """Delete the transient report; deleting twice is harmless."""

    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        _LOG.warning("Unable to delete transient report %s: %s", path, exc)
    else:
        _LOG.debug("Removed transient report %s", path)


def write_events(result: EmissionResult, stream: TextIO) -> None:
    for event in result.events:
        stream.write(event.render())
        stream.write("\n")
    stream.flush()


def run_pipeline(
    config: PacmonConfig,
    runner: ScanRunner,
    stream: TextIO | None = None,
    limits: ReportLimitConfig | None = None,
) -> RunOutcome:
    """
    Run the machine-readable scan, report findings, then regenerate the
    human-readable artifact when anything was found.

    Returns how the run ended; report errors are logged, never raised.
    """

    stream = sys.stdout if stream is None else stream
    report_file = config.report_file

    runner.run_scan(
        config.project,
        config.target_path,
        report_file,
        config.suppression_file,
        config.extra_args,
        TRANSIENT_FORMAT,
    )

    try:
        dependencies = load_and_validate(report_file, limits)
    except ReportMissing as exc:
        _LOG.error("%s", exc)
        return RunOutcome.REPORT_MISSING
    except ReportMalformed as exc:
        discard_report(report_file)
        _LOG.error("Invalid report %s: %s", report_file, exc)
        return RunOutcome.REPORT_MALFORMED

    if not dependencies:
        # The report stays on disk as evidence of an empty scan.
        _LOG.info("Scan of %s listed no dependencies", config.target_path)
        return RunOutcome.EMPTY_REPORT

    result = emit_findings(dependencies, config.severities)
    write_events(result, stream)
    discard_report(report_file)
    _LOG.info(
        "Reported %d dependencies: %d failed, %d ignored",
        len(dependencies),
        result.failures,
        result.ignored,
    )

    if result.had_any_vulnerability:
        artifact_file = config.artifact_file
        runner.run_scan(
            config.project,
            config.target_path,
            artifact_file,
            config.suppression_file,
            config.extra_args,
            report_format_for(artifact_file),
        )
        _LOG.info("Vulnerability report written to %s", artifact_file)

    return RunOutcome.REPORTED
