"""End-to-end pipeline behaviour against a fake scanner."""

from __future__ import annotations

import io
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from pacmon.ci import exit_codes
from pacmon.services.pipeline import discard_report, run_pipeline
from pacmon.services.run_outcome import RunOutcome
from pacmon.services.settings import PacmonConfig

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures" / "reports"

SINGLE_DEPENDENCY = """<analysis><dependencies>
  <dependency>
    <fileName>lib.jar</fileName>
    <description>A library</description>
    <vulnerabilities>{findings}</vulnerabilities>
  </dependency>
</dependencies></analysis>"""


@dataclass
class FakeRunner:
    """Scanner stand-in that writes a canned report for XML passes."""

    report: str | None = None
    calls: list[tuple[Path, str]] = field(default_factory=list)

    def run_scan(
        self,
        project: str,
        target_path: str,
        output_path: Path,
        suppression_path: Path,
        extra_args: str,
        output_format: str,
    ) -> int:
        self.calls.append((output_path, output_format))
        if output_format == "XML":
            if self.report is None:
                return 1
            output_path.write_text(self.report, encoding="utf-8")
        else:
            output_path.write_text("<html></html>", encoding="utf-8")
        return 0


def _config(tmp_path: Path, severities: str = "LOW, MEDIUM, HIGH, CRITICAL") -> PacmonConfig:
    return PacmonConfig(target_path="src", severities=severities, work_dir=tmp_path)


def _finding(tag: str, severity: str) -> str:
    return (
        f"<{tag}><name>CVE-2024-0001</name><severity>{severity}</severity>"
        f"<description>Bad thing</description></{tag}>"
    )


def test_missing_report_fails_without_emitting(tmp_path: Path) -> None:
    runner = FakeRunner(report=None)
    stream = io.StringIO()

    status = run_pipeline(_config(tmp_path), runner, stream)

    assert status is RunOutcome.REPORT_MISSING
    assert stream.getvalue() == ""
    assert len(runner.calls) == 1


def test_malformed_report_fails_and_is_deleted(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    runner = FakeRunner(report="<scan><dependencies/></scan>")
    stream = io.StringIO()

    caplog.set_level(logging.ERROR)
    status = run_pipeline(_config(tmp_path), runner, stream)

    assert status is RunOutcome.REPORT_MALFORMED
    assert not (tmp_path / "output.xml").exists()
    assert stream.getvalue() == ""
    assert len(runner.calls) == 1
    assert any(r.levelno == logging.ERROR for r in caplog.records)


def test_unparseable_report_is_also_deleted(tmp_path: Path) -> None:
    runner = FakeRunner(report="<analysis><dependencies>")

    status = run_pipeline(_config(tmp_path), runner, io.StringIO())

    assert status is RunOutcome.REPORT_MALFORMED
    assert not (tmp_path / "output.xml").exists()


def test_unreadable_report_fails_cleanly(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
) -> None:
    """A report the scanner left unreadable ends the run with a logged error."""

    runner = FakeRunner(report=SINGLE_DEPENDENCY.format(findings=""))
    stream = io.StringIO()

    def deny_read(self: Path) -> bytes:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "read_bytes", deny_read)
    caplog.set_level(logging.ERROR)
    status = run_pipeline(_config(tmp_path), runner, stream)

    assert status is RunOutcome.REPORT_MISSING
    assert exit_codes.exit_status(status) == exit_codes.REPORT_FAILURE
    assert stream.getvalue() == ""
    assert len(runner.calls) == 1
    assert any("Permission denied" in r.getMessage() for r in caplog.records)


def test_empty_report_exits_cleanly_and_keeps_the_file(tmp_path: Path) -> None:
    runner = FakeRunner(report=(FIXTURE_DIR / "empty.xml").read_text(encoding="utf-8"))
    stream = io.StringIO()

    status = run_pipeline(_config(tmp_path), runner, stream)

    assert status is RunOutcome.EMPTY_REPORT
    assert stream.getvalue() == ""
    assert (tmp_path / "output.xml").exists()
    assert len(runner.calls) == 1


def test_failing_vulnerability_emits_and_regenerates_artifact(tmp_path: Path) -> None:
    runner = FakeRunner(report=SINGLE_DEPENDENCY.format(findings=_finding("vulnerability", "HIGH")))
    stream = io.StringIO()

    status = run_pipeline(_config(tmp_path), runner, stream)

    lines = stream.getvalue().splitlines()
    assert status is RunOutcome.REPORTED
    assert [line.split()[0] for line in lines] == [
        "##teamcity[testStarted",
        "##teamcity[testFailed",
        "##teamcity[testFinished",
    ]
    assert not (tmp_path / "output.xml").exists()
    assert runner.calls[1] == (tmp_path / "vulnerabilities.html", "HTML")
    assert (tmp_path / "vulnerabilities.html").exists()


def test_suppressed_only_still_regenerates_artifact(tmp_path: Path) -> None:
    runner = FakeRunner(
        report=SINGLE_DEPENDENCY.format(findings=_finding("suppressedVulnerability", "LOW"))
    )
    stream = io.StringIO()

    status = run_pipeline(_config(tmp_path), runner, stream)

    lines = stream.getvalue().splitlines()
    assert status is RunOutcome.REPORTED
    assert len(lines) == 3
    assert "testIgnored" in lines[1]
    assert "message='SUPPRESSED: CVE-2024-0001 (LOW)'" in lines[1]
    assert [fmt for _path, fmt in runner.calls] == ["XML", "HTML"]


def test_below_threshold_vulnerability_still_regenerates_artifact(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    runner = FakeRunner(report=SINGLE_DEPENDENCY.format(findings=_finding("vulnerability", "LOW")))
    stream = io.StringIO()

    caplog.set_level(logging.WARNING)
    status = run_pipeline(_config(tmp_path, severities="HIGH, CRITICAL"), runner, stream)

    lines = stream.getvalue().splitlines()
    assert status is RunOutcome.REPORTED
    assert len(lines) == 2
    assert "testStarted" in lines[0]
    assert "testFinished" in lines[1]
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1
    assert len(runner.calls) == 2


def test_clean_report_skips_artifact(tmp_path: Path) -> None:
    runner = FakeRunner(report=SINGLE_DEPENDENCY.format(findings=""))
    stream = io.StringIO()

    status = run_pipeline(_config(tmp_path), runner, stream)

    assert status is RunOutcome.REPORTED
    assert len(stream.getvalue().splitlines()) == 2
    assert len(runner.calls) == 1
    assert not (tmp_path / "output.xml").exists()


def test_artifact_format_follows_extension(tmp_path: Path) -> None:
    runner = FakeRunner(report=SINGLE_DEPENDENCY.format(findings=_finding("vulnerability", "HIGH")))
    config = PacmonConfig(target_path="src", artifact_path="report.json", work_dir=tmp_path)

    run_pipeline(config, runner, io.StringIO())

    assert runner.calls[1] == (tmp_path / "report.json", "JSON")


def test_fixture_report_runs_through(tmp_path: Path) -> None:
    report = tmp_path / "output.xml"
    shutil.copy(FIXTURE_DIR / "mixed.xml", report)

    class ExistingReportRunner(FakeRunner):
        def run_scan(self, project, target_path, output_path, *args) -> int:
            self.calls.append((output_path, args[-1]))
            return 0

    runner = ExistingReportRunner()
    stream = io.StringIO()

    status = run_pipeline(_config(tmp_path), runner, stream)

    assert status is RunOutcome.REPORTED
    assert len(stream.getvalue().splitlines()) == 8
    assert not report.exists()
    assert [fmt for _path, fmt in runner.calls] == ["XML", "HTML"]


def test_discard_report_is_idempotent(tmp_path: Path) -> None:
    report = tmp_path / "output.xml"
    report.write_text("<analysis/>", encoding="utf-8")

    discard_report(report)
    discard_report(report)

    assert not report.exists()
