"""Immutable run configuration, sourced from the environment and the CLI."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from .severity_gate import DEFAULT_SEVERITIES

DEFAULT_PROJECT = "PacMon"
DEFAULT_SCANNER_HOME = "dc"
DEFAULT_SUPPRESSION = "suppress.xml"
DEFAULT_REPORT = "output.xml"
DEFAULT_ARTIFACT = "vulnerabilities.html"

ENV_PREFIX = "PACMON_"

REPORT_FORMATS = {
    ".xml": "XML",
    ".html": "HTML",
    ".htm": "HTML",
    ".json": "JSON",
    ".csv": "CSV",
    ".sarif": "SARIF",
}
"""Scanner output formats keyed by file extension."""

TRANSIENT_FORMAT = "XML"


def report_format_for(path: str | Path) -> str:
    """Return the scanner format name implied by ``path``'s extension."""

    suffix = Path(path).suffix.lower()
    try:
        return REPORT_FORMATS[suffix]
    except KeyError:
        raise ValueError(f"Unsupported report extension: {suffix or '<none>'}") from None


def _env(name: str, default: str) -> str:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    return raw


def env_int(name: str, default: int, *, min_value: int = 0) -> int:
    """Return a bounded ``PACMON_<name>`` integer, or ``default`` when unusable."""

    raw = _env(name, "")
    if not raw:
        return default
    try:
        parsed = int(raw)
    except ValueError:
        return default
    return parsed if parsed >= min_value else default


@dataclass(frozen=True)
class PacmonConfig:
    """Everything a single scan run needs, threaded explicitly."""

    target_path: str = ""
    project: str = DEFAULT_PROJECT
    scanner_home: str = DEFAULT_SCANNER_HOME
    extra_args: str = ""
    suppression_path: str = DEFAULT_SUPPRESSION
    report_path: str = DEFAULT_REPORT
    artifact_path: str = DEFAULT_ARTIFACT
    severities: str = DEFAULT_SEVERITIES
    work_dir: Path = field(default_factory=Path.cwd)

    @classmethod
    def from_env(cls) -> "PacmonConfig":
        """Return a config using the ``PACMON_*`` environment variables."""

        return cls(
            target_path=_env("TARGET", ""),
            project=_env("PROJECT", DEFAULT_PROJECT),
            scanner_home=_env("SCANNER_HOME", DEFAULT_SCANNER_HOME),
            extra_args=os.getenv(ENV_PREFIX + "EXTRA_ARGS", ""),
            suppression_path=_env("SUPPRESSION", DEFAULT_SUPPRESSION),
            report_path=_env("REPORT", DEFAULT_REPORT),
            artifact_path=_env("ARTIFACT", DEFAULT_ARTIFACT),
            severities=_env("SEVERITIES", DEFAULT_SEVERITIES),
            work_dir=Path(_env("WORK_DIR", str(Path.cwd()))),
        )

    def resolve(self, value: str | Path) -> Path:
        """Resolve ``value`` against the work dir unless it is absolute."""

        path = Path(value).expanduser()
        if path.is_absolute():
            return path
        return self.work_dir / path

    @property
    def report_file(self) -> Path:
        return self.resolve(self.report_path)

    @property
    def artifact_file(self) -> Path:
        return self.resolve(self.artifact_path)

    @property
    def suppression_file(self) -> Path:
        return self.resolve(self.suppression_path)

    @property
    def scanner_dir(self) -> Path:
        return self.resolve(self.scanner_home)

    def validate(self) -> None:
        """Raise :class:`ValueError` for settings that cannot work."""

        if not self.target_path:
            raise ValueError("A target path to scan is required.")
        if report_format_for(self.report_path) != TRANSIENT_FORMAT:
            raise ValueError("The transient report must be an .xml file.")
        report_format_for(self.artifact_path)
