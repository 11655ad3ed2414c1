"""Invoke the dependency-check command line scanner."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from pathlib import Path
from typing import Mapping, Protocol

_LOG = logging.getLogger(__name__)

LAUNCHER_NAME = "dependency-check"
LAUNCH_FAILED_STATUS = 127
"""Exit status reported when the launcher could not be started at all."""


class ScanRunner(Protocol):
    """Runs one scanner pass and reports its exit status."""

    def run_scan(
        self,
        project: str,
        target_path: str,
        output_path: Path,
        suppression_path: Path,
        extra_args: str,
        output_format: str,
    ) -> int: ...


def launcher_path(scanner_home: Path, windows: bool | None = None) -> Path:
    """Return the platform launcher script inside a scanner installation."""

    if windows is None:
        windows = os.name == "nt"
    suffix = ".bat" if windows else ".sh"
    return scanner_home / "bin" / f"{LAUNCHER_NAME}{suffix}"


def build_command(
    launcher: Path,
    project: str,
    target_path: str,
    output_path: Path,
    suppression_path: Path,
    extra_args: str,
    output_format: str,
) -> list[str]:
    """Assemble the scanner argv; extra args are split shell-style."""

    cmd = [
        str(launcher),
        "--project",
        project,
        "--scan",
        str(target_path),
        "--out",
        str(output_path),
        "--format",
        output_format,
    ]
    if suppression_path.is_file():
        cmd.extend(["--suppression", str(suppression_path)])
    else:
        _LOG.debug("No suppression file at %s; scanning without one", suppression_path)
    if extra_args and extra_args.strip():
        cmd.extend(shlex.split(extra_args, posix=os.name != "nt"))
    return cmd


class DependencyCheckRunner:
    """Blocking subprocess runner for a local dependency-check install."""

    def __init__(
        self,
        scanner_home: Path,
        env: Mapping[str, str] | None = None,
        cwd: Path | None = None,
    ) -> None:
        self.scanner_home = scanner_home
        self.env = dict(env) if env is not None else None
        self.cwd = cwd

    def run_scan(
        self,
        project: str,
        target_path: str,
        output_path: Path,
        suppression_path: Path,
        extra_args: str,
        output_format: str,
    ) -> int:
        cmd = build_command(
            launcher_path(self.scanner_home),
            project,
            target_path,
            output_path,
            suppression_path,
            extra_args,
            output_format,
        )
        _LOG.info("Running %s scan: %s", output_format, " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                check=False,
                env=self.env,
                cwd=str(self.cwd) if self.cwd else None,
            )
        except OSError as exc:
            _LOG.error("Unable to start scanner %s: %s", cmd[0], exc)
            return LAUNCH_FAILED_STATUS
        if result.returncode != 0:
            _LOG.warning("Scanner exited with status %s", result.returncode)
        return result.returncode
