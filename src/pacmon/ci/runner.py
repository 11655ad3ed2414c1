"""Command line entry point that reports dependency vulnerabilities to CI."""

from __future__ import annotations

import argparse
import dataclasses
import logging
import os
import sys
from pathlib import Path

from ..services.pipeline import run_pipeline
from ..services.scanner import DependencyCheckRunner
from ..services.settings import PacmonConfig
from . import exit_codes
from .console import configure_console

LOG_LEVEL_ENV = "PACMON_LOG_LEVEL"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def build_parser(defaults: PacmonConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pacmon",
        description=(
            "Scan a codebase with dependency-check and report each dependency "
            "as a TeamCity test."
        ),
    )
    parser.add_argument(
        "target",
        nargs="?" if defaults.target_path else None,
        default=defaults.target_path or None,
        help="Path to scan (PACMON_TARGET).",
    )
    parser.add_argument("--project", default=defaults.project, help="Project name shown in reports.")
    parser.add_argument(
        "--scanner-home",
        default=defaults.scanner_home,
        help="dependency-check installation directory.",
    )
    parser.add_argument(
        "--extra-args",
        default=defaults.extra_args,
        help="Arguments passed verbatim to the scanner (use --extra-args=\"--opt value\").",
    )
    parser.add_argument("--suppression", default=defaults.suppression_path, help="Suppression rules file.")
    parser.add_argument(
        "--report",
        default=defaults.report_path,
        help="Transient machine-readable report path (.xml).",
    )
    parser.add_argument(
        "--artifact",
        default=defaults.artifact_path,
        help="Human-readable report written when vulnerabilities exist.",
    )
    parser.add_argument(
        "--severities",
        default=defaults.severities,
        help="Severities that fail the build, e.g. \"HIGH, CRITICAL\".",
    )
    parser.add_argument(
        "--work-dir",
        type=Path,
        default=defaults.work_dir,
        help="Directory that relative paths resolve against.",
    )
    parser.add_argument(
        "--log-level",
        default=os.getenv(LOG_LEVEL_ENV, "INFO"),
        choices=LOG_LEVELS,
        type=str.upper,
        help="Diagnostic log verbosity (written to stderr).",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stderr)


def config_from_args(args: argparse.Namespace, defaults: PacmonConfig) -> PacmonConfig:
    return dataclasses.replace(
        defaults,
        target_path=args.target or "",
        project=args.project,
        scanner_home=args.scanner_home,
        extra_args=args.extra_args,
        suppression_path=args.suppression,
        report_path=args.report,
        artifact_path=args.artifact,
        severities=args.severities,
        work_dir=args.work_dir,
    )


def main(argv: list[str] | None = None) -> int:
    defaults = PacmonConfig.from_env()
    parser = build_parser(defaults)
    args = parser.parse_args(argv)
    # argparse does not check string defaults against choices.
    if args.log_level not in LOG_LEVELS:
        parser.error(f"{LOG_LEVEL_ENV} must be one of {', '.join(LOG_LEVELS)}.")
    configure_logging(args.log_level)

    config = config_from_args(args, defaults)
    try:
        config.validate()
    except ValueError as exc:
        parser.error(str(exc))

    child_env = configure_console()
    runner = DependencyCheckRunner(config.scanner_dir, env=child_env, cwd=config.work_dir)
    return exit_codes.exit_status(run_pipeline(config, runner))


if __name__ == "__main__":
    raise SystemExit(main())
