"""LOCAL-only CLI to preview the service messages for an existing report."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT.parent / "src"))


def parse_args() -> argparse.Namespace:
    from pacmon.services.severity_gate import DEFAULT_SEVERITIES

    parser = argparse.ArgumentParser(
        description="Render TeamCity messages for a report without scanning or cleanup.",
    )
    parser.add_argument(
        "report_path",
        type=Path,
        help="Path to a dependency-check XML report.",
    )
    parser.add_argument(
        "--severities",
        default=DEFAULT_SEVERITIES,
        help="Severities that would fail the build.",
    )
    return parser.parse_args()


def main() -> int:
    args = parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    from pacmon.ci import exit_codes
    from pacmon.services.finding_emitter import emit_findings
    from pacmon.services.pipeline import write_events
    from pacmon.services.report_parser import ReportError, load_and_validate

    try:
        dependencies = load_and_validate(args.report_path)
    except ReportError as exc:
        logging.error("%s", exc)
        return exit_codes.REPORT_FAILURE

    result = emit_findings(dependencies, args.severities)
    write_events(result, sys.stdout)
    logging.info(
        "Artifact report would %sbe regenerated",
        "" if result.had_any_vulnerability else "not ",
    )
    return exit_codes.OK


if __name__ == "__main__":
    raise SystemExit(main())
