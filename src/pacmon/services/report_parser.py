"""Read and navigate dependency-check XML reports.

The accessor distinguishes three outcomes that callers must treat
differently:

1. :class:`ReportMissing` -- no file at the report path (fatal).
2. :class:`ReportMalformed` -- the file could not be parsed, exceeded the
   size limit, or has no ``analysis`` root (fatal, report is discarded).
3. An empty :class:`~pacmon.domain.models.ScanReport` -- a valid report that
   lists zero dependencies (benign early exit).

Parsing goes through :mod:`defusedxml` with DTDs forbidden. Element names are
matched on their local part so the dependency-check default namespace does not
matter. Optional fields resolve to empty strings here, once, so downstream code
never probes the tree.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path

from defusedxml.common import DefusedXmlException
from defusedxml.ElementTree import fromstring as _defused_fromstring

from ..domain.models import (
    DependencyRecord,
    ScanReport,
    SuppressedVulnerabilityRecord,
    VulnerabilityRecord,
)
from .report_limits import ReportLimitConfig

_LOG = logging.getLogger(__name__)

ROOT_ELEMENT = "analysis"


class ReportError(ValueError):
    """Base class for report conditions that abort the pipeline."""


class ReportMissing(ReportError):
    """Raised when the scanner did not leave a readable report behind."""


class ReportMalformed(ReportError):
    """Raised when the report lacks the expected analysis structure."""


def _local_name(tag: object) -> str:
    if not isinstance(tag, str):
        return ""
    return tag.rsplit("}", 1)[-1]


def _children(elem: ET.Element | None, name: str) -> list[ET.Element]:
    if elem is None:
        return []
    return [child for child in elem if _local_name(child.tag) == name]


def _child(elem: ET.Element | None, name: str) -> ET.Element | None:
    matches = _children(elem, name)
    return matches[0] if matches else None


def _text(elem: ET.Element | None, name: str) -> str:
    child = _child(elem, name)
    if child is None or child.text is None:
        return ""
    return child.text


def parse_xml_safely(xml_bytes: bytes, limits: ReportLimitConfig | None = None) -> ET.Element:
    """
    Deserialize report bytes using an XXE-safe boundary.

    Over-limit payloads, DTD/entity declarations and malformed XML all raise
    :class:`ReportMalformed`.
    """

    limits = limits or ReportLimitConfig.from_env()
    if len(xml_bytes) > limits.max_report_bytes:
        raise ReportMalformed("Report exceeds the maximum allowed size.")

    try:
        return _defused_fromstring(xml_bytes, forbid_dtd=True)
    except (DefusedXmlException, ET.ParseError) as exc:
        raise ReportMalformed("Report is not well-formed XML.") from exc


def _vulnerability_from(elem: ET.Element) -> VulnerabilityRecord:
    return VulnerabilityRecord(
        name=_text(elem, "name"),
        severity=_text(elem, "severity"),
        description=_text(elem, "description"),
    )


def _suppressed_from(elem: ET.Element) -> SuppressedVulnerabilityRecord:
    return SuppressedVulnerabilityRecord(
        name=_text(elem, "name"),
        severity=_text(elem, "severity"),
        description=_text(elem, "description"),
    )


def _dependency_from(elem: ET.Element) -> DependencyRecord:
    collection = _child(elem, "vulnerabilities")
    vulnerabilities = tuple(
        _vulnerability_from(child) for child in _children(collection, "vulnerability")
    )
    suppressed = [
        _suppressed_from(child)
        for child in _children(collection, "suppressedVulnerability")
    ]
    # Newer report schemas keep suppressed findings in a sibling collection.
    sibling = _child(elem, "suppressedVulnerabilities")
    suppressed.extend(
        _suppressed_from(child)
        for child in _children(sibling, "suppressedVulnerability")
    )
    return DependencyRecord(
        file_name=_text(elem, "fileName"),
        description=_text(elem, "description"),
        vulnerabilities=vulnerabilities,
        suppressed_vulnerabilities=tuple(suppressed),
    )


def parse_report(payload: bytes, limits: ReportLimitConfig | None = None) -> ScanReport:
    """Build a :class:`ScanReport` from raw report bytes."""

    root = parse_xml_safely(payload, limits)
    if _local_name(root.tag) != ROOT_ELEMENT:
        raise ReportMalformed("Report has no analysis root element.")

    dependencies = _child(root, "dependencies")
    return ScanReport(
        dependencies=tuple(
            _dependency_from(elem) for elem in _children(dependencies, "dependency")
        )
    )


def load_report(path: Path, limits: ReportLimitConfig | None = None) -> ScanReport:
    """Read the report at ``path``; raise :class:`ReportMissing` when absent or unreadable."""

    if not path.is_file():
        raise ReportMissing(f"Report file {path} does not exist.")
    try:
        payload = path.read_bytes()
    except FileNotFoundError as exc:
        raise ReportMissing(f"Report file {path} does not exist.") from exc
    except OSError as exc:
        raise ReportMissing(f"Report file {path} could not be read: {exc.strerror or exc}") from exc
    report = parse_report(payload, limits)
    _LOG.debug("Loaded %d dependencies from %s", len(report.dependencies), path)
    return report


def load_and_validate(
    path: Path, limits: ReportLimitConfig | None = None
) -> tuple[DependencyRecord, ...]:
    """Return the dependency records of the report at ``path``.

    An empty tuple is a valid outcome and means the scan listed nothing.
    """

    return load_report(path, limits).dependencies
