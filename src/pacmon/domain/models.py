"""Core scan-report entities without I/O for PacMon."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class VulnerabilityRecord:
    """A single finding reported against a dependency."""

    name: str = ""
    severity: str = ""
    description: str = ""


@dataclass(frozen=True)
class SuppressedVulnerabilityRecord(VulnerabilityRecord):
    """A finding excluded by an operator suppression rule."""


@dataclass(frozen=True)
class DependencyRecord:
    """One scanned artifact and the findings attached to it."""

    file_name: str = ""
    description: str = ""
    vulnerabilities: tuple[VulnerabilityRecord, ...] = ()
    suppressed_vulnerabilities: tuple[SuppressedVulnerabilityRecord, ...] = ()

    @property
    def has_findings(self) -> bool:
        return bool(self.vulnerabilities or self.suppressed_vulnerabilities)


@dataclass(frozen=True)
class ScanReport:
    """Dependencies listed by one scanner run, in document order."""

    dependencies: tuple[DependencyRecord, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.dependencies
