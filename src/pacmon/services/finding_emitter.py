"""Translate dependency records into test-reporting service messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from ..domain.models import DependencyRecord
from . import service_messages
from .sanitizer import normalize
from .service_messages import ServiceMessage
from .severity_gate import allowed

_LOG = logging.getLogger(__name__)

SUPPRESSED_PREFIX = "SUPPRESSED: "


@dataclass(frozen=True)
class EmissionResult:
    """Events produced for a report plus the artifact regeneration flag."""

    events: tuple[ServiceMessage, ...]
    had_any_vulnerability: bool

    @property
    def failures(self) -> int:
        return sum(1 for event in self.events if event.kind == service_messages.TEST_FAILED)

    @property
    def ignored(self) -> int:
        return sum(1 for event in self.events if event.kind == service_messages.TEST_IGNORED)


def _finding_message(name: str, severity: str) -> str:
    return f"{name} ({severity})"


def _emit_dependency(dependency: DependencyRecord, allow_list: str) -> list[ServiceMessage]:
    name = normalize(dependency.file_name)
    description = normalize(dependency.description)
    events = [service_messages.started(name, description)]

    for suppressed in dependency.suppressed_vulnerabilities:
        message = normalize(
            SUPPRESSED_PREFIX + _finding_message(suppressed.name, suppressed.severity)
        )
        events.append(service_messages.ignored(name, message))

    for vulnerability in dependency.vulnerabilities:
        message = normalize(_finding_message(vulnerability.name, vulnerability.severity))
        details = normalize(vulnerability.description)
        if allowed(vulnerability.severity, allow_list):
            events.append(service_messages.failed(name, message, details))
        else:
            _LOG.warning(
                "%s: %s %s (severity %s is not in the fail list)",
                name,
                message,
                details,
                normalize(vulnerability.severity) or "<none>",
            )

    events.append(service_messages.finished(name))
    return events


def emit_findings(
    dependencies: Iterable[DependencyRecord], allow_list: str
) -> EmissionResult:
    """
    Build the service message stream for ``dependencies`` in order.

    Every dependency is bracketed by started/finished events. Suppressed
    findings become ignored events, findings whose severity passes the gate
    become failures, and the rest are only logged. ``had_any_vulnerability``
    reports whether any dependency carried a finding, suppressed or not.
    """

    events: list[ServiceMessage] = []
    had_any_vulnerability = False
    for dependency in dependencies:
        if dependency.has_findings:
            had_any_vulnerability = True
        events.extend(_emit_dependency(dependency, allow_list))
    return EmissionResult(events=tuple(events), had_any_vulnerability=had_any_vulnerability)
