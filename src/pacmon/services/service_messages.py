"""TeamCity service messages used to report dependencies as tests.

Each message is a single line::

    ##teamcity[testStarted name='lib.jar' captureStandardOutput='...']

Attribute values are embedded verbatim; callers normalize them with
:func:`pacmon.services.sanitizer.normalize` first.
"""

from __future__ import annotations

from dataclasses import dataclass

PREFIX = "##teamcity"

TEST_STARTED = "testStarted"
TEST_STDOUT = "testStdOut"
TEST_IGNORED = "testIgnored"
TEST_FAILED = "testFailed"
TEST_FINISHED = "testFinished"

FAILURE_TYPE = "vulnerability"
"""Category tag attached to every failed-test message."""


@dataclass(frozen=True)
class ServiceMessage:
    """One protocol event with its attributes in emission order."""

    kind: str
    attributes: tuple[tuple[str, str], ...] = ()

    def get(self, key: str, default: str | None = None) -> str | None:
        for name, value in self.attributes:
            if name == key:
                return value
        return default

    def render(self) -> str:
        parts = [self.kind]
        parts.extend(f"{name}='{value}'" for name, value in self.attributes)
        return f"{PREFIX}[{' '.join(parts)}]"

    def __str__(self) -> str:
        return self.render()


def started(name: str, message: str) -> ServiceMessage:
    return ServiceMessage(
        TEST_STARTED, (("name", name), ("captureStandardOutput", message))
    )


def stdout(name: str, out: str) -> ServiceMessage:
    return ServiceMessage(TEST_STDOUT, (("name", name), ("out", out)))


def ignored(name: str, message: str) -> ServiceMessage:
    return ServiceMessage(TEST_IGNORED, (("name", name), ("message", message)))


def failed(name: str, message: str, details: str) -> ServiceMessage:
    return ServiceMessage(
        TEST_FAILED,
        (
            ("name", name),
            ("message", message),
            ("details", details),
            ("type", FAILURE_TYPE),
        ),
    )


def finished(name: str) -> ServiceMessage:
    return ServiceMessage(TEST_FINISHED, (("name", name),))
