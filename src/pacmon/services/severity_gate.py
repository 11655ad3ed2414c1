"""Decide which vulnerability severities fail the build."""

from __future__ import annotations

from .sanitizer import normalize

DEFAULT_SEVERITIES = "LOW, MEDIUM, HIGH, CRITICAL"
"""Severities that fail the build unless the operator narrows the list."""


def allowed(severity: str | None, allow_list: str) -> bool:
    """
    Return True when the normalized ``severity`` occurs in ``allow_list``.

    This is a plain substring test against the configured text, not a token
    lookup: ``allowed("LOW", "LOW, HIGH")`` is True, and so is any label that
    happens to be contained in the list text (``allowed("IGH", "HIGH")``).
    Empty or missing severities never match.
    """

    label = normalize(severity)
    if not label:
        return False
    return label in (allow_list or "")
