"""Scrub scanner-supplied text before it is embedded in service messages."""

from __future__ import annotations

import re

CONTROL_PATTERN = re.compile(r"[\t\n\r']")
"""Tabs, line breaks and single quotes; quotes delimit service message values."""

SEMICOLON_PATTERN = re.compile(r" *; *")
"""Spaces hugging a semicolon, collapsed so the result is stable."""


def normalize(value: str | None) -> str:
    """Return ``value`` safe for a service message attribute.

    Control characters and single quotes are dropped, then ``" ;"`` and
    ``"; "`` runs collapse to ``";"``. Everything else, including non-ASCII
    text, passes through. ``None`` is treated as an empty string.
    """

    if not value:
        return ""
    stripped = CONTROL_PATTERN.sub("", value)
    return SEMICOLON_PATTERN.sub(";", stripped)
