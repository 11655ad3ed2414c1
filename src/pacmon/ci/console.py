"""Console adjustments for running under a CI build agent."""

from __future__ import annotations

import logging
import os
import sys
from typing import Mapping, TextIO

_LOG = logging.getLogger(__name__)

CI_ENV = "TEAMCITY_VERSION"
"""Set by the TeamCity agent for every build step."""

CI_COLUMNS = "8192"
"""Terminal width handed to the scanner so its lines are never wrapped."""


def running_under_ci(environ: Mapping[str, str] | None = None) -> bool:
    environ = os.environ if environ is None else environ
    return bool(environ.get(CI_ENV))


def configure_console(
    environ: Mapping[str, str] | None = None, stream: TextIO | None = None
) -> dict[str, str] | None:
    """
    Prepare stdout and the child environment for a CI build log.

    Returns the environment the scanner should run with, or None to inherit
    the current one unchanged when not running under CI.
    """

    environ = os.environ if environ is None else environ
    if not running_under_ci(environ):
        return None

    stream = sys.stdout if stream is None else stream
    reconfigure = getattr(stream, "reconfigure", None)
    if reconfigure is not None:
        reconfigure(line_buffering=True)
    _LOG.debug("CI agent %s detected; widening console", environ.get(CI_ENV))
    child_env = dict(environ)
    child_env["COLUMNS"] = CI_COLUMNS
    return child_env
