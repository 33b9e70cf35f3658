"""Running external commands for the service controller."""

from __future__ import annotations

import logging
import shlex
import subprocess
from typing import Sequence

from .errors import CommandError

logger = logging.getLogger(__name__)

# Captured stdout is truncated to this many characters before it is returned.
MAX_OUTPUT_SIZE = 64 * 1024


def run_command(command: str, arguments: Sequence[str] = ()) -> tuple[int, str]:
    """
    Run command with arguments and capture its output.

    Returns (returncode, stdout).  A non-zero exit status is returned, not
    raised; only a command that can't be spawned raises CommandError.
    """
    cmd = [command, *arguments]
    logger.debug("Executing: %s", " ".join(shlex.quote(c) for c in cmd))

    try:
        proc = subprocess.run(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
        )
    except OSError as e:
        raise CommandError(f"command {command!r} failed: {e}") from e

    stdout = (proc.stdout or "")[:MAX_OUTPUT_SIZE]
    stderr = (proc.stderr or "").strip()
    if stderr:
        logger.debug("%s stderr:\n%s", command, stderr)

    return proc.returncode, stdout


def check_command(command: str, arguments: Sequence[str] = ()) -> str:
    """Run command like run_command but raise CommandError on a non-zero exit."""
    rc, out = run_command(command, arguments)
    if rc != 0:
        logger.error(
            "%s failed (%d)\nSTDOUT:\n%s", command, rc, out.strip()
        )
        raise CommandError(
            f"command {command!r} exited with status {rc}",
            returncode=rc,
            output=out,
        )

    return out
