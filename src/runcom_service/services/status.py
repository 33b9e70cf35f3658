"""Translation of rc.d status probe output."""

import enum

from ..errors import NotInstalledError


class Status(enum.Enum):
    """State of an installed service."""

    RUNNING = "running"
    STOPPED = "stopped"
    UNKNOWN = "unknown"
    NOT_INSTALLED = "not installed"


def translate_status(output: str, name: str) -> Status:
    """Map the output of `<script> check` to a Status.

    rc.subr prints exactly "<name>(ok)" or "<name>(failed)".  Anything else
    means the script isn't the one we installed, so the status is unknown
    and NotInstalledError is raised.
    """
    if output == f"{name}(ok)\n":
        return Status.RUNNING
    if output == f"{name}(failed)\n":
        return Status.STOPPED

    raise NotInstalledError(
        f"the service is not installed: {output!r}", status=Status.UNKNOWN
    )
