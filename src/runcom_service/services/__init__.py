"""Service installation and management for rc.d based systems."""

import platform
from pathlib import Path
from typing import Union

from ..descriptor import ServiceDescriptor
from ..errors import UnsupportedConfigurationError
from .base import Program, Service
from .rcconf import RC_CONF_LOCAL
from .runcom import RC_D, SYS_VERSION, RunComService, is_interactive
from .status import Status

__all__ = [
    "Program",
    "RunComService",
    "RunComSystem",
    "Service",
    "Status",
    "choose_system",
    "new_service",
]


class RunComSystem:
    """The rc.d service system."""

    def __str__(self) -> str:
        return SYS_VERSION

    def detect(self) -> bool:
        return True

    def interactive(self) -> bool:
        return is_interactive()

    def new(
        self,
        program: Program,
        descriptor: ServiceDescriptor,
        script_dir: Union[str, Path] = RC_D,
        rc_conf_local: Union[str, Path] = RC_CONF_LOCAL,
    ) -> Service:
        return RunComService(
            program, descriptor, script_dir=script_dir, rc_conf_local=rc_conf_local
        )


def choose_system(force: bool = False) -> RunComSystem:
    """Return the service system for the running platform."""
    system = platform.system()

    if system == "OpenBSD" or force:
        return RunComSystem()

    raise UnsupportedConfigurationError(f"Unsupported platform: {system}")


def new_service(
    program: Program,
    descriptor: ServiceDescriptor,
    script_dir: Union[str, Path] = RC_D,
    rc_conf_local: Union[str, Path] = RC_CONF_LOCAL,
    force: bool = False,
) -> Service:
    """Create the service for descriptor on the running platform."""
    return choose_system(force=force).new(
        program, descriptor, script_dir=script_dir, rc_conf_local=rc_conf_local
    )
