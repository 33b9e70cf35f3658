"""OpenBSD rc.d service implementation.

Installs a service as an rc.d script built on rc.subr and registers it in
the pkg_scripts line of rc.conf.local so it's started with the system.
"""

import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from ..command import check_command, run_command
from ..descriptor import (
    OPTION_RUN_WAIT,
    OPTION_RUNCOM_SCRIPT,
    OPTION_SVC_INFO,
    ServiceDescriptor,
)
from ..errors import (
    AlreadyExistsError,
    ServiceError,
    ServiceIOError,
    UnsupportedConfigurationError,
)
from .base import Program, Service
from .rcconf import RC_CONF_LOCAL, add_to_startup_list
from .runwait import run_wait
from .status import Status, translate_status
from .syslog import ConsoleLogger, SysLogger
from .template import RC_SCRIPT_TEMPLATE, RenderedScript, render_script

logger = logging.getLogger(__name__)

# Version of this service system implementation, used in error messages.
SYS_VERSION = "openbsd-runcom"

RC_D = Path("/etc/rc.d")


def is_interactive() -> bool:
    """Whether the process was started by something other than init."""
    return os.getppid() != 1


class RunComService(Service):
    """A service run by OpenBSD's rc.d."""

    def __init__(
        self,
        program: Program,
        descriptor: ServiceDescriptor,
        script_dir: Union[str, Path] = RC_D,
        rc_conf_local: Union[str, Path] = RC_CONF_LOCAL,
    ):
        self.program = program
        self.name = descriptor.name
        self.display_name = descriptor.display_name
        self.executable = descriptor.executable
        self.arguments = descriptor.arguments
        self.options = descriptor.options
        self.user_scoped = descriptor.user_scoped
        self.script_dir = Path(script_dir)
        self.rc_conf_local = Path(rc_conf_local)

    def platform(self) -> str:
        return "openbsd"

    def __str__(self) -> str:
        return self.display_name or self.name

    def __repr__(self) -> str:
        return f"RunComService(name={self.name!r}, script_dir={str(self.script_dir)!r})"

    @contextmanager
    def _annotate(self, action: str):
        try:
            yield
        except ServiceError as e:
            e.annotate(f"{action} {SYS_VERSION} {self.name} service")
            raise

    def script_path(self) -> Path:
        """Absolute path to the service's rc.d script."""
        if self.user_scoped:
            raise UnsupportedConfigurationError(
                f"user services are not supported on {SYS_VERSION}"
            )

        return self.script_dir / self.name

    def exec_path(self) -> str:
        """Absolute path to the executable rc.d should run."""
        if self.executable:
            return os.path.abspath(self.executable)

        argv0 = sys.argv[0] if sys.argv else ""
        if argv0 and os.path.isfile(argv0) and os.access(argv0, os.X_OK):
            return os.path.abspath(argv0)

        return sys.executable

    def render(self) -> RenderedScript:
        """Render the rc.d script without writing it."""
        template = self.options.get_string(OPTION_RUNCOM_SCRIPT, RC_SCRIPT_TEMPLATE)
        text = render_script(
            template,
            path=self.exec_path(),
            arguments=self.arguments,
            svc_info=self.options.get_string(OPTION_SVC_INFO, str(self)),
        )

        return RenderedScript(path=self.script_path(), text=text)

    def install(self):
        with self._annotate("installing"):
            self._write_script()
            add_to_startup_list(self.rc_conf_local, self.name)

    def _write_script(self):
        script_path = self.script_path()
        if script_path.exists() or script_path.is_symlink():
            raise AlreadyExistsError(f"script already exists at {script_path}")

        script = self.render()

        logger.info(f"Installing rc.d script to {script.path}")
        try:
            with open(script.path, "x") as f:
                f.write(script.text)
        except FileExistsError as e:
            raise AlreadyExistsError(f"script already exists at {script.path}") from e
        except OSError as e:
            raise ServiceIOError(f"creating rc.d script file: {e}") from e

        try:
            os.chmod(script.path, 0o755)
        except OSError as e:
            raise ServiceIOError(f"changing rc.d script file permissions: {e}") from e

    def uninstall(self):
        # The service stays listed in pkg_scripts.
        with self._annotate("uninstalling"):
            script_path = self.script_path()
            logger.info(f"Removing rc.d script {script_path}")
            try:
                script_path.unlink()
            except OSError as e:
                raise ServiceIOError(f"removing rc.d script: {e}") from e

    def logger(self) -> SysLogger:
        if is_interactive():
            return ConsoleLogger(self.name)

        return self.system_logger()

    def system_logger(self) -> SysLogger:
        return SysLogger(self.name)

    def run(self):
        self.program.start(self)

        self.options.get_func(OPTION_RUN_WAIT, run_wait)()

        return self.program.stop(self)

    def _run_com(self, cmd: str) -> str:
        return check_command(str(self.script_path()), [cmd])

    def status(self) -> Status:
        with self._annotate("getting status of"):
            # rc.subr exits non-zero for a stopped daemon, so only the output
            # decides.
            _, out = run_command(str(self.script_path()), ["check"])

            return translate_status(out, self.name)

    def start(self):
        with self._annotate("starting"):
            self._run_com("start")

    def stop(self):
        with self._annotate("stopping"):
            self._run_com("stop")

    def restart(self):
        self.stop()
        self.start()
