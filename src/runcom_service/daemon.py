"""Daemon that keeps a configured command running while the service runs."""

import logging
import subprocess
from typing import Optional, Sequence

from .errors import CommandError
from .services.base import Program, Service

logger = logging.getLogger(__name__)


class CommandDaemon(Program):
    """Runs a command as a child process between start and stop."""

    def __init__(self, command: Sequence[str], stop_timeout: float = 10.0):
        """Initialize the daemon."""
        self.command = list(command)
        self.stop_timeout = stop_timeout
        self.process: Optional[subprocess.Popen] = None

    def start(self, service: Service):
        """Spawn the command."""
        if not self.command:
            raise CommandError("no command is configured to run")

        logger.debug(f"Spawning {self.command}")
        try:
            self.process = subprocess.Popen(self.command)
        except OSError as e:
            raise CommandError(f"starting {self.command[0]!r}: {e}") from e

        service.logger().infof("Started %s (pid %d)", self.command[0], self.process.pid)

    def stop(self, service: Service) -> Optional[int]:
        """Terminate the command, killing it if it doesn't exit in time."""
        if self.process is None:
            return None

        if self.process.poll() is None:
            self.process.terminate()
            try:
                self.process.wait(timeout=self.stop_timeout)
            except subprocess.TimeoutExpired:
                service.logger().warningf(
                    "%s didn't exit after %ss, killing it",
                    self.command[0],
                    self.stop_timeout,
                )
                self.process.kill()
                self.process.wait()

        returncode = self.process.returncode
        service.logger().infof("%s exited with status %d", self.command[0], returncode)
        self.process = None

        return returncode
