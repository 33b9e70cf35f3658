"""Interfaces shared by service implementations and the programs they run."""

from abc import ABC, abstractmethod

from .status import Status
from .syslog import SysLogger


class Program(ABC):
    """The daemon's own start/stop callbacks."""

    @abstractmethod
    def start(self, service: "Service"):
        """Start the daemon's work.  Must not block."""
        pass

    @abstractmethod
    def stop(self, service: "Service"):
        """Stop the daemon's work.  Must not block for long."""
        pass


class Service(ABC):
    """Lifecycle operations of a service managed by the system init."""

    @abstractmethod
    def install(self):
        pass

    @abstractmethod
    def uninstall(self):
        pass

    @abstractmethod
    def start(self):
        pass

    @abstractmethod
    def stop(self):
        pass

    @abstractmethod
    def restart(self):
        pass

    @abstractmethod
    def run(self):
        """Run the program in the current process until it's told to stop."""
        pass

    @abstractmethod
    def status(self) -> Status:
        pass

    @abstractmethod
    def logger(self) -> SysLogger:
        """Logger suited to how the process was started."""
        pass

    @abstractmethod
    def system_logger(self) -> SysLogger:
        pass

    @abstractmethod
    def platform(self) -> str:
        pass

    @abstractmethod
    def __str__(self) -> str:
        pass
