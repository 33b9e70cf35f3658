"""Exceptions raised by the rc.d service controller."""


class ServiceError(Exception):
    """Base class for every service lifecycle failure."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def annotate(self, context: str) -> "ServiceError":
        """Prefix the message with the action and service it happened in."""
        self.message = f"{context}: {self.message}"
        self.args = (self.message,)
        return self

    def __str__(self) -> str:
        return self.message


class UnsupportedConfigurationError(ServiceError):
    """The requested service configuration can't be handled by rc.d."""


class AlreadyExistsError(ServiceError):
    """A script is already installed at the target path."""


class NotInstalledError(ServiceError):
    """The status probe gave no sign that the service is installed.

    status is the state the probe leaves the service in, Status.UNKNOWN
    when raised by translate_status.
    """

    def __init__(self, message: str, status=None):
        super().__init__(message)
        self.status = status


class CommandError(ServiceError):
    """An external command couldn't be spawned or exited non-zero."""

    def __init__(self, message: str, returncode: int | None = None, output: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.output = output


class ServiceIOError(ServiceError):
    """Creating, changing or removing the script file failed."""


class ConfigEditError(ServiceError):
    """The startup-configuration file couldn't be read or updated."""


class TemplateRenderError(ServiceError):
    """The script template is malformed."""
