"""Service loggers routed into the logging module."""

import logging
from typing import Optional


class SysLogger:
    """Leveled logger handed to services running under rc.d.

    rc.d has no notion of warnings, so warnings are logged at INFO with a
    "warning: " prefix.  Every method returns None; logging never fails the
    caller.
    """

    def __init__(self, name: str, log: Optional[logging.Logger] = None):
        self.name = name
        self.log = log or logging.getLogger(f"runcom_service.{name}")

    def error(self, *v):
        self.log.error(_join(v))

    def warning(self, *v):
        self.log.info("warning: %s", _join(v))

    def info(self, *v):
        self.log.info(_join(v))

    def errorf(self, format: str, *args):
        self.log.error(format, *args)

    def warningf(self, format: str, *args):
        self.log.info("warning: %s", format % args if args else format)

    def infof(self, format: str, *args):
        self.log.info(format, *args)


class ConsoleLogger(SysLogger):
    """Logger used when the service is driven from a terminal."""

    def warning(self, *v):
        self.log.warning(_join(v))

    def warningf(self, format: str, *args):
        self.log.warning(format, *args)


def _join(v) -> str:
    return " ".join(str(x) for x in v)
