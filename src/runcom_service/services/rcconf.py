"""Editing the pkg_scripts list of rc.conf.local."""

import logging
import os
from pathlib import Path
from typing import List, Union

from ..errors import ConfigEditError

logger = logging.getLogger(__name__)

RC_CONF_LOCAL = Path("/etc/rc.conf.local")

# Services started with the system are listed on this line, space separated.
PKG_SCRIPTS_PREFIX = "pkg_scripts="


def _open_rc_conf(path: Path):
    """Open path for reading and writing, creating it if needed."""
    if path.is_dir():
        raise ConfigEditError(f"expected {path} to be a file but it's a directory")

    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o644)
    return os.fdopen(fd, "r+b")


def add_to_startup_list(path: Union[str, Path], name: str) -> bool:
    """
    Add name to the pkg_scripts line of the rc.conf.local file at path.

    Lines are scanned one at a time until the pkg_scripts line is found.
    If it already lists name nothing is written.  Otherwise name is
    appended to that line, or a new pkg_scripts line is appended to the
    file when there is none.  Every other line is kept as is.

    Returns True if the file was changed.
    """
    path = Path(path)
    prefix = PKG_SCRIPTS_PREFIX.encode()
    name_b = name.encode()

    try:
        with _open_rc_conf(path) as f:
            line_start = -1
            line = b""
            offset = 0
            for raw in f:
                start = offset
                offset += len(raw)
                stripped = raw.strip()
                if not stripped:
                    continue
                if stripped.startswith(prefix):
                    line_start, line = start, stripped
                    break

            if line_start < 0:
                # No pkg_scripts line, start one at the end of the file.
                size = f.seek(0, os.SEEK_END)
                if size > 0:
                    f.seek(size - 1)
                    needs_newline = f.read(1) != b"\n"
                else:
                    needs_newline = False

                f.write((b"\n" if needs_newline else b"") + prefix + name_b + b"\n")
                logger.info(f"Added {PKG_SCRIPTS_PREFIX}{name} to {path}")
                return True

            names = line[len(prefix):].split()
            if name_b in names:
                logger.debug(f"{name} is already started with the system")
                return False

            if names:
                line += b" "
            line += name_b + b"\n"

            rest = f.read()
            f.seek(line_start)
            f.write(line + rest)
            f.truncate()
            logger.info(f"Appended {name} to {PKG_SCRIPTS_PREFIX} in {path}")
            return True
    except OSError as e:
        raise ConfigEditError(f"updating {path}: {e}") from e


def read_startup_list(path: Union[str, Path]) -> List[str]:
    """Return the services listed on the pkg_scripts line, in order."""
    path = Path(path)
    if not path.exists():
        return []

    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            for raw in f:
                stripped = raw.strip()
                if stripped.startswith(PKG_SCRIPTS_PREFIX):
                    return stripped[len(PKG_SCRIPTS_PREFIX):].split()
    except OSError as e:
        raise ConfigEditError(f"reading {path}: {e}") from e

    return []
