"""rc.d script rendering."""

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from ..errors import TemplateRenderError

RC_SCRIPT_TEMPLATE = """#!/bin/sh
#
# $OpenBSD: {svc_info}

daemon={path}
daemon_flags={arguments}

. /etc/rc.d/rc.subr

rc_bg=YES

rc_cmd $1
"""


@dataclass(frozen=True)
class RenderedScript:
    """Script text and the path it's installed to."""

    path: Path
    text: str


def quote_arguments(arguments: Sequence[str]) -> str:
    """Join arguments into the single shell token rc.subr expects."""
    return shlex.quote(" ".join(arguments))


def render_script(
    template: str, path: str, arguments: Sequence[str], svc_info: str
) -> str:
    """
    Render an rc.d script template.

    The template is a str.format string with the fields {path} (the quoted
    absolute executable path), {arguments} (all arguments quoted as one
    token) and {svc_info}.  Literal braces must be doubled, so shell
    expansions such as ${{var}} are written with double braces.  svc_info
    lands on a comment line; line breaks in it are replaced by spaces.
    """
    try:
        return template.format(
            path=shlex.quote(path),
            arguments=quote_arguments(arguments),
            svc_info=" ".join(svc_info.splitlines()),
        )
    except (KeyError, IndexError, ValueError, AttributeError) as e:
        raise TemplateRenderError(f"rendering rc.d script template: {e!r}") from e
