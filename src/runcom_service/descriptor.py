"""Service descriptor and the option bag it carries."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterator, Mapping, Optional, Tuple, Union

OptionValue = Union[bool, str, Callable[[], None]]

# Option names understood by the rc.d controller.
OPTION_USER_SERVICE = "UserService"
# str.format template replacing the built-in rc.d script; literal braces,
# including shell ${var} expansions, must be doubled.
OPTION_RUNCOM_SCRIPT = "RunComScript"
OPTION_SVC_INFO = "SvcInfo"
OPTION_RUN_WAIT = "RunWait"


class Options(Mapping[str, OptionValue]):
    """Read-only option bag with typed accessors.

    Every accessor falls back to its default when the option is missing or
    holds a value of another kind.
    """

    def __init__(self, values: Optional[Mapping[str, OptionValue]] = None):
        self._values = MappingProxyType(dict(values or {}))

    def __getitem__(self, key: str) -> OptionValue:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Options({dict(self._values)!r})"

    def get_bool(self, name: str, default: bool) -> bool:
        value = self._values.get(name)
        if isinstance(value, bool):
            return value
        return default

    def get_string(self, name: str, default: str) -> str:
        value = self._values.get(name)
        if isinstance(value, str):
            return value
        return default

    def get_func(
        self, name: str, default: Callable[[], None]
    ) -> Callable[[], None]:
        value = self._values.get(name)
        if callable(value) and not isinstance(value, (bool, str)):
            return value
        return default


@dataclass(frozen=True)
class ServiceDescriptor:
    """What to install: the service identity and how to launch it."""

    name: str
    display_name: Optional[str] = None
    executable: Optional[str] = None
    arguments: Tuple[str, ...] = ()
    options: Options = field(default_factory=Options)

    def __post_init__(self):
        if not self.name:
            raise ValueError("service name is required")
        # Accept any sequence/mapping from callers, store immutable copies.
        object.__setattr__(self, "arguments", tuple(str(a) for a in self.arguments))
        if not isinstance(self.options, Options):
            object.__setattr__(self, "options", Options(self.options))

    @property
    def user_scoped(self) -> bool:
        return self.options.get_bool(OPTION_USER_SERVICE, False)
