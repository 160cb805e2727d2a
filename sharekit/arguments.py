"""Named-argument carrier and guard helpers for share calls."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Iterable

from sharekit.errors import ConflictingArguments, InvalidArgumentType, MissingRequiredArgument

_MISSING = object()


def _normalize_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise TypeError("Argument name must be a non-empty string")
    return name.strip().lower()


@dataclass
class CallArguments:
    """Arguments bound by one call.

    A name is bound when it was passed with a value other than None. Names the
    call does not know about are carried along and ignored.
    """

    call: str
    data: Mapping[str, Any]
    _bound: dict[str, Any] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.call, str) or not self.call.strip():
            raise TypeError("CallArguments.call must be a non-empty string")
        self.call = self.call.strip()
        if not isinstance(self.data, Mapping):
            raise TypeError(
                f"{self.call}(...) arguments must be a mapping (type={type(self.data).__name__})"
            )
        for key, value in self.data.items():
            if not isinstance(key, str) or not key.strip():
                raise InvalidArgumentType(f"{self.call}(...) argument names must be non-empty strings")
            if value is not None:
                self._bound[_normalize_name(key)] = value

    @classmethod
    def of(cls, call: str, **kwargs: Any) -> "CallArguments":
        return cls(call, kwargs)

    def is_bound(self, name: str) -> bool:
        return _normalize_name(name) in self._bound

    def bound_names(self) -> tuple[str, ...]:
        return tuple(self._bound.keys())

    def value(self, name: str, default: Any = None) -> Any:
        return self._bound.get(_normalize_name(name), default)

    def _get_raw(self, name: str, *, default: Any) -> Any:
        key = _normalize_name(name)
        if key not in self._bound:
            if default is _MISSING:
                raise MissingRequiredArgument(self.call, (key,))
            return default
        return self._bound[key]

    def get_str(self, name: str, *, default: str | None | object = _MISSING) -> str | None:
        raw = self._get_raw(name, default=default)
        if raw is None:
            return None
        if not isinstance(raw, str):
            raise InvalidArgumentType(
                f"{self.call}({name}) must be a string (type={type(raw).__name__})"
            )
        value = raw.strip()
        if not value:
            raise InvalidArgumentType(f"{self.call}({name}) cannot be empty")
        return value

    def get_bool(self, name: str, *, default: bool = False) -> bool:
        raw = self._get_raw(name, default=default)
        if not isinstance(raw, bool):
            raise InvalidArgumentType(
                f"{self.call}({name}) must be a boolean (type={type(raw).__name__})"
            )
        return raw

    def get_list_str(self, name: str) -> list[str]:
        """Return a multi-value argument; a lone string counts as one item.

        YAML numbers and booleans are kept as their `str()` text.
        """

        raw = self._get_raw(name, default=_MISSING)
        if isinstance(raw, str):
            raw = [raw]
        if not isinstance(raw, (list, tuple)):
            raise InvalidArgumentType(
                f"{self.call}({name}) must be a list of strings (type={type(raw).__name__})"
            )

        items: list[str] = []
        for idx, item in enumerate(raw):
            if isinstance(item, (bool, int, float)):
                item = str(item)
            if not isinstance(item, str):
                raise InvalidArgumentType(
                    f"{self.call}({name})[{idx}] must be a string (type={type(item).__name__})"
                )
            items.append(item)
        if not items:
            raise InvalidArgumentType(f"{self.call}({name}) cannot be empty")
        return items


def require_any_of(args: CallArguments, names: Iterable[str]) -> None:
    candidates = tuple(_normalize_name(name) for name in names)
    if any(args.is_bound(name) for name in candidates):
        return
    raise MissingRequiredArgument(args.call, candidates)


def require_all_of(args: CallArguments, names: Iterable[str]) -> None:
    for name in names:
        if not args.is_bound(name):
            raise MissingRequiredArgument(args.call, (_normalize_name(name),))


def exclude_together(args: CallArguments, primary: str, *excluded: str) -> None:
    if not args.is_bound(primary):
        return
    for name in excluded:
        if args.is_bound(name) and args.value(name):
            raise ConflictingArguments(args.call, _normalize_name(primary), _normalize_name(name))
