"""Named-argument call surface for share operations.

Every call validates its arguments before touching the registry, so an invalid
call never leaves partial state behind.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from sharekit.arguments import CallArguments, exclude_together, require_all_of, require_any_of
from sharekit.consumer import LookupResult, Scope, get_shared
from sharekit.errors import UnknownCall
from sharekit.generator import HandoffGenerator, ScheduledHandoff
from sharekit.registry import PropertyRegistry

logger = logging.getLogger(__name__)


@dataclass
class ShareSession:
    """Share calls made while configuring `image`."""

    image: str
    registry: PropertyRegistry = field(default_factory=PropertyRegistry)
    generator: HandoffGenerator | None = None
    scope: Scope = field(default_factory=Scope)
    resolve_path: Callable[[str], str] | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.image, str) or not self.image.strip():
            raise TypeError("ShareSession.image must be a non-empty string")
        self.image = self.image.strip()
        if self.generator is None:
            self.generator = HandoffGenerator(self.registry)
        elif self.generator.registry is not self.registry:
            raise ValueError("ShareSession generator must write from the session registry")

    def _path(self, raw: str) -> str:
        if self.resolve_path is None:
            return raw
        return self.resolve_path(raw)

    def set_shared(self, **kwargs: Any) -> None:
        """set_shared(image=, property=[name, *values], append=) or set_shared(file=)."""

        self._set_shared(CallArguments("set_shared", kwargs))

    def generate_shared(self, **kwargs: Any) -> ScheduledHandoff:
        return self._generate_shared(CallArguments("generate_shared", kwargs))

    def get_shared(self, var: str, **kwargs: Any) -> LookupResult:
        return self._get_shared(CallArguments("get_shared", {**kwargs, "var": var}))

    def call(self, name: str, arguments: Mapping[str, Any] | None) -> Any:
        key = (name or "").strip().lower()
        handler = {
            "set_shared": self._set_shared,
            "generate_shared": self._generate_shared,
            "get_shared": self._get_shared,
        }.get(key)
        if handler is None:
            raise UnknownCall(
                f"Unknown share call: {name} (available: generate_shared, get_shared, set_shared)"
            )

        args = CallArguments(key, arguments or {})
        logger.debug("%s: %s(%s)", self.image, key, ", ".join(sorted(args.bound_names())))
        return handler(args)

    def _set_shared(self, args: CallArguments) -> None:
        exclude_together(args, "file", "image", "property", "append")
        require_any_of(args, ("file", "property"))

        if args.is_bound("file"):
            path = self._path(args.get_str("file"))
            self.registry.import_file(path, image=self.image)
            return

        image = args.get_str("image", default=self.image)
        name, *values = args.get_list_str("property")
        append = args.get_bool("append", default=False)
        value: str | list[str] = values[0] if len(values) == 1 else values
        self.registry.set_shared(image, name, value, append=append)

    def _generate_shared(self, args: CallArguments) -> ScheduledHandoff:
        require_all_of(args, ("image", "file"))
        return self.generator.generate_shared(
            args.get_str("image"), self._path(args.get_str("file"))
        )

    def _get_shared(self, args: CallArguments) -> LookupResult:
        require_all_of(args, ("var", "image", "property"))
        # property may be given as a list, as for set_shared; the first item is the name.
        name = args.get_list_str("property")[0]
        return get_shared(
            self.registry,
            self.scope,
            args.get_str("var"),
            image=args.get_str("image"),
            name=name,
        )
