"""Reading shared properties on the parent side."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterator

from sharekit.handoff_file import IMAGE_TARGETS, PropertyValue, dedupe, read_handoff, split_list
from sharekit.registry import PropertyRegistry

logger = logging.getLogger(__name__)


@dataclass
class Scope:
    """Variable scope of one caller. Lookups write one level outward."""

    variables: dict[str, Any] = field(default_factory=dict)
    parent: "Scope | None" = None

    def child(self) -> "Scope":
        return Scope(parent=self)

    def is_defined(self, name: str) -> bool:
        return name in self.variables

    def get(self, name: str, default: Any = None) -> Any:
        return self.variables.get(name, default)

    def set(self, name: str, value: Any) -> None:
        self.variables[name] = value

    def unset(self, name: str) -> None:
        self.variables.pop(name, None)

    def set_parent(self, name: str, value: Any | None) -> None:
        if self.parent is None:
            raise RuntimeError(f"Scope has no parent to receive {name}")
        if value is None:
            self.parent.unset(name)
        else:
            self.parent.set(name, value)

    def __iter__(self) -> Iterator[str]:
        return iter(self.variables)


@dataclass(frozen=True)
class Found:
    image: str
    name: str
    value: PropertyValue

    @property
    def items(self) -> list[str]:
        if isinstance(self.value, list):
            return list(self.value)
        return split_list(self.value)


@dataclass(frozen=True)
class NotFound:
    image: str
    name: str
    image_known: bool


LookupResult = Found | NotFound


def lookup(registry: PropertyRegistry, image: str, name: str) -> LookupResult:
    if not registry.has_image(image):
        return NotFound(image=image, name=name, image_known=False)
    value = registry.lookup(image, name)
    if value is None:
        return NotFound(image=image, name=name, image_known=True)
    return Found(image=image, name=name, value=value)


def get_shared(
    registry: PropertyRegistry,
    scope: Scope,
    var: str,
    *,
    image: str,
    name: str,
) -> LookupResult:
    """Store `image`'s property `name` in `var` of the caller's `scope`.

    Unknown images leave `var` untouched. A known image without the property
    unsets `var`.
    """

    result = lookup(registry, image, name)
    if isinstance(result, NotFound) and not result.image_known:
        logger.debug("get_shared(%s): image %s not shared; %s left untouched", name, image, var)
        return result

    value = result.value if isinstance(result, Found) else None
    scope.child().set_parent(var, value)
    logger.debug("get_shared(%s.%s) -> %s=%r", image, name, var, value)
    return result


def load_handoff(registry: PropertyRegistry, image: str, path: str) -> int:
    """Make a child's generated handoff file visible under `image`.

    Lines without `=` extend the image's targets; `name=value` lines set
    `name` to the raw value. Returns the number of lines loaded.
    """

    lines = read_handoff(path)
    targets: list[str] = []
    for line in lines:
        if line.is_entry:
            registry.set_shared(image, line.name, line.value)
        else:
            targets.append(line.raw)
    if targets or not lines:
        registry.set_shared(image, IMAGE_TARGETS, dedupe(targets), append=True)
    logger.debug("Loaded %d handoff line(s) for %s from %s", len(lines), image, path)
    return len(lines)
