"""Per-image property store for one configuration run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sharekit.errors import PropertyTypeMismatch, UnsupportedValue
from sharekit.handoff_file import (
    IMAGE_TARGETS,
    RESERVED_NAMES,
    SHARED_VARS,
    PropertyValue,
    check_value,
    dedupe,
    read_handoff,
)

logger = logging.getLogger(__name__)

RESHARE_IMAGE = "__reshared__"


def _normalize_image(image: str) -> str:
    if not isinstance(image, str) or not image.strip():
        raise ValueError("image must be a non-empty string")
    return image.strip()


def _normalize_name(name: str) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValueError("property name must be a non-empty string")
    return name.strip()


def _as_items(value: PropertyValue) -> list[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        items = list(value)
        for idx, item in enumerate(items):
            if not isinstance(item, str):
                raise TypeError(
                    f"property value[{idx}] must be a string (type={type(item).__name__})"
                )
        return items
    raise TypeError(f"property value must be a string or list of strings (type={type(value).__name__})")


@dataclass
class PropertyRegistry:
    """Image -> {name -> value} mapping.

    Entries are only ever added or overwritten. Lists keep insertion order and
    never hold duplicates after an append. Reserved names are always lists
    and every write to them appends.
    """

    _images: dict[str, dict[str, PropertyValue]] = field(default_factory=dict)

    def images(self) -> tuple[str, ...]:
        return tuple(self._images.keys())

    def has_image(self, image: str) -> bool:
        return (image or "").strip() in self._images

    def properties(self, image: str) -> dict[str, PropertyValue]:
        entry = self._images.get((image or "").strip(), {})
        return {key: list(value) if isinstance(value, list) else value for key, value in entry.items()}

    def lookup(self, image: str, name: str) -> PropertyValue | None:
        entry = self._images.get((image or "").strip())
        if entry is None:
            return None
        value = entry.get((name or "").strip())
        if isinstance(value, list):
            return list(value)
        return value

    def _entry(self, image: str) -> dict[str, PropertyValue]:
        return self._images.setdefault(image, {})

    def set_shared(
        self,
        image: str,
        name: str,
        value: PropertyValue,
        *,
        append: bool = False,
    ) -> PropertyValue:
        image = _normalize_image(image)
        name = _normalize_name(name)
        items = _as_items(value)

        bad = check_value(items)
        if bad is not None:
            raise UnsupportedValue(
                f"Shared property {image}.{name} value contains a newline: {bad!r}"
            )

        entry = self._entry(image)
        # Reserved names accumulate across writers whatever `append` says.
        if append or name in RESERVED_NAMES:
            existing = entry.get(name, [])
            if isinstance(existing, str):
                raise PropertyTypeMismatch(image, name, existing="scalar", requested="append to")
            stored: PropertyValue = dedupe([*existing, *items])
        elif isinstance(value, (list, tuple)):
            stored = items
        else:
            stored = items[0]

        entry[name] = stored
        logger.debug("Shared property %s.%s=%r (append=%s)", image, name, stored, append)
        return list(stored) if isinstance(stored, list) else stored

    def import_file(self, path: str, *, image: str) -> int:
        """Re-share every line of a handoff file from `image`.

        Lines are appended verbatim to `image`'s shared_vars list. Entries are
        also recorded under RESHARE_IMAGE so they stay queryable by name.
        Returns the number of lines read.
        """

        image = _normalize_image(image)
        lines = read_handoff(path)

        self.set_shared(image, SHARED_VARS, [line.raw for line in lines], append=True)

        for line in lines:
            if line.is_entry:
                self.set_shared(RESHARE_IMAGE, line.name, line.value)
            else:
                self.set_shared(RESHARE_IMAGE, IMAGE_TARGETS, line.raw, append=True)

        logger.debug("Re-shared %d line(s) from %s into %s", len(lines), path, image)
        return len(lines)
