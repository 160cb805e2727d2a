"""Handoff file format.

A handoff file is plain UTF-8 text with no header:

    <image target>          one per line, insertion order
    ...
    <name>=<value>          shared_vars entries, then the other properties

The two blocks are joined by a single newline. List values are written as
`;`-joined strings. Values cannot contain newlines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

IMAGE_TARGETS = "image_targets"
SHARED_VARS = "shared_vars"
RESERVED_NAMES: tuple[str, ...] = (IMAGE_TARGETS, SHARED_VARS)

LIST_SEPARATOR = ";"

PropertyValue = str | list[str]


def encode_value(value: PropertyValue) -> str:
    if isinstance(value, list):
        return LIST_SEPARATOR.join(value)
    return value


def render_entry(name: str, value: PropertyValue) -> str:
    return f"{name}={encode_value(value)}"


def render_handoff(properties: Mapping[str, PropertyValue]) -> str:
    """Render one image's properties into handoff file content."""

    targets = list(properties.get(IMAGE_TARGETS, []))
    entries = list(properties.get(SHARED_VARS, []))
    for name, value in properties.items():
        if name in RESERVED_NAMES:
            continue
        entries.append(render_entry(name, value))
    return "\n".join(targets) + "\n" + "\n".join(entries)


@dataclass(frozen=True)
class HandoffLine:
    raw: str
    name: str | None = None
    value: str | None = None

    @property
    def is_entry(self) -> bool:
        return self.name is not None


def parse_line(line: str) -> HandoffLine:
    name, sep, value = line.partition("=")
    if not sep or not name:
        return HandoffLine(raw=line)
    return HandoffLine(raw=line, name=name, value=value)


def parse_handoff(text: str) -> list[HandoffLine]:
    return [parse_line(line) for line in text.splitlines() if line.strip()]


def read_handoff(path: str) -> list[HandoffLine]:
    with open(path, "r", encoding="utf-8") as handle:
        return parse_handoff(handle.read())


def split_list(value: str) -> list[str]:
    return [item for item in value.split(LIST_SEPARATOR) if item]


def dedupe(items: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    out: list[str] = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out


def check_value(values: Sequence[str]) -> str | None:
    """Return the first value the format cannot carry, if any."""

    for item in values:
        if "\n" in item or "\r" in item:
            return item
    return None
