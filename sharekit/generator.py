"""Deferred handoff file generation.

`generate_shared` only records which image goes to which file. Content is
rendered in `finalize`, after every configuration-time call has run, so late
`set_shared` calls still reach the file.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from sharekit.errors import DuplicateOutput, GenerationClosed
from sharekit.handoff_file import render_handoff
from sharekit.registry import PropertyRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduledHandoff:
    image: str
    path: str


@dataclass(frozen=True)
class GeneratedHandoff:
    image: str
    path: str
    content: str
    written: bool


@dataclass
class HandoffGenerator:
    """Schedules handoff files and writes them in `finalize`.

    `claimed_outputs` maps every scheduled path to its image. Pass the same
    mapping to the generators of one build so no two images share a file.
    """

    registry: PropertyRegistry
    claimed_outputs: dict[str, str] = field(default_factory=dict)
    _scheduled: list[ScheduledHandoff] = field(default_factory=list, init=False)
    _generated: list[GeneratedHandoff] = field(default_factory=list, init=False)
    _finalized: bool = field(default=False, init=False)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def scheduled(self) -> tuple[ScheduledHandoff, ...]:
        return tuple(self._scheduled)

    def generated(self) -> tuple[GeneratedHandoff, ...]:
        return tuple(self._generated)

    def generate_shared(self, image: str, path: str) -> ScheduledHandoff:
        if self._finalized:
            raise GenerationClosed(
                f"generate_shared(image={image}) called after the generation phase ran"
            )
        if not isinstance(image, str) or not image.strip():
            raise ValueError("image must be a non-empty string")
        if not isinstance(path, str) or not path.strip():
            raise ValueError("path must be a non-empty string")

        target = os.path.abspath(path.strip())
        owner = self.claimed_outputs.get(target)
        if owner is not None:
            raise DuplicateOutput(
                f"generate_shared(file={target}) already scheduled for image {owner}"
            )

        scheduled = ScheduledHandoff(image=image.strip(), path=target)
        self.claimed_outputs[target] = scheduled.image
        self._scheduled.append(scheduled)
        logger.debug("Scheduled handoff file for %s: %s", scheduled.image, target)
        return scheduled

    def finalize(self) -> tuple[GeneratedHandoff, ...]:
        """Run the generation phase. Must be called exactly once."""

        if self._finalized:
            raise GenerationClosed("Generation phase already ran")
        self._finalized = True

        for scheduled in self._scheduled:
            if not self.registry.has_image(scheduled.image):
                logger.info(
                    "No shared properties for image %s; writing empty handoff %s",
                    scheduled.image,
                    scheduled.path,
                )
            content = render_handoff(self.registry.properties(scheduled.image))
            written = _write_if_changed(scheduled.path, content)
            self._generated.append(
                GeneratedHandoff(
                    image=scheduled.image,
                    path=scheduled.path,
                    content=content,
                    written=written,
                )
            )
            logger.info(
                "Generated handoff for %s: %s%s",
                scheduled.image,
                scheduled.path,
                "" if written else " (unchanged)",
            )
        return tuple(self._generated)


def _write_if_changed(path: str, content: str) -> bool:
    if os.path.isfile(path):
        with open(path, "r", encoding="utf-8", newline="") as handle:
            if handle.read() == content:
                return False

    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="\n") as handle:
        handle.write(content)
    return True
