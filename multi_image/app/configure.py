"""Two-phase configuration of a multi-image build.

Each image is configured as if in its own process: it gets a fresh property
registry, sees its children only through the handoff files they generated,
runs its share calls (configuration phase) and then writes its own handoff
files (generation phase).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from sharekit import (
    GeneratedHandoff,
    HandoffGenerator,
    InvalidCall,
    PropertyRegistry,
    ShareSession,
    load_handoff,
)

from multi_image.framework.build_config import BuildConfig, ImageConfig


@dataclass(frozen=True)
class ImageResult:
    image: str
    variables: dict[str, Any]
    generated: tuple[GeneratedHandoff, ...]
    loaded: tuple[str, ...]


@dataclass(frozen=True)
class BuildResult:
    images: tuple[ImageResult, ...]

    def image(self, name: str) -> ImageResult:
        for result in self.images:
            if result.image == name:
                return result
        raise KeyError(name)


def _load_children(
    cfg: BuildConfig,
    image: ImageConfig,
    registry: PropertyRegistry,
    generated_by_image: dict[str, tuple[GeneratedHandoff, ...]],
    logger: logging.Logger,
) -> list[str]:
    loaded: list[str] = []
    for child in cfg.children(image.name):
        handoffs = generated_by_image.get(child.name, ())
        if not handoffs:
            logger.debug("Child image %s of %s generated no handoff files", child.name, image.name)
        for handoff in handoffs:
            count = load_handoff(registry, handoff.image, handoff.path)
            logger.info(
                "Loaded %d shared line(s) from %s into %s", count, handoff.path, image.name
            )
            loaded.append(handoff.path)
    return loaded


def configure_image(
    cfg: BuildConfig,
    image: ImageConfig,
    generated_by_image: dict[str, tuple[GeneratedHandoff, ...]],
    *,
    logger: logging.Logger,
    claimed_outputs: dict[str, str] | None = None,
) -> ImageResult:
    registry = PropertyRegistry()
    loaded = _load_children(cfg, image, registry, generated_by_image, logger)

    generator = HandoffGenerator(
        registry, claimed_outputs=claimed_outputs if claimed_outputs is not None else {}
    )
    session = ShareSession(
        image=image.name,
        registry=registry,
        generator=generator,
        resolve_path=cfg.resolve_path,
    )

    logger.info("Configuring image %s (%d call(s))", image.name, len(image.calls))
    for call in image.calls:
        try:
            session.call(call.name, call.arguments)
        except InvalidCall as exc:
            logger.error("Configuration of %s aborted at %s: %s", image.name, call.path, exc)
            raise

    generated = session.generator.finalize()
    return ImageResult(
        image=image.name,
        variables=dict(session.scope.variables),
        generated=generated,
        loaded=tuple(loaded),
    )


def configure_build(cfg: BuildConfig, *, logger: logging.Logger) -> BuildResult:
    generated_by_image: dict[str, tuple[GeneratedHandoff, ...]] = {}
    # Output paths are claimed build-wide.
    claimed_outputs: dict[str, str] = {}
    results: list[ImageResult] = []

    for image in cfg.configuration_order():
        result = configure_image(
            cfg, image, generated_by_image, logger=logger, claimed_outputs=claimed_outputs
        )
        generated_by_image[image.name] = result.generated
        results.append(result)

    logger.info("Configured %d image(s)", len(results))
    return BuildResult(images=tuple(results))
