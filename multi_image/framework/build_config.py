from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

LOG_LEVELS: tuple[str, ...] = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass(frozen=True)
class ShareCall:
    name: str
    arguments: Mapping[str, Any]
    path: str


@dataclass(frozen=True)
class ImageConfig:
    name: str
    parent: str | None
    calls: tuple[ShareCall, ...] = ()


def parse_bool(value: Any, path: str) -> bool:
    """
    Strict boolean parsing to avoid bool('false') footguns.

    Accepts True/False, 0/1 and the strings true/false/1/0/yes/no
    (case-insensitive, surrounding whitespace ignored).
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("true", "1", "yes"):
            return True
        if normalized in ("false", "0", "no"):
            return False
    raise ValueError(f"Invalid boolean for {path}: {value!r}")


@dataclass(frozen=True)
class BuildConfig:
    build_dir: str
    log_level: str
    log_dir: str | None
    images: tuple[ImageConfig, ...]

    def image(self, name: str) -> ImageConfig:
        for image in self.images:
            if image.name == name:
                return image
        available = ", ".join(image.name for image in self.images) or "<none>"
        raise ValueError(f"Unknown image: {name} (available: {available})")

    def children(self, name: str) -> tuple[ImageConfig, ...]:
        return tuple(image for image in self.images if image.parent == name)

    def configuration_order(self) -> tuple[ImageConfig, ...]:
        """Children before parents, otherwise in declaration order."""

        ordered: list[ImageConfig] = []

        def visit(image: ImageConfig) -> None:
            for child in self.children(image.name):
                visit(child)
            ordered.append(image)

        for image in self.images:
            if image.parent is None:
                visit(image)
        return tuple(ordered)

    def resolve_path(self, raw: str) -> str:
        expanded = os.path.expandvars(os.path.expanduser(raw.strip()))
        if not os.path.isabs(expanded):
            expanded = os.path.join(self.build_dir, expanded)
        return os.path.abspath(expanded)

    @staticmethod
    def from_dict(
        cfg: Mapping[str, Any], *, base_dir: str | None = None
    ) -> tuple["BuildConfig", list[str]]:
        """
        Parse and validate a build description, returning (BuildConfig, warnings).

        Raises:
            ValueError: if required keys are missing or invalid.
        """

        if not isinstance(cfg, Mapping):
            raise ValueError("Build description must be a mapping")

        warnings: list[str] = []
        strict_unknown_keys = False
        if "strict" in cfg:
            strict_unknown_keys = parse_bool(cfg.get("strict"), "strict")

        unknown_keys: list[str] = []
        top_schema = ("strict", "build_dir", "logging", "images")
        unknown_keys.extend(key for key in cfg if key not in top_schema)

        logging_cfg = cfg.get("logging") or {}
        if not isinstance(logging_cfg, Mapping):
            raise ValueError("Invalid config type for logging: expected mapping")
        unknown_keys.extend(
            f"logging.{key}" for key in logging_cfg if key not in ("level", "log_dir")
        )

        root_dir = os.path.abspath(base_dir or os.getcwd())

        def normalize_path(value: Any, path: str) -> str:
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"Invalid config type for {path}: expected non-empty string")
            expanded = os.path.expandvars(os.path.expanduser(value.strip()))
            if not os.path.isabs(expanded):
                expanded = os.path.join(root_dir, expanded)
            return os.path.abspath(expanded)

        build_dir = normalize_path(cfg.get("build_dir", "build"), "build_dir")

        raw_level = logging_cfg.get("level", "INFO")
        if not isinstance(raw_level, str) or raw_level.strip().upper() not in LOG_LEVELS:
            raise ValueError(
                f"Invalid logging.level: {raw_level!r} (expected one of: {', '.join(LOG_LEVELS)})"
            )
        log_level = raw_level.strip().upper()

        raw_log_dir = logging_cfg.get("log_dir")
        log_dir = None if raw_log_dir is None else normalize_path(raw_log_dir, "logging.log_dir")

        raw_images = cfg.get("images")
        if raw_images is None:
            raise ValueError("Missing required config: images")
        if not isinstance(raw_images, list) or not raw_images:
            raise ValueError("Invalid config type for images: expected non-empty list")

        images: list[ImageConfig] = []
        seen: set[str] = set()
        for idx, raw_image in enumerate(raw_images):
            image_path = f"images[{idx}]"
            if not isinstance(raw_image, Mapping):
                raise ValueError(f"Invalid config type for {image_path}: expected mapping")
            unknown_keys.extend(
                f"{image_path}.{key}" for key in raw_image if key not in ("name", "parent", "calls")
            )

            name = raw_image.get("name")
            if not isinstance(name, str) or not name.strip():
                raise ValueError(f"Missing required config: {image_path}.name")
            name = name.strip()
            if name in seen:
                raise ValueError(f"Duplicate image name: {name}")
            seen.add(name)

            parent = raw_image.get("parent")
            if parent is not None:
                if not isinstance(parent, str) or not parent.strip():
                    raise ValueError(f"Invalid config type for {image_path}.parent: expected string")
                parent = parent.strip()
                if parent == name:
                    raise ValueError(f"Image {name} cannot be its own parent")

            raw_calls = raw_image.get("calls") or []
            if not isinstance(raw_calls, list):
                raise ValueError(f"Invalid config type for {image_path}.calls: expected list")

            calls: list[ShareCall] = []
            for call_idx, raw_call in enumerate(raw_calls):
                call_path = f"{image_path}.calls[{call_idx}]"
                if not isinstance(raw_call, Mapping) or len(raw_call) != 1:
                    raise ValueError(
                        f"Invalid call at {call_path}: expected a single-key mapping {{call: {{argument: value}}}}"
                    )
                ((call_name, arguments),) = raw_call.items()
                if not isinstance(call_name, str) or not call_name.strip():
                    raise ValueError(f"Invalid call name at {call_path}")
                if arguments is None:
                    arguments = {}
                if not isinstance(arguments, Mapping):
                    raise ValueError(
                        f"Invalid arguments for {call_path}.{call_name}: expected mapping"
                    )
                calls.append(ShareCall(name=call_name.strip(), arguments=dict(arguments), path=call_path))

            images.append(ImageConfig(name=name, parent=parent, calls=tuple(calls)))

        by_name = {image.name: image for image in images}
        for image in images:
            if image.parent is not None and image.parent not in by_name:
                raise ValueError(f"Unknown parent image for {image.name}: {image.parent}")

        for image in images:
            chain = [image.name]
            cur = image.parent
            while cur is not None:
                if cur in chain:
                    raise ValueError("Image parent cycle: " + " -> ".join([*chain, cur]))
                chain.append(cur)
                cur = by_name[cur].parent

        if unknown_keys:
            unknown_keys = sorted(set(unknown_keys))
            if strict_unknown_keys:
                raise ValueError("Unknown config keys: " + ", ".join(unknown_keys))
            warnings.extend(f"Unknown config key: {key}" for key in unknown_keys)

        return (
            BuildConfig(
                build_dir=build_dir,
                log_level=log_level,
                log_dir=log_dir,
                images=tuple(images),
            ),
            warnings,
        )
