from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

CONFIG_ENV_VAR = "MULTI_IMAGE_CONFIG"
BUILD_FILE = "build.yaml"
LOCAL_BUILD_FILE = "build.local.yaml"


def find_repo_root(start: str | os.PathLike[str] | None = None) -> str:
    """Return the nearest directory at or above `start` holding a pyproject.toml."""

    start_path = Path(start or os.getcwd()).resolve()
    for candidate in (start_path, *start_path.parents):
        if (candidate / "pyproject.toml").is_file():
            return str(candidate)
    raise FileNotFoundError(f"No pyproject.toml found at or above {start_path}")


def _read_build_file(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ValueError(f"Invalid YAML in {path}: {exc}") from exc

    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise ValueError(f"Build description must contain a YAML mapping: {path}")
    return dict(payload)


def _overlay(base: Mapping[str, Any], local: Mapping[str, Any], *, path: str = "") -> dict[str, Any]:
    # Nested mappings merge key by key; any other local value replaces the base one.
    merged = dict(base)
    for key, value in local.items():
        where = f"{path}.{key}" if path else str(key)
        current = merged.get(key)
        if isinstance(current, Mapping) and value is not None:
            if not isinstance(value, Mapping):
                raise ValueError(
                    f"Invalid config overlay merge at {where}: expected a mapping, got {type(value).__name__}"
                )
            merged[key] = _overlay(current, value, path=where)
        else:
            merged[key] = value
    return merged


def load_config(
    *,
    config_path: str | os.PathLike[str] | None = None,
    env_var: str | None = CONFIG_ENV_VAR,
    config_dir: str | os.PathLike[str] | None = None,
) -> tuple[dict[str, Any], dict[str, Any]]:
    """
    Load a build description from YAML.

    Resolution order: explicit `config_path`, then the `env_var` environment
    variable, then `build.yaml` in `config_dir` (default: `<repo_root>/config`)
    with an optional `build.local.yaml` merged on top.

    Returns `(cfg, meta)` where meta records which files were read.
    """

    if config_path is not None:
        explicit, mode = str(config_path).strip(), "explicit"
    else:
        explicit, mode = (os.environ.get(env_var, "") if env_var else "").strip(), "env"

    if explicit:
        resolved = os.path.abspath(os.path.expanduser(explicit))
        return _read_build_file(resolved), {"mode": mode, "paths": [resolved]}

    directory = str(config_dir) if config_dir is not None else os.path.join(find_repo_root(), "config")
    base_path = os.path.abspath(os.path.join(directory, BUILD_FILE))
    if not os.path.isfile(base_path):
        raise FileNotFoundError(f"Missing build description: {base_path}")

    cfg = _read_build_file(base_path)
    paths = [base_path]
    local_path = os.path.abspath(os.path.join(directory, LOCAL_BUILD_FILE))
    if os.path.isfile(local_path):
        cfg = _overlay(cfg, _read_build_file(local_path))
        paths.append(local_path)

    return cfg, {"mode": "base+local" if len(paths) > 1 else "base", "paths": paths}
