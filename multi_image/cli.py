from __future__ import annotations

import argparse
import os
import sys
import uuid
from collections.abc import Sequence

from sharekit import ShareError, read_handoff


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="multi-image", add_help=True)
    sub = parser.add_subparsers(dest="command", required=True)

    configure = sub.add_parser("configure", help="Configure every image of a build description")
    configure.add_argument("--config", default=None, help="Path to the build description YAML")
    configure.add_argument("--build-dir", default=None, help="Override build_dir")

    list_images = sub.add_parser("list-images", help="List images in configuration order")
    list_images.add_argument("--config", default=None, help="Path to the build description YAML")

    show = sub.add_parser("show-handoff", help="Print the entries of a handoff file")
    show.add_argument("file")

    return parser


def _load_build_config(config_path: str | None, build_dir: str | None = None):
    from .foundation.config_io import load_config
    from .framework.build_config import BuildConfig

    raw, meta = load_config(config_path=config_path)
    if build_dir is not None:
        raw = {**raw, "build_dir": build_dir}
    base_dir = os.path.dirname(meta["paths"][0]) if meta["paths"] else None
    return BuildConfig.from_dict(raw, base_dir=base_dir)


def _configure(config_path: str | None, build_dir: str | None) -> int:
    from .app.configure import configure_build
    from .foundation.logging_utils import setup_operational_logger

    cfg, warnings = _load_build_config(config_path, build_dir)
    run_id = uuid.uuid4().hex[:12]
    logger, _log_file = setup_operational_logger(run_id, level=cfg.log_level, log_dir=cfg.log_dir)
    for warning in warnings:
        logger.warning(warning)

    try:
        result = configure_build(cfg, logger=logger)
    except ShareError as exc:
        logger.error("Configuration failed: %s", exc)
        return 1

    for image in result.images:
        for handoff in image.generated:
            print(f"{image.image}: {handoff.path}")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    if args.command == "configure":
        try:
            return _configure(args.config, args.build_dir)
        except (ValueError, FileNotFoundError) as exc:
            print(f"multi-image: {exc}", file=sys.stderr)
            return 1

    if args.command == "list-images":
        try:
            cfg, _warnings = _load_build_config(args.config)
        except (ValueError, FileNotFoundError) as exc:
            print(f"multi-image: {exc}", file=sys.stderr)
            return 1
        for image in cfg.configuration_order():
            parent = image.parent or "-"
            print(f"{image.name}\tparent={parent}\tcalls={len(image.calls)}")
        return 0

    if args.command == "show-handoff":
        try:
            lines = read_handoff(args.file)
        except FileNotFoundError as exc:
            print(f"multi-image: {exc}", file=sys.stderr)
            return 1
        for line in lines:
            if line.is_entry:
                print(f"{line.name} = {line.value}")
            else:
                print(f"target {line.raw}")
        return 0

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
