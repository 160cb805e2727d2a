import logging

import pytest

from multi_image.app.configure import configure_build
from multi_image.framework.build_config import BuildConfig
from sharekit.errors import DuplicateOutput, MissingRequiredArgument


def _logger() -> logging.Logger:
    logger = logging.getLogger("test.configure_build")
    logger.setLevel(logging.DEBUG)
    return logger


def _three_level_build(tmp_path) -> BuildConfig:
    raw = {
        "build_dir": str(tmp_path / "build"),
        "images": [
            {
                "name": "app",
                "calls": [
                    {"get_shared": {"var": "direct", "image": "mcuboot", "property": "visible_in_parent"}},
                    {"get_shared": {"var": "deep", "image": "mcuboot", "property": "GRANDCHILD_ONLY"}},
                    {"get_shared": {"var": "missing", "image": "nonexistent", "property": "X"}},
                ],
            },
            {
                "name": "mcuboot",
                "parent": "app",
                "calls": [
                    {"set_shared": {"image": "mcuboot", "property": ["visible_in_parent", "I AM YOUR CHILD"]}},
                    {"generate_shared": {"image": "mcuboot", "file": "mcuboot/shared_vars.txt"}},
                    {"set_shared": {"file": "s0/shared_vars.txt"}},
                    {"set_shared": {"image": "mcuboot", "append": True, "property": ["image_targets", "mcuboot_hex"]}},
                ],
            },
            {
                "name": "s0",
                "parent": "mcuboot",
                "calls": [
                    {"set_shared": {"image": "s0", "property": ["GRANDCHILD_ONLY", "from s0"]}},
                    {"set_shared": {"image": "s0", "append": True, "property": ["image_targets", "s0_hex"]}},
                    {"generate_shared": {"image": "s0", "file": "s0/shared_vars.txt"}},
                ],
            },
        ],
    }
    cfg, _warnings = BuildConfig.from_dict(raw, base_dir=str(tmp_path))
    return cfg


def test_properties_propagate_through_every_level(tmp_path):
    cfg = _three_level_build(tmp_path)

    result = configure_build(cfg, logger=_logger())

    assert [image.image for image in result.images] == ["s0", "mcuboot", "app"]
    app = result.image("app")
    assert app.variables["direct"] == "I AM YOUR CHILD"
    assert app.variables["deep"] == "from s0"
    assert "missing" not in app.variables


def test_intermediate_handoff_includes_late_writes_and_reshared_lines(tmp_path):
    cfg = _three_level_build(tmp_path)

    configure_build(cfg, logger=_logger())

    content = (tmp_path / "build" / "mcuboot" / "shared_vars.txt").read_text(encoding="utf-8")
    assert content == (
        "mcuboot_hex\n"
        "s0_hex\n"
        "GRANDCHILD_ONLY=from s0\n"
        "visible_in_parent=I AM YOUR CHILD"
    )


def test_parent_loads_only_its_own_childrens_handoffs(tmp_path):
    cfg = _three_level_build(tmp_path)

    result = configure_build(cfg, logger=_logger())

    assert result.image("s0").loaded == ()
    assert result.image("mcuboot").loaded == (str(tmp_path / "build" / "s0" / "shared_vars.txt"),)
    assert result.image("app").loaded == (str(tmp_path / "build" / "mcuboot" / "shared_vars.txt"),)


def test_invalid_call_aborts_the_run(tmp_path):
    raw = {
        "build_dir": str(tmp_path / "build"),
        "images": [
            {"name": "app", "calls": [{"generate_shared": {"file": "app.txt"}}]},
        ],
    }
    cfg, _warnings = BuildConfig.from_dict(raw, base_dir=str(tmp_path))

    with pytest.raises(MissingRequiredArgument, match=r"generate_shared\(\.\.\.\) missing a required argument: image"):
        configure_build(cfg, logger=_logger())
    assert not (tmp_path / "build").exists()


def test_sibling_images_cannot_generate_the_same_file(tmp_path):
    raw = {
        "build_dir": str(tmp_path / "build"),
        "images": [
            {"name": "app"},
            {
                "name": "a",
                "parent": "app",
                "calls": [{"generate_shared": {"image": "a", "file": "shared.txt"}}],
            },
            {
                "name": "b",
                "parent": "app",
                "calls": [{"generate_shared": {"image": "b", "file": "shared.txt"}}],
            },
        ],
    }
    cfg, _warnings = BuildConfig.from_dict(raw, base_dir=str(tmp_path))

    with pytest.raises(DuplicateOutput, match=r"already scheduled for image a"):
        configure_build(cfg, logger=_logger())
    assert (tmp_path / "build" / "shared.txt").read_text(encoding="utf-8") == "\n"
