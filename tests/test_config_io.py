import os

import pytest

from multi_image.foundation.config_io import find_repo_root, load_config


def test_load_config_base_only(tmp_path, monkeypatch):
    monkeypatch.delenv("TEST_MULTI_IMAGE_CONFIG", raising=False)
    (tmp_path / "build.yaml").write_text("a: 1\nb:\n  c: 2\n", encoding="utf-8")

    cfg, meta = load_config(config_dir=tmp_path, env_var="TEST_MULTI_IMAGE_CONFIG")

    assert cfg == {"a": 1, "b": {"c": 2}}
    assert meta["mode"] == "base"
    assert os.path.basename(meta["paths"][0]) == "build.yaml"


def test_load_config_base_plus_local_overlay(tmp_path, monkeypatch):
    monkeypatch.delenv("TEST_MULTI_IMAGE_CONFIG", raising=False)
    (tmp_path / "build.yaml").write_text("a: 1\nb:\n  c: 2\n", encoding="utf-8")
    (tmp_path / "build.local.yaml").write_text("b:\n  c: 3\n  d: 4\n", encoding="utf-8")

    cfg, meta = load_config(config_dir=tmp_path, env_var="TEST_MULTI_IMAGE_CONFIG")

    assert cfg == {"a": 1, "b": {"c": 3, "d": 4}}
    assert meta["mode"] == "base+local"
    assert len(meta["paths"]) == 2


def test_load_config_overlay_type_mismatch_raises(tmp_path, monkeypatch):
    monkeypatch.delenv("TEST_MULTI_IMAGE_CONFIG", raising=False)
    (tmp_path / "build.yaml").write_text("a:\n  b: 1\n", encoding="utf-8")
    (tmp_path / "build.local.yaml").write_text("a: [1, 2]\n", encoding="utf-8")

    with pytest.raises(ValueError, match=r"Invalid config overlay merge at a"):
        load_config(config_dir=tmp_path, env_var="TEST_MULTI_IMAGE_CONFIG")


def test_load_config_local_overlay_replaces_lists(tmp_path, monkeypatch):
    monkeypatch.delenv("TEST_MULTI_IMAGE_CONFIG", raising=False)
    (tmp_path / "build.yaml").write_text("images:\n  - name: app\n  - name: boot\n", encoding="utf-8")
    (tmp_path / "build.local.yaml").write_text("images:\n  - name: app\n", encoding="utf-8")

    cfg, _meta = load_config(config_dir=tmp_path, env_var="TEST_MULTI_IMAGE_CONFIG")

    assert cfg == {"images": [{"name": "app"}]}


def test_load_config_env_var_selects_single_file(tmp_path, monkeypatch):
    explicit = tmp_path / "other.yaml"
    explicit.write_text("images: []\n", encoding="utf-8")
    monkeypatch.setenv("TEST_MULTI_IMAGE_CONFIG", str(explicit))

    cfg, meta = load_config(config_dir=tmp_path, env_var="TEST_MULTI_IMAGE_CONFIG")

    assert cfg == {"images": []}
    assert meta["mode"] == "env"
    assert meta["paths"] == [os.path.abspath(str(explicit))]


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match=r"must contain a YAML mapping"):
        load_config(config_path=str(path))


def test_find_repo_root_uses_pyproject_marker(tmp_path):
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'x'\n", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_repo_root(str(nested)) == str(tmp_path.resolve())
