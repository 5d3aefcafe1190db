from __future__ import annotations

from pathlib import Path

import pytest

from core.config.loader import load_config
from core.utils.errors import ConfigError


def test_default_config_loads() -> None:
    config = load_config()

    assert config.cache.enabled is True
    assert config.cache.hash_algorithm == "sha256"
    assert config.cache.sidecar_suffix == ".fingerprint"
    assert config.mapping.dictionary_has_header is True


def test_partial_config_uses_defaults(tmp_path: Path) -> None:
    path = tmp_path / "mapgate.yaml"
    path.write_text("cache:\n  enabled: false\n", encoding="utf-8")

    config = load_config(path)

    assert config.cache.enabled is False
    assert config.cache.hash_algorithm == "sha256"


def test_empty_file_is_all_defaults(tmp_path: Path) -> None:
    path = tmp_path / "mapgate.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path).cache.enabled is True


def test_missing_config_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Config file not found"):
        load_config(tmp_path / "missing.yaml")


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    path = tmp_path / "mapgate.yaml"
    path.write_text("cache: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid YAML"):
        load_config(path)


def test_unknown_keys_are_rejected(tmp_path: Path) -> None:
    path = tmp_path / "mapgate.yaml"
    path.write_text("cache:\n  remote_url: http://example\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid config schema"):
        load_config(path)


def test_unknown_hash_algorithm_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "mapgate.yaml"
    path.write_text("cache:\n  hash_algorithm: crc32\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_sidecar_suffix_with_separator_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "mapgate.yaml"
    path.write_text("cache:\n  sidecar_suffix: a/b\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_non_mapping_config_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "mapgate.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="must contain a mapping"):
        load_config(path)
