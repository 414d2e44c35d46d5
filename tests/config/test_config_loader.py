# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for YAML config loading.
"""

from pathlib import Path

import pytest

from releasekit.config.exceptions import ConfigLoadError, ConfigValidationError
from releasekit.config.loader import load_config


class TestLoadConfig:
    def test_none_returns_defaults(self) -> None:
        config = load_config(None)
        assert config.product.artifact_prefix == "Launcher"
        assert config.packager.output_dir == "dist"

    def test_valid_file_overrides_fields(self, tmp_config_file: Path) -> None:
        config = load_config(tmp_config_file)
        assert config.log_level == "DEBUG"
        assert config.product.artifact_prefix == "Product"
        assert config.product.slug == "product-launcher"
        assert config.product.product_name == "Launcher"
        assert config.publish.repository_url == "https://github.com/example/product"

    def test_empty_file_means_defaults(self, tmp_path: Path) -> None:
        empty = tmp_path / "empty.yaml"
        empty.write_text("", encoding="utf-8")
        assert load_config(empty) == load_config(None)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not found"):
            load_config(tmp_path / "nope.yaml")

    def test_directory_is_not_a_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError, match="not a file"):
            load_config(tmp_path)

    def test_broken_yaml(self, broken_yaml_file: Path) -> None:
        with pytest.raises(ConfigLoadError, match="Invalid YAML"):
            load_config(broken_yaml_file)

    def test_top_level_list_is_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigLoadError, match="mapping"):
            load_config(path)

    def test_unknown_key_is_rejected(self, invalid_config_file: Path) -> None:
        with pytest.raises(ConfigValidationError, match="nickname"):
            load_config(invalid_config_file)
