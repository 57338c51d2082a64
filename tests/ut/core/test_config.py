"""Config 单元测试"""

from __future__ import annotations

from pathlib import Path

import pytest

import depscope.core.config as cfgmod
from depscope.core.config import Config
from depscope.core.exceptions import ConfigError


class TestConfig:
    def test_defaults(self) -> None:
        cfg = Config()
        assert cfg.cache_timeout == 30
        assert cfg.license_batch_size == 5
        assert cfg.offline_mode is False
        assert cfg.registry_url == "https://registry.npmjs.org"

    def test_invalid_package_manager(self) -> None:
        with pytest.raises(ConfigError, match="default_package_manager"):
            Config(default_package_manager="cargo")

    def test_invalid_batch_size(self) -> None:
        with pytest.raises(ConfigError):
            Config(license_batch_size=0)

    def test_from_missing_file(self, tmp_path: Path) -> None:
        assert Config.from_file(str(tmp_path / "none.yml")) == Config()

    def test_from_file_with_extra(self, tmp_path: Path) -> None:
        p = tmp_path / "depscope.yml"
        p.write_text(
            "offline_mode: true\nblocked_licenses: [GPL-3.0]\nteam: web\n",
            encoding="utf-8",
        )
        cfg = Config.from_file(str(p))
        assert cfg.offline_mode is True
        assert cfg.blocked_licenses == ["GPL-3.0"]
        assert cfg.extra == {"team": "web"}

    def test_malformed_yaml(self, tmp_path: Path) -> None:
        p = tmp_path / "depscope.yml"
        p.write_text("a: [1, 2\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="配置文件无法读取"):
            Config.from_file(str(p))

    def test_init_config_sets_global(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(cfgmod, "_current", None)
        p = tmp_path / "depscope.yml"
        p.write_text("cache_timeout: 5\n", encoding="utf-8")
        cfgmod.init_config(str(p))
        assert cfgmod.get_config().cache_timeout == 5
