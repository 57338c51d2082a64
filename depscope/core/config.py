"""集中配置管理

提供统一的配置入口，替代各模块散落的默认常量。
支持从 YAML 文件加载 + 编程式覆盖。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field

import yaml

from depscope.core.exceptions import ConfigError
from depscope.utils.file_io import load_yaml

logger = logging.getLogger(__name__)

_PACKAGE_MANAGER_CHOICES = frozenset(("auto", "npm", "yarn", "pnpm", "bun"))


@dataclass
class Config:
    """全局配置"""

    # 项目扫描根目录（Web API 使用）
    workspace_root: str = "."

    # 包管理器
    default_package_manager: str = "auto"

    # 注册表
    registry_url: str = "https://registry.npmjs.org"
    offline_mode: bool = False
    cache_timeout: int = 30        # 分钟
    registry_timeout: int = 30     # 单次 HTTP 请求秒数

    # 许可证
    allowed_licenses: list[str] = field(default_factory=list)
    blocked_licenses: list[str] = field(default_factory=list)
    license_batch_size: int = 5

    # 安全
    severity_threshold: str = "moderate"

    debug: bool = False

    # 放不到字段里的配置项
    extra: dict = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.default_package_manager not in _PACKAGE_MANAGER_CHOICES:
            raise ConfigError(
                f"default_package_manager 取值无效: {self.default_package_manager}，"
                f"可选: {sorted(_PACKAGE_MANAGER_CHOICES)}"
            )
        if self.license_batch_size < 1:
            raise ConfigError("license_batch_size 必须 >= 1")

    @classmethod
    def from_file(cls, path: str = "depscope.yml") -> Config:
        """从 YAML 文件加载配置，不存在则返回默认"""
        try:
            data = load_yaml(path)
        except (yaml.YAMLError, OSError, ValueError) as e:
            raise ConfigError(f"配置文件无法读取: {path}: {e}") from e
        if not data:
            return cls()
        known = {f for f in cls.__dataclass_fields__ if f != "extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件内容无效: {path}: {e}") from e
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict:
        return asdict(self)


# 全局单例，首次 import 时不加载文件；由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = "depscope.yml") -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
