"""包管理器选择与构造

选择顺序（纯函数，只看环境信号）:
  1. package.json 的 packageManager 字段前缀（如 "pnpm@8.15.0"）
  2. 锁文件: bun.lockb > pnpm-lock.yaml > yarn.lock > package-lock.json
  3. 配置的默认包管理器（非 "auto" 时）
  4. npm
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from depscope.core.models import PackageManagerType
from depscope.package_manager.base import BasePackageManager
from depscope.package_manager.bun import BunPackageManager
from depscope.package_manager.npm import NpmPackageManager
from depscope.package_manager.pnpm import PnpmPackageManager
from depscope.package_manager.yarn import YarnPackageManager

logger = logging.getLogger(__name__)

ADAPTERS: dict[PackageManagerType, type[BasePackageManager]] = {
    PackageManagerType.BUN: BunPackageManager,
    PackageManagerType.PNPM: PnpmPackageManager,
    PackageManagerType.YARN: YarnPackageManager,
    PackageManagerType.NPM: NpmPackageManager,
}

# 锁文件检测顺序
LOCKFILES: tuple[tuple[PackageManagerType, str], ...] = tuple(
    (kind, cls.lockfile_name) for kind, cls in ADAPTERS.items()
)


def detect_package_manager(
    project_path: str | Path,
    manifest: dict[str, Any] | None = None,
    default: str = "auto",
) -> PackageManagerType:
    declared = (manifest or {}).get("packageManager")
    if isinstance(declared, str):
        for kind in ADAPTERS:
            if declared.startswith(kind.value):
                return kind

    root = Path(project_path)
    for kind, lockfile in LOCKFILES:
        if (root / lockfile).exists():
            return kind

    if default != "auto":
        try:
            return PackageManagerType(default)
        except ValueError:
            logger.warning("未知的默认包管理器 '%s'，回退到 npm", default)
    return PackageManagerType.NPM


def find_lockfile(project_path: str | Path, kind: PackageManagerType) -> Path | None:
    lockfile = Path(project_path) / ADAPTERS[kind].lockfile_name
    return lockfile if lockfile.exists() else None


def create_package_manager(
    kind: PackageManagerType | str, project_path: str | Path,
) -> BasePackageManager:
    """构造适配器，未知类型回退到 npm"""
    try:
        kind = PackageManagerType(kind)
    except ValueError:
        logger.warning("未知的包管理器 '%s'，回退到 npm", kind)
        kind = PackageManagerType.NPM
    return ADAPTERS[kind](project_path)
