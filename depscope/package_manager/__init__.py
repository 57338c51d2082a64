"""包管理器适配器

- base.py:    统一操作契约 + 清单读写
- npm.py:     嵌套 JSON
- yarn.py:    JSON Lines
- pnpm.py:    嵌套 JSON（项目数组）
- bun.py:     表格文本 / 树形字符画
- factory.py: 按环境信号选择适配器
"""

from depscope.package_manager.base import BasePackageManager
from depscope.package_manager.bun import BunPackageManager
from depscope.package_manager.factory import (
    create_package_manager,
    detect_package_manager,
    find_lockfile,
)
from depscope.package_manager.npm import NpmPackageManager
from depscope.package_manager.pnpm import PnpmPackageManager
from depscope.package_manager.yarn import YarnPackageManager

__all__ = [
    "BasePackageManager",
    "BunPackageManager",
    "NpmPackageManager",
    "PnpmPackageManager",
    "YarnPackageManager",
    "create_package_manager",
    "detect_package_manager",
    "find_lockfile",
]
