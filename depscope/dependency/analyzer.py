"""未使用依赖分析

静态扫描项目源码中的 import / require 目标，与 package.json 中声明的
生产依赖（dependencies 段）做差集。

只做文本正则匹配，不解析 AST:
  - 动态拼接的 require 目标、字符串构造的路径、非标准模块系统识别不到
  - 仅提供类型声明的包（如 @types/*）不做特殊处理，可能被误报
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from depscope.core.models import DependencyType
from depscope.package_manager.base import BasePackageManager

logger = logging.getLogger(__name__)

EXCLUDED_DIRS = frozenset(("node_modules", ".git", "dist", "build"))
SOURCE_EXTENSIONS = frozenset((
    ".ts", ".tsx", ".js", ".jsx", ".mjs", ".cjs", ".vue", ".svelte",
))

# [^'";]*? 允许跨行的花括号导入，但不会越过字符串或语句结尾
IMPORT_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"""\bimport\s+[^'";]*?\s*from\s*['"]([^'"]+)['"]"""),
    re.compile(r"""\bimport\s*\(\s*['"]([^'"]+)['"]\s*\)"""),
    re.compile(r"""\brequire\s*\(\s*['"]([^'"]+)['"]\s*\)"""),
    re.compile(r"""\bexport\s+[^'";]*?\s*from\s*['"]([^'"]+)['"]"""),
    re.compile(r"""\bimport\s+['"]([^'"]+)['"]"""),
)


def extract_imports(content: str) -> list[str]:
    """提取源码中所有 import / require / re-export 的目标字符串"""
    targets: list[str] = []
    for pattern in IMPORT_PATTERNS:
        targets.extend(m.group(1) for m in pattern.finditer(content))
    return targets


def package_name_from_import(target: str) -> str | None:
    """'@scope/pkg/sub' -> '@scope/pkg'，'lodash/fp' -> 'lodash'，相对/绝对路径 -> None"""
    if not target or target.startswith((".", "/")):
        return None
    parts = target.split("/")
    if target.startswith("@"):
        if len(parts) < 2 or not parts[1]:
            return None
        return f"{parts[0]}/{parts[1]}"
    return parts[0]


def find_source_files(root: Path) -> list[Path]:
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDED_DIRS)
        for filename in sorted(filenames):
            if os.path.splitext(filename)[1] in SOURCE_EXTENSIONS:
                files.append(Path(dirpath) / filename)
    return files


class DependencyAnalyzer:
    def __init__(
        self, package_manager: BasePackageManager, project_path: str | Path,
    ) -> None:
        self.package_manager = package_manager
        self.project_path = Path(project_path)

    def find_unused_dependencies(self) -> list[str]:
        """声明在 dependencies 段却从未被导入的包名（保持清单顺序）"""
        production = [
            p.name for p in self.package_manager.list()
            if p.dependency_type == DependencyType.DIRECT
        ]
        if not production:
            return []

        used = self.scan_for_imports()
        unused = [name for name in production if name not in used]
        logger.info(
            "未使用依赖扫描: %d 个生产依赖, %d 个未被引用", len(production), len(unused),
        )
        return unused

    def scan_for_imports(self) -> set[str]:
        used: set[str] = set()
        for path in find_source_files(self.project_path):
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("跳过无法读取的源文件: %s (%s)", path, e)
                continue
            for target in extract_imports(content):
                name = package_name_from_import(target)
                if name:
                    used.add(name)
        return used
