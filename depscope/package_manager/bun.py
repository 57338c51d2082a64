"""bun 适配器

bun 没有 JSON 输出:
  outdated: 列对齐的表格文本（可能带 │ 边框）
  依赖树:   bun pm ls --all 的树形字符画

  /path/to/project node_modules (3)
  ├── a@1.0.0
  │   └── b@2.0.0
  └── c@3.0.0

每一层缩进固定 4 个字符（"│   " 或 "    "），深度 = 前缀长度 // 4。
其他宽度的连接符会被解析成错误的层级。
"""

from __future__ import annotations

import re

from depscope.core.models import (
    DependencyGraph,
    DependencyNode,
    DependencyType,
    OutdatedPackage,
    PackageManagerType,
)
from depscope.package_manager.base import BasePackageManager, split_name_version
from depscope.utils.shell import CommandResult

TREE_LINE_RE = re.compile(r"^((?:│   |    )*)(├──|└──) (.+)$")
INDENT_WIDTH = 4

_BORDER_CHARS = "│┃|"
_TYPE_MARKERS = {
    "(dev)": DependencyType.DEV,
    "(peer)": DependencyType.PEER,
    "(optional)": DependencyType.OPTIONAL,
}


def parse_tree_text(output: str) -> DependencyGraph:
    lines = output.splitlines()
    if not lines:
        return DependencyGraph.empty()

    # 首行通常是项目路径，取路径最后一段作为根名
    root_name = "root"
    if not TREE_LINE_RE.match(lines[0]):
        header = lines[0].strip().split(" ", 1)[0]
        root_name = re.split(r"[\\/]", header.rstrip("\\/"))[-1] or "root"
        lines = lines[1:]

    roots: list[DependencyNode] = []
    stack: list[tuple[DependencyNode, int]] = []

    for line in lines:
        match = TREE_LINE_RE.match(line.rstrip())
        if not match:
            continue
        depth = len(match.group(1)) // INDENT_WIDTH
        name, version = split_name_version(match.group(3).strip())
        node = DependencyNode(name=name, version=version)

        while stack and stack[-1][1] >= depth:
            stack.pop()
        if stack:
            stack[-1][0].dependencies.append(node)
        else:
            roots.append(node)
        stack.append((node, depth))

    return DependencyGraph(name=root_name, version="0.0.0", dependencies=roots)


def parse_outdated_text(output: str) -> list[OutdatedPackage]:
    packages: list[OutdatedPackage] = []
    for line in output.splitlines():
        if "─" in line or "Package" in line or "All packages" in line:
            continue
        if line.lstrip().startswith("bun "):
            continue
        for ch in _BORDER_CHARS:
            line = line.replace(ch, " ")
        parts = line.split()
        if len(parts) < 3:
            continue

        dep_type = DependencyType.DIRECT
        if parts[1] in _TYPE_MARKERS:
            dep_type = _TYPE_MARKERS[parts.pop(1)]
            if len(parts) < 3:
                continue

        name, current, latest = parts[0], parts[1], parts[-1]
        wanted = parts[2] if len(parts) >= 4 else latest
        packages.append(OutdatedPackage(
            name=name, current=current, wanted=wanted, latest=latest,
            dependency_type=dep_type,
        ))
    return packages


class BunPackageManager(BasePackageManager):
    name = PackageManagerType.BUN
    lockfile_name = "bun.lockb"
    command = "bun"

    dev_flag = "-d"
    exact_flag = "--exact"
    outdated_args = ("outdated",)
    tree_args = ("pm", "ls", "--all")
    audit_fix_args = None

    def parse_outdated(self, output: str) -> list[OutdatedPackage]:
        return parse_outdated_text(output)

    def parse_tree(self, result: CommandResult) -> DependencyGraph:
        if not result.success:
            return DependencyGraph.empty()
        return parse_tree_text(result.stdout)
