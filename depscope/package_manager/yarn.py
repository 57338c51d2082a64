"""yarn (v1) 适配器

yarn --json 输出的是 JSON Lines，每行一条带 type 字段的记录:
  outdated: type == "table" 的记录，data.head 为列名，data.body 为行
  依赖树:   恰有一行 type == "tree"，节点名形如 "name@version"
无法解析的行直接跳过，不影响其他行。
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from typing import Any

from depscope.core.models import (
    DependencyGraph,
    DependencyNode,
    DependencyType,
    OutdatedPackage,
    PackageManagerType,
)
from depscope.package_manager.base import BasePackageManager, split_name_version
from depscope.utils.shell import CommandResult

logger = logging.getLogger(__name__)

# yarn outdated 表头: Package, Current, Wanted, Latest, Package Type, URL
_DEFAULT_TYPE_COLUMN = 4


def iter_json_lines(output: str) -> Iterator[dict[str, Any]]:
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            record = json.loads(line)
        except json.JSONDecodeError:
            logger.debug("跳过无法解析的行: %s", line[:120])
            continue
        if isinstance(record, dict):
            yield record


def parse_outdated_lines(output: str) -> list[OutdatedPackage]:
    packages: list[OutdatedPackage] = []
    for record in iter_json_lines(output):
        if record.get("type") != "table":
            continue
        data = record.get("data")
        if not isinstance(data, dict):
            logger.debug("跳过结构异常的 table 记录")
            continue
        head = data.get("head")
        if not isinstance(head, list):
            head = []
        type_col = head.index("Package Type") if "Package Type" in head else _DEFAULT_TYPE_COLUMN
        body = data.get("body")
        for row in body if isinstance(body, list) else []:
            if not isinstance(row, list) or len(row) < 4:
                continue
            name, current, wanted, latest = (str(c) for c in row[:4])
            dep_type = row[type_col] if len(row) > type_col else None
            packages.append(OutdatedPackage(
                name=name,
                current=current,
                wanted=wanted,
                latest=latest,
                dependency_type=DependencyType.parse(dep_type),
            ))
    return packages


def _convert_node(node: dict[str, Any]) -> DependencyNode:
    name, version = split_name_version(str(node.get("name", "")))
    children = node.get("children") or []
    return DependencyNode(
        name=name,
        version=version,
        dependencies=[_convert_node(c) for c in children if isinstance(c, dict)],
    )


def parse_tree_lines(output: str) -> DependencyGraph:
    tree = next(
        (r for r in iter_json_lines(output) if r.get("type") == "tree"), None,
    )
    if tree is None:
        return DependencyGraph.empty()
    data = tree.get("data")
    trees = data.get("trees") if isinstance(data, dict) else None
    if not isinstance(trees, list):
        trees = []
    return DependencyGraph(
        name="root",
        version="0.0.0",
        dependencies=[_convert_node(t) for t in trees if isinstance(t, dict)],
    )


class YarnPackageManager(BasePackageManager):
    name = PackageManagerType.YARN
    lockfile_name = "yarn.lock"
    command = "yarn"

    dev_flag = "--dev"
    exact_flag = "--exact"
    update_verb = "upgrade"
    audit_fix_args = ("audit", "fix")

    def parse_outdated(self, output: str) -> list[OutdatedPackage]:
        return parse_outdated_lines(output)

    def parse_tree(self, result: CommandResult) -> DependencyGraph:
        return parse_tree_lines(result.stdout)
