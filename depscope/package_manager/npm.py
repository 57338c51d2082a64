"""npm 适配器

outdated: JSON 对象，以包名为键
依赖树:   npm ls --all --json 的嵌套 JSON；存在未满足的 peer 依赖时
          npm 以非零退出码结束，但仍输出完整 JSON，所以不看退出码
"""

from __future__ import annotations

import json

from depscope.core.models import (
    DependencyGraph,
    DependencyType,
    OutdatedPackage,
    PackageManagerType,
)
from depscope.package_manager.base import BasePackageManager, nested_json_node
from depscope.utils.shell import CommandResult


def parse_outdated_json(output: str, type_field: str) -> list[OutdatedPackage]:
    """npm / pnpm 共用: {name: {current, wanted, latest, <type_field>}}"""
    data = json.loads(output)
    if not isinstance(data, dict):
        return []
    packages: list[OutdatedPackage] = []
    for name, info in data.items():
        if not isinstance(info, dict):
            continue
        current = info.get("current") or "unknown"
        wanted = info.get("wanted") or current
        packages.append(OutdatedPackage(
            name=name,
            current=current,
            wanted=wanted,
            latest=info.get("latest") or wanted,
            dependency_type=DependencyType.parse(info.get(type_field)),
        ))
    return packages


def parse_nested_tree(data: object) -> DependencyGraph:
    """npm / pnpm 共用: 根对象带 name / version / dependencies"""
    if not isinstance(data, dict):
        return DependencyGraph.empty()
    deps = data.get("dependencies")
    return DependencyGraph(
        name=data.get("name") or "root",
        version=data.get("version") or "0.0.0",
        dependencies=[
            nested_json_node(name, info) for name, info in deps.items()
        ] if isinstance(deps, dict) else [],
    )


class NpmPackageManager(BasePackageManager):
    name = PackageManagerType.NPM
    lockfile_name = "package-lock.json"
    command = "npm"

    install_verb = "install"
    uninstall_verb = "uninstall"
    tree_args = ("ls", "--all", "--json")
    audit_fix_args = ("audit", "fix")

    def parse_outdated(self, output: str) -> list[OutdatedPackage]:
        return parse_outdated_json(output, "type")

    def parse_tree(self, result: CommandResult) -> DependencyGraph:
        return parse_nested_tree(json.loads(result.stdout))
