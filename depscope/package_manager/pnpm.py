"""pnpm 适配器

outdated: 与 npm 同构的 JSON 对象，依赖类型字段名为 dependencyType
依赖树:   pnpm list --json 返回项目数组，取第一个；根上的 devDependencies /
          optionalDependencies 单独成段，合并进顶层并打上标记
"""

from __future__ import annotations

import json

from depscope.core.models import DependencyGraph, OutdatedPackage, PackageManagerType
from depscope.package_manager.base import BasePackageManager, nested_json_node
from depscope.package_manager.npm import parse_nested_tree, parse_outdated_json
from depscope.utils.shell import CommandResult


class PnpmPackageManager(BasePackageManager):
    name = PackageManagerType.PNPM
    lockfile_name = "pnpm-lock.yaml"
    command = "pnpm"

    tree_args = ("list", "--depth", "Infinity", "--json")
    audit_fix_args = ("audit", "--fix")

    def parse_outdated(self, output: str) -> list[OutdatedPackage]:
        return parse_outdated_json(output, "dependencyType")

    def parse_tree(self, result: CommandResult) -> DependencyGraph:
        data = json.loads(result.stdout)
        if isinstance(data, list):
            if not data:
                return DependencyGraph.empty()
            data = data[0]
        graph = parse_nested_tree(data)
        if not isinstance(data, dict):
            return graph

        for section, flag in (("devDependencies", "dev"), ("optionalDependencies", "optional")):
            deps = data.get(section)
            if not isinstance(deps, dict):
                continue
            for name, info in deps.items():
                node = nested_json_node(name, info)
                setattr(node, flag, True)
                graph.dependencies.append(node)
        return graph
