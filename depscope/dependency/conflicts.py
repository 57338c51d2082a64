"""依赖冲突检测

遍历规范化依赖图，每个带工具错误信息（missing / invalid / unmet）的节点
产出一条 invalid 冲突。

同时记录每个包名出现过的全部版本。同一个包在树中存在多个版本在
npm / yarn / pnpm 里很常见，这里只通过 duplicates() 暴露，不作为冲突上报。
"""

from __future__ import annotations

import logging

from depscope.core.models import Conflict, ConflictKind, DependencyGraph
from depscope.package_manager.base import BasePackageManager

logger = logging.getLogger(__name__)


class ConflictDetector:
    def __init__(self, package_manager: BasePackageManager) -> None:
        self.package_manager = package_manager
        self.versions: dict[str, set[str]] = {}

    def detect_conflicts(self) -> list[Conflict]:
        return self.detect_in_graph(self.package_manager.get_dependency_tree())

    def detect_in_graph(self, graph: DependencyGraph) -> list[Conflict]:
        """对已生成的依赖图做检测（不再调用外部工具）"""
        conflicts: list[Conflict] = []
        self.versions = {}
        for node in graph.iter_nodes():
            if node.error:
                conflicts.append(Conflict(
                    package_name=node.name,
                    kind=ConflictKind.INVALID,
                    message=node.error,
                    location=node.name,
                ))
            self.versions.setdefault(node.name, set()).add(node.version)

        if conflicts:
            logger.info("检测到 %d 个问题节点", len(conflicts))
        return conflicts

    def duplicates(self) -> dict[str, list[str]]:
        """上一次检测中出现多个版本的包 -> 排序后的版本列表"""
        return {
            name: sorted(versions)
            for name, versions in sorted(self.versions.items())
            if len(versions) > 1
        }
