"""依赖图生成: 无论哪个适配器产出，调用方拿到的都是 DependencyGraph"""

from __future__ import annotations

import logging

from depscope.core.models import DependencyGraph
from depscope.package_manager.base import BasePackageManager

logger = logging.getLogger(__name__)


class DependencyGraphService:
    def __init__(self, package_manager: BasePackageManager) -> None:
        self.package_manager = package_manager

    def generate_graph(self) -> DependencyGraph:
        graph = self.package_manager.get_dependency_tree()
        logger.debug(
            "依赖图已生成: %s (%d 个顶层依赖)", graph.name, len(graph.dependencies),
        )
        return graph
