"""服务容器: 统一依赖注入

同一容器内的服务共享一个 RegistryClient，因此也共享注册表缓存。
CLI 和 Web 层均通过 get_container() 获取服务，而非直接构造。

用法:
    container = ServiceContainer()
    checker = container.updates          # 懒加载
    pm = container.package_manager(project)

    # 全局单例
    from depscope.services.container import get_container
    registry = get_container().registry
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from depscope.core.config import Config
    from depscope.core.models import DashboardData, Project
    from depscope.package_manager.base import BasePackageManager
    from depscope.registry.client import RegistryClient
    from depscope.services.aggregator import AnalyticsAggregator
    from depscope.services.license_checker import LicenseChecker
    from depscope.services.project_detector import ProjectDetector
    from depscope.services.security_scanner import SecurityScanner
    from depscope.services.update_checker import UpdateChecker

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(self, config: Config | None = None) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from depscope.core.config import get_config
            config = get_config()
        self._config = config

    @property
    def config(self) -> Config:
        return self._config

    @property
    def registry(self) -> RegistryClient:
        if "registry" not in self._instances:
            from depscope.registry.client import RegistryClient
            self._instances["registry"] = RegistryClient(
                self._config.registry_url,
                cache_timeout=self._config.cache_timeout,
                offline_mode=self._config.offline_mode,
                timeout=self._config.registry_timeout,
            )
        return self._instances["registry"]  # type: ignore[return-value]

    @property
    def detector(self) -> ProjectDetector:
        if "detector" not in self._instances:
            from depscope.services.project_detector import ProjectDetector
            self._instances["detector"] = ProjectDetector(
                default_package_manager=self._config.default_package_manager,
            )
        return self._instances["detector"]  # type: ignore[return-value]

    @property
    def updates(self) -> UpdateChecker:
        if "updates" not in self._instances:
            from depscope.services.update_checker import UpdateChecker
            self._instances["updates"] = UpdateChecker(self.registry)
        return self._instances["updates"]  # type: ignore[return-value]

    @property
    def security(self) -> SecurityScanner:
        if "security" not in self._instances:
            from depscope.services.security_scanner import SecurityScanner
            self._instances["security"] = SecurityScanner()
        return self._instances["security"]  # type: ignore[return-value]

    @property
    def licenses(self) -> LicenseChecker:
        if "licenses" not in self._instances:
            from depscope.services.license_checker import LicenseChecker
            self._instances["licenses"] = LicenseChecker(
                self.registry,
                allowed=self._config.allowed_licenses,
                blocked=self._config.blocked_licenses,
                batch_size=self._config.license_batch_size,
            )
        return self._instances["licenses"]  # type: ignore[return-value]

    @property
    def aggregator(self) -> AnalyticsAggregator:
        if "aggregator" not in self._instances:
            from depscope.services.aggregator import AnalyticsAggregator
            self._instances["aggregator"] = AnalyticsAggregator(self.registry)
        return self._instances["aggregator"]  # type: ignore[return-value]

    def package_manager(self, project: Project) -> BasePackageManager:
        """适配器无状态，每次按项目新建"""
        from depscope.package_manager.factory import create_package_manager
        return create_package_manager(project.package_manager, project.path)

    def dashboard(self, project: Project, audit: bool = True) -> DashboardData:
        """更新检查 + 安全审计（可选）+ 汇总，project.packages 需已加载"""
        from dataclasses import replace
        checked = self.updates.check_updates(project.packages)
        if audit:
            results = self.security.scan(project.path, project.package_manager)
            checked = self.security.attach_vulnerabilities(checked, results)
        project = replace(
            project,
            packages=checked,
            has_updates=any(p.update_available for p in checked),
            has_security_issues=any(p.vulnerabilities for p in checked),
        )
        return self.aggregator.aggregate(project)

    def find_project(self, project_id: str, root: str | None = None) -> Project | None:
        for project in self.detector.detect_projects(root or self._config.workspace_root):
            if project.id == project_id:
                return project
        return None


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（仅用于测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
