"""项目汇总统计

把已完成更新检查 / 安全审计的依赖快照汇总为 DashboardData，
供展示层直接消费。许可证分布从注册表缓存尽力获取。
"""

from __future__ import annotations

import logging

from depscope.core.models import SEVERITIES, DashboardData, Project
from depscope.registry.client import RegistryClient
from depscope.services.license_checker import license_of
from depscope.services.update_checker import UpdateChecker

logger = logging.getLogger(__name__)


class AnalyticsAggregator:
    def __init__(self, registry: RegistryClient) -> None:
        self.registry = registry

    def aggregate(self, project: Project) -> DashboardData:
        data = DashboardData(
            project_name=project.name,
            total_packages=len(project.packages),
            update_status=UpdateChecker.get_update_summary(project.packages),
        )

        for pkg in project.packages:
            for vuln in pkg.vulnerabilities:
                data.security.total += 1
                if vuln.severity in SEVERITIES:
                    setattr(data.security, vuln.severity, getattr(data.security, vuln.severity) + 1)

            if pkg.is_deprecated:
                data.deprecation_total += 1

            lic = license_of(self.registry.get_package(pkg.name)) or "Unknown"
            data.licenses[lic] = data.licenses.get(lic, 0) + 1

        return data
