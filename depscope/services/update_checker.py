"""更新检查

check_updates 对项目的全部依赖并发查询注册表（不设并发上限），
全部返回后生成携带 latest_version / update_available / 弃用信息的新快照。
单个包查询失败时保留原快照，不影响其他包。
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace

from depscope.core.models import InstalledPackage, UpdateSummary, UpdateType
from depscope.registry.client import RegistryClient, latest_tag
from depscope.utils.version import classify_update

logger = logging.getLogger(__name__)


class UpdateChecker:
    def __init__(self, registry: RegistryClient) -> None:
        self.registry = registry

    def _check_one(self, pkg: InstalledPackage) -> InstalledPackage:
        try:
            return self.check_single_package(pkg)
        except (AttributeError, TypeError, ValueError) as e:
            logger.debug("注册表数据异常，跳过 %s: %s", pkg.name, e)
            return pkg

    def check_updates(self, packages: list[InstalledPackage]) -> list[InstalledPackage]:
        """返回与输入顺序一致的新快照列表"""
        if not packages:
            return []
        with ThreadPoolExecutor(max_workers=len(packages)) as executor:
            results = list(executor.map(self._check_one, packages))
        updates = sum(1 for p in results if p.update_available)
        logger.info("更新检查完成: %d 个包, %d 个可更新", len(results), updates)
        return results

    def check_single_package(self, pkg: InstalledPackage) -> InstalledPackage:
        """单包检查，同时填充最新版本的弃用信息"""
        data = self.registry.get_package(pkg.name)
        if not data:
            return pkg
        latest = latest_tag(data)
        if latest is None:
            return pkg

        versions = data.get("versions")
        latest_info = versions.get(latest) if isinstance(versions, dict) else None
        deprecated = latest_info.get("deprecated") if isinstance(latest_info, dict) else None
        return replace(
            pkg,
            latest_version=latest,
            update_available=classify_update(pkg.current_version, latest),
            is_deprecated=bool(deprecated),
            deprecation_message=deprecated if isinstance(deprecated, str) and deprecated else None,
        )

    @staticmethod
    def get_update_summary(packages: list[InstalledPackage]) -> UpdateSummary:
        summary = UpdateSummary(total=len(packages))
        for pkg in packages:
            if pkg.update_available is None:
                summary.up_to_date += 1
            elif pkg.update_available == UpdateType.MAJOR:
                summary.major += 1
            elif pkg.update_available == UpdateType.MINOR:
                summary.minor += 1
            else:
                summary.patch += 1
        return summary
