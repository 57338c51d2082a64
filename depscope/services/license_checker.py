"""许可证合规检查

按固定批次（默认 5 个）并发查询注册表，一批全部返回后再开始下一批，
控制对注册表的压力。取消信号只在批次之间检查，不会中断进行中的批次。

判定规则:
  - 黑名单命中 -> blocked
  - 白名单非空且不在白名单内 -> not-allowed
  - 注册表里查不到许可证 -> 跳过
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable

from depscope.core.models import InstalledPackage, LicenseViolation, Project
from depscope.registry.client import RegistryClient

logger = logging.getLogger(__name__)

# 进度回调: (已处理数, 总数)
ProgressCallback = Callable[[int, int], None]


def license_of(registry_pkg: dict[str, Any] | None) -> str | None:
    """注册表元数据中的许可证；旧包可能是 {"type": "MIT"} 形式"""
    if not registry_pkg:
        return None
    lic = registry_pkg.get("license")
    if isinstance(lic, dict):
        lic = lic.get("type")
    return lic if isinstance(lic, str) and lic else None


class LicenseChecker:
    def __init__(
        self,
        registry: RegistryClient,
        allowed: list[str] | None = None,
        blocked: list[str] | None = None,
        batch_size: int = 5,
    ) -> None:
        self.registry = registry
        self.allowed = list(allowed or [])
        self.blocked = list(blocked or [])
        self.batch_size = max(1, batch_size)

    def check_package(self, pkg: InstalledPackage) -> LicenseViolation | None:
        lic = license_of(self.registry.get_package(pkg.name))
        if lic is None:
            return None
        if lic in self.blocked:
            return LicenseViolation(package_name=pkg.name, license=lic, violation_type="blocked")
        if self.allowed and lic not in self.allowed:
            return LicenseViolation(package_name=pkg.name, license=lic, violation_type="not-allowed")
        return None

    def check_licenses(
        self,
        project: Project,
        cancel_event: threading.Event | None = None,
        progress: ProgressCallback | None = None,
    ) -> list[LicenseViolation]:
        if not self.allowed and not self.blocked:
            return []

        packages = project.packages
        total = len(packages)
        violations: list[LicenseViolation] = []
        with ThreadPoolExecutor(max_workers=self.batch_size) as executor:
            for start in range(0, total, self.batch_size):
                if cancel_event is not None and cancel_event.is_set():
                    logger.info("许可证检查已取消: %d/%d", start, total)
                    break
                batch = packages[start:start + self.batch_size]
                for violation in executor.map(self.check_package, batch):
                    if violation is not None:
                        violations.append(violation)
                if progress is not None:
                    progress(start + len(batch), total)

        if violations:
            logger.warning("%s: %d 个许可证违规", project.name, len(violations))
        return violations
