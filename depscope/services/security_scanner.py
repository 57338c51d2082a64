"""安全审计

  npm / bun: npm audit --json（bun 没有 audit 命令，借用 npm）
  pnpm:      pnpm audit --json，结构与 npm 相同
  yarn:      yarn audit --json，JSON Lines，取 type == "auditAdvisory" 的记录

audit 发现漏洞时以非零退出码结束，因此只看输出内容。
任何执行或解析失败都降级为空结果。
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from typing import Any

from depscope.core.exceptions import ExecutionError
from depscope.core.models import (
    SEVERITIES,
    AuditSummary,
    InstalledPackage,
    PackageManagerType,
    SecurityScanResult,
    Vulnerability,
)
from depscope.package_manager.yarn import iter_json_lines
from depscope.utils.shell import run_command

logger = logging.getLogger(__name__)


def map_severity(severity: str | None) -> str:
    value = (severity or "").lower()
    if value in ("critical", "high"):
        return value
    if value in ("moderate", "medium"):
        return "moderate"
    return "low"


def parse_npm_audit(data: Any) -> list[SecurityScanResult]:
    if not isinstance(data, dict):
        return []
    results: list[SecurityScanResult] = []
    for name, vuln in (data.get("vulnerabilities") or {}).items():
        if not isinstance(vuln, dict):
            continue
        found: list[Vulnerability] = []
        # via 里的字符串是传递依赖的包名，只有对象才是公告本身
        for via in vuln.get("via") or []:
            if not isinstance(via, dict) or not via.get("title"):
                continue
            source = via.get("source")
            found.append(Vulnerability(
                id=str(source) if source is not None else f"{name}-vuln",
                title=via["title"],
                severity=map_severity(via.get("severity") or vuln.get("severity")),
                package_name=name,
                affected_versions=via.get("range") or vuln.get("range") or "",
                url=via.get("url"),
            ))
        if found:
            results.append(SecurityScanResult(package_name=name, vulnerabilities=found))
    return results


def parse_yarn_audit(output: str) -> list[SecurityScanResult]:
    by_package: dict[str, SecurityScanResult] = {}
    for record in iter_json_lines(output):
        if record.get("type") != "auditAdvisory":
            continue
        advisory = (record.get("data") or {}).get("advisory") or {}
        name = advisory.get("module_name")
        if not name:
            continue
        advisory_id = advisory.get("id")
        entry = by_package.setdefault(name, SecurityScanResult(package_name=name))
        entry.vulnerabilities.append(Vulnerability(
            id=str(advisory_id) if advisory_id is not None else f"{name}-vuln",
            title=advisory.get("title", ""),
            severity=map_severity(advisory.get("severity")),
            package_name=name,
            affected_versions=advisory.get("vulnerable_versions", ""),
            patched_versions=advisory.get("patched_versions"),
            url=advisory.get("url"),
        ))
    return list(by_package.values())


class SecurityScanner:
    def scan(
        self, project_path: str, package_manager: PackageManagerType | str,
    ) -> list[SecurityScanResult]:
        try:
            kind = PackageManagerType(package_manager)
        except ValueError:
            logger.warning("未知的包管理器，跳过安全审计: %s", package_manager)
            return []
        command = kind.value if kind in (PackageManagerType.YARN, PackageManagerType.PNPM) else "npm"
        try:
            result = run_command(command, ["audit", "--json"], project_path)
        except ExecutionError as e:
            logger.warning("安全审计无法执行: %s", e)
            return []

        try:
            if kind == PackageManagerType.YARN:
                return parse_yarn_audit(result.stdout)
            # npm 在某些错误场景下把 JSON 写到 stderr
            output = result.stdout if command == "pnpm" else (result.stdout or result.stderr)
            if not output.strip():
                return []
            return parse_npm_audit(json.loads(output))
        except (ValueError, TypeError, AttributeError, KeyError):
            logger.warning("安全审计输出无法解析 (%s)", command, exc_info=True)
            return []

    @staticmethod
    def get_summary(results: list[SecurityScanResult]) -> AuditSummary:
        summary = AuditSummary()
        for result in results:
            for vuln in result.vulnerabilities:
                summary.total += 1
                if vuln.severity in SEVERITIES:
                    setattr(summary, vuln.severity, getattr(summary, vuln.severity) + 1)
        return summary

    @staticmethod
    def count_at_or_above(results: list[SecurityScanResult], threshold: str) -> int:
        """严重级别不低于 threshold 的漏洞数"""
        rank = {s: i for i, s in enumerate(SEVERITIES)}
        limit = rank.get(map_severity(threshold), len(SEVERITIES))
        return sum(
            1 for r in results for v in r.vulnerabilities
            if rank.get(v.severity, len(SEVERITIES)) <= limit
        )

    @staticmethod
    def attach_vulnerabilities(
        packages: list[InstalledPackage], results: list[SecurityScanResult],
    ) -> list[InstalledPackage]:
        """返回挂上漏洞列表的新快照"""
        by_name = {r.package_name: tuple(r.vulnerabilities) for r in results}
        return [
            replace(p, vulnerabilities=by_name[p.name]) if p.name in by_name else p
            for p in packages
        ]
