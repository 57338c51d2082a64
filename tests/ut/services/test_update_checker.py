"""UpdateChecker / AnalyticsAggregator 单元测试

注册表使用离线模式 + 预填缓存，不访问网络。
"""

from __future__ import annotations

from dataclasses import replace

import pytest

from depscope.core.models import (
    DependencyType,
    InstalledPackage,
    PackageManagerType,
    Project,
    UpdateType,
    Vulnerability,
)
from depscope.registry.client import RegistryClient
from depscope.services.aggregator import AnalyticsAggregator
from depscope.services.update_checker import UpdateChecker


def _meta(latest: str, license: str | None = None, deprecated: str | None = None) -> dict:
    data: dict = {"dist-tags": {"latest": latest}, "versions": {latest: {}}}
    if license:
        data["license"] = license
    if deprecated:
        data["versions"][latest]["deprecated"] = deprecated
    return data


@pytest.fixture()
def registry() -> RegistryClient:
    client = RegistryClient(offline_mode=True)
    client.cache.set("pkg:react", _meta("18.2.0", license="MIT"))
    client.cache.set("pkg:lodash", _meta("4.17.21", license="MIT"))
    client.cache.set("pkg:express", _meta("5.0.0", license={"type": "MIT"}))  # type: ignore[arg-type]
    client.cache.set("pkg:request", _meta("2.88.2", license="Apache-2.0", deprecated="request has been deprecated"))
    return client


def _pkg(name: str, version: str, dep_type=DependencyType.DIRECT) -> InstalledPackage:
    return InstalledPackage(
        name=name, specified_version=f"^{version}", current_version=version,
        dependency_type=dep_type,
    )


class TestCheckUpdates:
    def test_classifies_and_preserves_order(self, registry) -> None:
        packages = [
            _pkg("react", "17.0.2"),
            _pkg("lodash", "4.17.21"),
            _pkg("unknown-pkg", "1.0.0"),
            _pkg("express", "4.18.2"),
        ]
        results = UpdateChecker(registry).check_updates(packages)
        assert [p.name for p in results] == ["react", "lodash", "unknown-pkg", "express"]
        assert results[0].update_available == UpdateType.MAJOR
        assert results[0].latest_version == "18.2.0"
        assert results[1].update_available is None
        assert results[2] is packages[2]
        assert results[3].update_available == UpdateType.MAJOR

    def test_inputs_not_mutated(self, registry) -> None:
        pkg = _pkg("react", "17.0.2")
        UpdateChecker(registry).check_updates([pkg])
        assert pkg.latest_version is None

    def test_empty(self, registry) -> None:
        assert UpdateChecker(registry).check_updates([]) == []

    def test_malformed_registry_payload_skipped(self, registry) -> None:
        registry.cache.set("pkg:broken", {"dist-tags": "2.0.0"})
        registry.cache.set("pkg:listy", {"dist-tags": ["latest"], "versions": []})
        packages = [_pkg("broken", "1.0.0"), _pkg("react", "17.0.2"), _pkg("listy", "1.0.0")]
        results = UpdateChecker(registry).check_updates(packages)
        assert results[0] is packages[0]
        assert results[1].update_available == UpdateType.MAJOR
        assert results[2] is packages[2]

    def test_check_updates_fills_deprecation(self, registry) -> None:
        (result,) = UpdateChecker(registry).check_updates([_pkg("request", "2.88.0")])
        assert result.is_deprecated
        assert result.deprecation_message == "request has been deprecated"

    def test_single_package_deprecation(self, registry) -> None:
        result = UpdateChecker(registry).check_single_package(_pkg("request", "2.88.0"))
        assert result.is_deprecated
        assert result.deprecation_message == "request has been deprecated"
        assert result.update_available == UpdateType.PATCH

    def test_summary(self) -> None:
        packages = [
            replace(_pkg("a", "1.0.0"), update_available=UpdateType.MAJOR),
            replace(_pkg("b", "1.0.0"), update_available=UpdateType.MINOR),
            replace(_pkg("c", "1.0.0"), update_available=UpdateType.PATCH),
            replace(_pkg("d", "1.0.0"), update_available=UpdateType.PATCH),
            _pkg("e", "1.0.0"),
        ]
        s = UpdateChecker.get_update_summary(packages)
        assert (s.total, s.up_to_date, s.patch, s.minor, s.major) == (5, 1, 2, 1, 1)


class TestAggregator:
    def test_aggregate(self, registry) -> None:
        vuln = Vulnerability(id="1", title="Prototype Pollution", severity="high", package_name="lodash")
        packages = [
            replace(_pkg("react", "17.0.2"), update_available=UpdateType.MAJOR),
            replace(_pkg("lodash", "4.17.20"), vulnerabilities=(vuln,)),
            replace(_pkg("request", "2.88.0"), is_deprecated=True),
            _pkg("left-pad", "1.0.0"),
        ]
        project = Project(
            id="abcd1234", name="demo", path="/p", manifest_path="/p/package.json",
            package_manager=PackageManagerType.NPM, packages=packages,
        )
        data = AnalyticsAggregator(registry).aggregate(project)
        assert data.project_name == "demo"
        assert data.total_packages == 4
        assert data.update_status.major == 1
        assert data.update_status.up_to_date == 3
        assert data.security.total == 1 and data.security.high == 1
        assert data.deprecation_total == 1
        assert data.licenses == {"MIT": 2, "Apache-2.0": 1, "Unknown": 1}
        assert data.to_dict()["security"]["high"] == 1
