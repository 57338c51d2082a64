"""ServiceContainer 单元测试"""

from __future__ import annotations

from pathlib import Path

import pytest

import depscope.core.config as cfgmod
from depscope.core.models import (
    DependencyType,
    InstalledPackage,
    PackageManagerType,
    Project,
)
from depscope.package_manager.pnpm import PnpmPackageManager
from depscope.services.container import (
    ServiceContainer,
    get_container,
    reset_container,
)


@pytest.fixture(autouse=True)
def _setup_config(isolated_config):
    yield


class TestServiceContainer:
    def test_lazy_loading(self) -> None:
        c = ServiceContainer()
        assert len(c._instances) == 0
        _ = c.updates
        assert "updates" in c._instances
        assert "registry" in c._instances

    def test_shared_instances(self) -> None:
        c = ServiceContainer()
        assert c.registry is c.registry
        assert c.updates.registry is c.registry
        assert c.licenses.registry is c.registry
        assert c.aggregator.registry is c.registry

    def test_registry_follows_config(self) -> None:
        cfg = cfgmod.Config(
            registry_url="http://localhost:4873/", offline_mode=True,
            cache_timeout=5, registry_timeout=3,
        )
        registry = ServiceContainer(cfg).registry
        assert registry.base_url == "http://localhost:4873"
        assert registry.offline_mode is True
        assert registry.cache.ttl_seconds == 300
        assert registry.timeout == 3

    def test_license_lists_from_config(self) -> None:
        cfg = cfgmod.Config(blocked_licenses=["GPL-3.0"], license_batch_size=2)
        checker = ServiceContainer(cfg).licenses
        assert checker.blocked == ["GPL-3.0"]
        assert checker.batch_size == 2

    def test_all_services_accessible(self) -> None:
        c = ServiceContainer()
        for name in ("registry", "detector", "updates", "security", "licenses", "aggregator"):
            assert getattr(c, name) is not None

    def test_package_manager_for_project(self, write_manifest) -> None:
        project_dir = write_manifest({"name": "x", "packageManager": "pnpm@8.15.0"})
        c = ServiceContainer()
        project = c.detector.create_project(project_dir / "package.json")
        pm = c.package_manager(project)
        assert isinstance(pm, PnpmPackageManager)
        assert project.package_manager == PackageManagerType.PNPM

    def test_find_project(self, write_manifest, tmp_path: Path) -> None:
        write_manifest({"name": "web"}, subdir="apps/web")
        c = ServiceContainer()
        (project,) = c.detector.detect_projects(tmp_path)
        assert c.find_project(project.id).name == "web"
        assert c.find_project("deadbeef") is None

    def test_dashboard_counts_deprecations(self) -> None:
        c = ServiceContainer()
        c.registry.cache.set("pkg:request", {
            "dist-tags": {"latest": "2.88.2"},
            "versions": {"2.88.2": {"deprecated": "request has been deprecated"}},
        })
        c.registry.cache.set("pkg:react", {"dist-tags": {"latest": "18.2.0"}, "versions": {"18.2.0": {}}})
        packages = [
            InstalledPackage(
                name=name, specified_version=f"^{version}", current_version=version,
                dependency_type=DependencyType.DIRECT,
            )
            for name, version in (("request", "2.88.0"), ("react", "18.2.0"))
        ]
        project = Project(
            id="abcd1234", name="demo", path="/p", manifest_path="/p/package.json",
            package_manager=PackageManagerType.NPM, packages=packages,
        )
        data = c.dashboard(project, audit=False)
        assert data.deprecation_total == 1
        assert data.update_status.patch == 1


class TestGetContainer:
    def test_singleton(self) -> None:
        assert get_container() is get_container()

    def test_reset(self) -> None:
        first = get_container()
        reset_container()
        assert get_container() is not first
