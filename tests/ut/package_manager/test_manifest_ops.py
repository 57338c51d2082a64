"""清单读写（list / move_dependency）单元测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from depscope.core.exceptions import ManifestError, PackageNotFoundError
from depscope.core.models import DependencyType
from depscope.package_manager.npm import NpmPackageManager
from depscope.package_manager.yarn import YarnPackageManager

MANIFEST = {
    "name": "demo",
    "version": "1.0.0",
    "scripts": {"build": "tsc"},
    "dependencies": {"react": "^18.2.0", "lodash": "~4.17.21"},
    "devDependencies": {"typescript": ">=5.0.0"},
    "peerDependencies": {"react-dom": "18.2.0"},
    "optionalDependencies": {"fsevents": "^2.3.2"},
    "license": "MIT",
}


def _read(project: Path) -> dict:
    return json.loads((project / "package.json").read_text(encoding="utf-8"))


class TestList:
    def test_all_buckets(self, write_manifest) -> None:
        pm = NpmPackageManager(write_manifest(MANIFEST))
        packages = pm.list()
        assert [(p.name, p.dependency_type) for p in packages] == [
            ("react", DependencyType.DIRECT),
            ("lodash", DependencyType.DIRECT),
            ("typescript", DependencyType.DEV),
            ("react-dom", DependencyType.PEER),
            ("fsevents", DependencyType.OPTIONAL),
        ]

    def test_current_version_stripped(self, write_manifest) -> None:
        packages = {p.name: p for p in NpmPackageManager(write_manifest(MANIFEST)).list()}
        assert packages["react"].specified_version == "^18.2.0"
        assert packages["react"].current_version == "18.2.0"
        assert packages["typescript"].current_version == "5.0.0"

    def test_idempotent(self, write_manifest) -> None:
        pm = NpmPackageManager(write_manifest(MANIFEST))
        first = pm.list()
        second = pm.list()
        assert first == second
        assert first is not second

    def test_missing_manifest_degrades(self, tmp_path: Path) -> None:
        assert NpmPackageManager(tmp_path).list() == []

    def test_invalid_json_degrades(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{oops", encoding="utf-8")
        assert NpmPackageManager(tmp_path).list() == []

    def test_non_string_versions_skipped(self, write_manifest) -> None:
        pm = NpmPackageManager(write_manifest({"dependencies": {"a": "1.0.0", "b": None}}))
        assert [p.name for p in pm.list()] == ["a"]

    def test_does_not_invoke_tool(self, write_manifest, fake_executor) -> None:
        YarnPackageManager(write_manifest(MANIFEST)).list()
        assert fake_executor.calls == []


class TestMoveDependency:
    def test_move_to_existing_bucket(self, write_manifest) -> None:
        project = write_manifest(MANIFEST)
        NpmPackageManager(project).move_dependency(
            "lodash", DependencyType.DIRECT, DependencyType.DEV,
        )
        data = _read(project)
        assert data["dependencies"] == {"react": "^18.2.0"}
        assert data["devDependencies"] == {"typescript": ">=5.0.0", "lodash": "~4.17.21"}

    def test_emptied_bucket_removed_and_new_bucket_created(self, write_manifest) -> None:
        project = write_manifest({"name": "x", "devDependencies": {"jest": "^29.0.0"}})
        NpmPackageManager(project).move_dependency(
            "jest", DependencyType.DEV, DependencyType.DIRECT,
        )
        data = _read(project)
        assert "devDependencies" not in data
        assert data["dependencies"] == {"jest": "^29.0.0"}

    def test_round_trip_restores_membership(self, write_manifest) -> None:
        project = write_manifest(MANIFEST)
        pm = NpmPackageManager(project)
        before = {(p.name, p.specified_version, p.dependency_type) for p in pm.list()}

        pm.move_dependency("typescript", DependencyType.DEV, DependencyType.PEER)
        pm.move_dependency("typescript", DependencyType.PEER, DependencyType.DEV)

        after = {(p.name, p.specified_version, p.dependency_type) for p in pm.list()}
        assert after == before

    def test_other_fields_preserved(self, write_manifest) -> None:
        project = write_manifest(MANIFEST)
        NpmPackageManager(project).move_dependency(
            "react", DependencyType.DIRECT, DependencyType.PEER,
        )
        data = _read(project)
        assert data["scripts"] == {"build": "tsc"}
        assert data["license"] == "MIT"
        assert list(data)[:3] == ["name", "version", "scripts"]

    def test_output_format(self, write_manifest) -> None:
        project = write_manifest(MANIFEST)
        NpmPackageManager(project).move_dependency(
            "react", DependencyType.DIRECT, DependencyType.DEV,
        )
        text = (project / "package.json").read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert text.startswith('{\n  "name": "demo"')

    def test_missing_package(self, write_manifest) -> None:
        pm = NpmPackageManager(write_manifest(MANIFEST))
        with pytest.raises(PackageNotFoundError, match="left-pad"):
            pm.move_dependency("left-pad", DependencyType.DIRECT, DependencyType.DEV)

    def test_missing_bucket(self, write_manifest) -> None:
        pm = NpmPackageManager(write_manifest({"name": "x"}))
        with pytest.raises(PackageNotFoundError):
            pm.move_dependency("a", DependencyType.DEV, DependencyType.DIRECT)

    def test_missing_manifest(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError, match="清单文件不存在"):
            NpmPackageManager(tmp_path).move_dependency(
                "a", DependencyType.DIRECT, DependencyType.DEV,
            )

    def test_same_bucket_is_noop(self, write_manifest) -> None:
        project = write_manifest(MANIFEST)
        before = (project / "package.json").read_text(encoding="utf-8")
        NpmPackageManager(project).move_dependency(
            "react", DependencyType.DIRECT, DependencyType.DIRECT,
        )
        assert (project / "package.json").read_text(encoding="utf-8") == before
