"""项目发现

在目录树中查找所有 package.json（跳过 node_modules），为每个清单构造
Project 记录并识别其包管理器。单个清单无法读取时跳过，不影响其他项目。
"""

from __future__ import annotations

import hashlib
import logging
import os
from dataclasses import replace
from pathlib import Path

from depscope.core.models import Project
from depscope.package_manager.base import MANIFEST_NAME
from depscope.package_manager.factory import (
    create_package_manager,
    detect_package_manager,
    find_lockfile,
)
from depscope.utils.file_io import load_json

logger = logging.getLogger(__name__)

_SKIP_DIRS = frozenset(("node_modules", ".git"))


def project_id(project_path: str | Path) -> str:
    """项目路径 md5 的前 8 位"""
    return hashlib.md5(str(project_path).encode("utf-8"), usedforsecurity=False).hexdigest()[:8]


class ProjectDetector:
    def __init__(self, default_package_manager: str = "auto") -> None:
        self.default_package_manager = default_package_manager

    def detect_projects(self, root: str | Path) -> list[Project]:
        projects: list[Project] = []
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames[:] = sorted(d for d in dirnames if d not in _SKIP_DIRS)
            if MANIFEST_NAME not in filenames:
                continue
            project = self.create_project(Path(dirpath) / MANIFEST_NAME)
            if project is not None:
                projects.append(project)
        logger.info("在 %s 下发现 %d 个项目", root, len(projects))
        return projects

    def create_project(self, manifest_path: str | Path) -> Project | None:
        manifest_path = Path(manifest_path).resolve()
        try:
            manifest = load_json(manifest_path)
        except (OSError, ValueError) as e:
            logger.warning("跳过无法解析的清单: %s (%s)", manifest_path, e)
            return None

        project_path = manifest_path.parent
        kind = detect_package_manager(
            project_path, manifest, default=self.default_package_manager,
        )
        lockfile = find_lockfile(project_path, kind)
        name = manifest.get("name")
        return Project(
            id=project_id(project_path),
            name=name if isinstance(name, str) and name else project_path.name,
            path=str(project_path),
            manifest_path=str(manifest_path),
            package_manager=kind,
            lockfile_path=str(lockfile) if lockfile else None,
        )

    @staticmethod
    def load_packages(project: Project) -> Project:
        """返回填充了清单依赖列表的新 Project"""
        pm = create_package_manager(project.package_manager, project.path)
        return replace(project, packages=pm.list())
