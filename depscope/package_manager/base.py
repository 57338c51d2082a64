"""包管理器适配器基类

四种包管理器（npm / yarn / pnpm / bun）共享同一组操作:

  install / uninstall / update      变更类，返回 CommandResult 原样交给调用方
  outdated / get_dependency_tree    读取类，任何解析失败都降级为空结果
  list / move_dependency            直接读写 package.json，不调用外部工具
  audit_fix                         bun 不支持，抛 UnsupportedOperationError

子类只需声明命令模板，并为各自的输出格式提供解析函数。
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, ClassVar

from depscope.core.exceptions import (
    ManifestError,
    PackageNotFoundError,
    UnsupportedOperationError,
)
from depscope.core.models import (
    DEPENDENCY_BUCKETS,
    DependencyGraph,
    DependencyNode,
    DependencyType,
    InstalledPackage,
    OutdatedPackage,
    PackageManagerType,
)
from depscope.utils.file_io import load_json, save_json
from depscope.utils.shell import CommandResult, run_command
from depscope.utils.version import clean_version

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"

_NODE_VERSION_RE = re.compile(r"^\d+(?:\.\d+)*")


def normalize_node_version(raw: Any) -> str:
    """依赖树节点版本: 数字开头的点分串原样保留（去掉尾随注释），否则为空串"""
    if not isinstance(raw, str):
        return ""
    text = raw.strip().split(" ", 1)[0]
    return text if _NODE_VERSION_RE.match(text) else ""


def split_name_version(item: str) -> tuple[str, str]:
    """拆分 'name@version'，以最后一个 @ 为界（scoped 包的开头 @ 不算）"""
    at = item.rfind("@")
    if at > 0:
        return item[:at], normalize_node_version(item[at + 1:])
    return item, ""


def nested_json_node(name: str, info: Any) -> DependencyNode:
    """把 npm / pnpm 风格的嵌套 JSON 节点转换为 DependencyNode

    节点上的 missing / invalid / problems 标记会转成 error 字符串。
    """
    if not isinstance(info, dict):
        return DependencyNode(name=name)

    children = info.get("dependencies")
    node = DependencyNode(
        name=name,
        version=normalize_node_version(info.get("version")),
        dependencies=[
            nested_json_node(n, i) for n, i in children.items()
        ] if isinstance(children, dict) else [],
        error=_node_error(info),
        dev=bool(info.get("dev")),
        optional=bool(info.get("optional")),
        peer=bool(info.get("peer") or info.get("peerMissing")),
    )
    return node


def _node_error(info: dict[str, Any]) -> str | None:
    problems = info.get("problems")
    if isinstance(problems, list) and problems:
        return "; ".join(str(p) for p in problems)
    if info.get("missing"):
        required = info.get("required")
        return f"missing: {required}" if isinstance(required, str) else "missing"
    invalid = info.get("invalid")
    if invalid:
        return f"invalid: {invalid}" if isinstance(invalid, str) else "invalid"
    if info.get("peerMissing"):
        return "peer dependency missing"
    return None


class BasePackageManager(ABC):
    """包管理器统一操作契约"""

    name: ClassVar[PackageManagerType]
    lockfile_name: ClassVar[str]
    command: ClassVar[str]

    # 命令模板
    install_verb: ClassVar[str] = "add"
    dev_flag: ClassVar[str] = "--save-dev"
    exact_flag: ClassVar[str] = "--save-exact"
    uninstall_verb: ClassVar[str] = "remove"
    update_verb: ClassVar[str] = "update"
    outdated_args: ClassVar[tuple[str, ...]] = ("outdated", "--json")
    tree_args: ClassVar[tuple[str, ...]] = ("list", "--json")
    audit_fix_args: ClassVar[tuple[str, ...] | None] = None

    def __init__(self, project_path: str | Path) -> None:
        self.project_path = Path(project_path)

    @property
    def manifest_path(self) -> Path:
        return self.project_path / MANIFEST_NAME

    @property
    def supports_audit_fix(self) -> bool:
        return self.audit_fix_args is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({str(self.project_path)!r})"

    def execute(self, args: list[str]) -> CommandResult:
        return run_command(self.command, args, str(self.project_path))

    # ------------------------------------------------------------------
    # 变更类操作
    # ------------------------------------------------------------------

    def install(
        self, packages: list[str], *, dev: bool = False, exact: bool = False,
    ) -> CommandResult:
        args = [self.install_verb]
        if dev:
            args.append(self.dev_flag)
        if exact:
            args.append(self.exact_flag)
        args.extend(packages)
        logger.info("[%s] 安装: %s", self.name.value, " ".join(packages) or "(全部)")
        return self.execute(args)

    def uninstall(self, packages: list[str]) -> CommandResult:
        logger.info("[%s] 卸载: %s", self.name.value, " ".join(packages))
        return self.execute([self.uninstall_verb, *packages])

    def update(self, packages: list[str] | None = None) -> CommandResult:
        logger.info("[%s] 更新: %s", self.name.value, " ".join(packages or []) or "(全部)")
        return self.execute([self.update_verb, *(packages or [])])

    def audit_fix(self) -> CommandResult:
        if self.audit_fix_args is None:
            raise UnsupportedOperationError(f"{self.name.value} 不支持 audit fix")
        return self.execute(list(self.audit_fix_args))

    # ------------------------------------------------------------------
    # 读取类操作（降级为空结果，不抛解析异常）
    # ------------------------------------------------------------------

    def outdated(self) -> list[OutdatedPackage]:
        result = self.execute(list(self.outdated_args))
        if not result.stdout.strip():
            return []
        try:
            return self.parse_outdated(result.stdout)
        except (ValueError, TypeError, KeyError, AttributeError, IndexError):
            logger.warning("[%s] outdated 输出无法解析", self.name.value, exc_info=True)
            return []

    def get_dependency_tree(self) -> DependencyGraph:
        result = self.execute(list(self.tree_args))
        if not result.stdout.strip():
            logger.debug(
                "[%s] 依赖树无输出 (rc=%d): %s",
                self.name.value, result.returncode, result.stderr[:200],
            )
            return DependencyGraph.empty()
        try:
            return self.parse_tree(result)
        except (ValueError, TypeError, KeyError, AttributeError, IndexError, RecursionError):
            logger.warning("[%s] 依赖树输出无法解析", self.name.value, exc_info=True)
            return DependencyGraph.empty()

    @abstractmethod
    def parse_outdated(self, output: str) -> list[OutdatedPackage]:
        """解析 outdated 命令的标准输出"""

    @abstractmethod
    def parse_tree(self, result: CommandResult) -> DependencyGraph:
        """解析依赖树命令的结果"""

    # ------------------------------------------------------------------
    # 清单读写
    # ------------------------------------------------------------------

    def read_manifest(self) -> dict[str, Any]:
        try:
            return load_json(self.manifest_path)
        except FileNotFoundError as e:
            raise ManifestError(f"清单文件不存在: {self.manifest_path}") from e
        except (ValueError, OSError) as e:
            raise ManifestError(f"清单文件无法读取: {self.manifest_path}: {e}") from e

    def list(self) -> list[InstalledPackage]:
        """列出清单四个依赖段中声明的全部包（每次返回新快照）"""
        try:
            manifest = self.read_manifest()
        except ManifestError as e:
            logger.warning("%s", e)
            return []

        packages: list[InstalledPackage] = []
        for dep_type in DEPENDENCY_BUCKETS:
            deps = manifest.get(dep_type.value)
            if not isinstance(deps, dict):
                continue
            for name, version in deps.items():
                if not isinstance(version, str):
                    continue
                packages.append(InstalledPackage(
                    name=name,
                    specified_version=version,
                    current_version=clean_version(version),
                    dependency_type=dep_type,
                ))
        return packages

    def move_dependency(
        self, name: str, from_type: DependencyType, to_type: DependencyType,
    ) -> None:
        """把依赖从一个依赖段移到另一个依赖段并写回清单

        读取-修改-写入之间没有文件锁。

        Raises:
            PackageNotFoundError: 源依赖段中没有该包
        """
        manifest = self.read_manifest()
        source = manifest.get(from_type.value)
        if not isinstance(source, dict) or name not in source:
            raise PackageNotFoundError(f"{from_type.value} 中不存在依赖包 {name}")
        if from_type == to_type:
            return

        version = source.pop(name)
        if not source:
            del manifest[from_type.value]

        target = manifest.get(to_type.value)
        if not isinstance(target, dict):
            target = {}
            manifest[to_type.value] = target
        target[name] = version

        save_json(self.manifest_path, manifest)
        logger.info("已移动 %s: %s -> %s", name, from_type.value, to_type.value)
