"""核心数据模型

所有包管理器适配器、分析器、聚合服务共享的规范化数据结构集中定义于此。
适配器负责把各工具的原始输出翻译为这里的类型，上层只依赖这些类型。
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

# =========================================================================
# 枚举
# =========================================================================


class DependencyType(str, Enum):
    """依赖类型，取值即 package.json 中的依赖段名"""

    DIRECT = "dependencies"
    DEV = "devDependencies"
    PEER = "peerDependencies"
    OPTIONAL = "optionalDependencies"

    @classmethod
    def parse(cls, value: Any) -> DependencyType:
        """宽松解析，无法识别（含非字符串）时归为 dependencies"""
        text = value if isinstance(value, str) else ""
        for member in cls:
            if member.value == text or member.name.lower() == text.lower():
                return member
        return cls.DIRECT


# 清单读取时依赖段的遍历顺序
DEPENDENCY_BUCKETS: tuple[DependencyType, ...] = (
    DependencyType.DIRECT,
    DependencyType.DEV,
    DependencyType.PEER,
    DependencyType.OPTIONAL,
)


class UpdateType(str, Enum):
    """可用更新的级别，"无更新" 用 None 表示"""

    PATCH = "patch"
    MINOR = "minor"
    MAJOR = "major"


class ConflictKind(str, Enum):
    VERSION_MISMATCH = "version-mismatch"
    MISSING = "missing"
    INVALID = "invalid"
    PEER_MISMATCH = "peer-mismatch"


class PackageManagerType(str, Enum):
    NPM = "npm"
    YARN = "yarn"
    PNPM = "pnpm"
    BUN = "bun"


SEVERITIES: tuple[str, ...] = ("critical", "high", "moderate", "low")


def _plain(data: Any) -> Any:
    """把 asdict 结果中的 Enum / datetime / tuple 转成 JSON 友好的值"""
    if isinstance(data, Enum):
        return data.value
    if isinstance(data, datetime):
        return data.isoformat()
    if isinstance(data, dict):
        return {k: _plain(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [_plain(v) for v in data]
    return data


# =========================================================================
# 包与漏洞
# =========================================================================


@dataclass(frozen=True)
class Vulnerability:
    """单条安全公告"""

    id: str
    title: str
    severity: str  # critical / high / moderate / low
    package_name: str
    affected_versions: str = ""
    patched_versions: str | None = None
    url: str | None = None


@dataclass(frozen=True)
class InstalledPackage:
    """清单中声明的一个依赖（不可变快照）

    每次读取清单都会构造新的实例；更新检查通过 dataclasses.replace
    生成携带注册表信息的新快照，而不是原地修改。
    """

    name: str
    specified_version: str
    current_version: str
    dependency_type: DependencyType
    latest_version: str | None = None
    update_available: UpdateType | None = None
    is_deprecated: bool = False
    deprecation_message: str | None = None
    vulnerabilities: tuple[Vulnerability, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass
class OutdatedPackage:
    """包管理器 outdated 命令报告的一行"""

    name: str
    current: str
    wanted: str
    latest: str
    dependency_type: DependencyType = DependencyType.DIRECT

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


# =========================================================================
# 依赖图
# =========================================================================


@dataclass
class DependencyNode:
    """依赖树中的一个节点

    同一 (name, version) 出现在树的多条路径上时，是多个独立实例，不做去重。
    version 解析失败时为空串，不会是 None。
    """

    name: str
    version: str = ""
    dependencies: list[DependencyNode] = field(default_factory=list)
    error: str | None = None  # 工具报告 missing / invalid / unmet 时填写
    dev: bool = False
    optional: bool = False
    peer: bool = False

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "dependencies": [d.to_dict() for d in self.dependencies],
        }
        if self.error:
            data["error"] = self.error
        for flag in ("dev", "optional", "peer"):
            if getattr(self, flag):
                data[flag] = True
        return data


@dataclass
class DependencyGraph:
    """项目完整依赖树的根伪节点"""

    name: str
    version: str
    dependencies: list[DependencyNode] = field(default_factory=list)

    @classmethod
    def empty(cls) -> DependencyGraph:
        """解析失败时的统一降级结果"""
        return cls(name="root", version="0.0.0", dependencies=[])

    def iter_nodes(self):  # type: ignore[no-untyped-def]
        """深度优先遍历全部节点"""
        stack = list(reversed(self.dependencies))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.dependencies))

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "dependencies": [d.to_dict() for d in self.dependencies],
        }


@dataclass
class Conflict:
    """分析阶段产生的结构问题，不持久化"""

    package_name: str
    kind: ConflictKind
    message: str
    location: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


# =========================================================================
# 项目与报告
# =========================================================================


@dataclass
class Project:
    """一个含 package.json 的项目目录"""

    id: str
    name: str
    path: str
    manifest_path: str
    package_manager: PackageManagerType
    lockfile_path: str | None = None
    packages: list[InstalledPackage] = field(default_factory=list)
    last_updated: datetime = field(default_factory=datetime.now)
    has_security_issues: bool = False
    has_updates: bool = False

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass
class SearchResult:
    """注册表搜索结果"""

    name: str
    version: str
    description: str | None = None
    keywords: list[str] = field(default_factory=list)
    author: str | None = None
    date: str | None = None
    links: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class UpdateSummary:
    total: int = 0
    up_to_date: int = 0
    patch: int = 0
    minor: int = 0
    major: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class SecurityScanResult:
    package_name: str
    vulnerabilities: list[Vulnerability] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return _plain(asdict(self))


@dataclass
class AuditSummary:
    total: int = 0
    critical: int = 0
    high: int = 0
    moderate: int = 0
    low: int = 0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class LicenseViolation:
    package_name: str
    license: str
    violation_type: str  # "blocked" / "not-allowed"

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class DashboardData:
    """单个项目的汇总统计"""

    project_name: str
    total_packages: int = 0
    update_status: UpdateSummary = field(default_factory=UpdateSummary)
    security: AuditSummary = field(default_factory=AuditSummary)
    deprecation_total: int = 0
    licenses: dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
