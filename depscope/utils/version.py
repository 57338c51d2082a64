"""版本号语义

解析类 semver 版本字符串并判断升级级别。

比较只看 major / minor / patch 三段数值，预发布后缀 (-beta.1 等) 会被
保留在解析结果里，但不参与排序：1.0.0-beta 与 1.0.0 视为相等。
"""

from __future__ import annotations

import re
from typing import NamedTuple

from depscope.core.models import UpdateType

_RANGE_PREFIX_RE = re.compile(r"^[~^>=<]*")
_VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-(.+))?")


class ParsedVersion(NamedTuple):
    major: int
    minor: int
    patch: int
    prerelease: str | None = None


def clean_version(version: str) -> str:
    """去掉开头的范围运算符，如 '^1.2.3' -> '1.2.3'"""
    return _RANGE_PREFIX_RE.sub("", version, count=1)


def parse_version(version: str) -> ParsedVersion | None:
    """解析版本号，开头不是 数字.数字.数字 时返回 None"""
    match = _VERSION_RE.match(clean_version(version))
    if not match:
        return None
    return ParsedVersion(
        major=int(match.group(1)),
        minor=int(match.group(2)),
        patch=int(match.group(3)),
        prerelease=match.group(4),
    )


def compare_versions(a: str, b: str) -> int:
    """比较两个版本号，返回负数 / 0 / 正数

    任一侧无法解析时返回 0。
    """
    va = parse_version(a)
    vb = parse_version(b)
    if va is None or vb is None:
        return 0
    if va.major != vb.major:
        return va.major - vb.major
    if va.minor != vb.minor:
        return va.minor - vb.minor
    return va.patch - vb.patch


def classify_update(current: str, latest: str) -> UpdateType | None:
    """判断从 current 升到 latest 属于哪一级更新，无更新返回 None"""
    cur = parse_version(current)
    new = parse_version(latest)
    if cur is None or new is None:
        return None
    if compare_versions(current, latest) >= 0:
        return None

    if new.major > cur.major:
        return UpdateType.MAJOR
    if new.minor > cur.minor:
        return UpdateType.MINOR
    if new.patch > cur.patch:
        return UpdateType.PATCH
    return None


def dotted_sort_key(version: str) -> tuple[int, ...]:
    """注册表版本列表排序用的键，逐段按数值比较，非数字段记为 0"""
    parts = []
    for piece in version.split("."):
        digits = re.match(r"\d+", piece)
        parts.append(int(digits.group()) if digits else 0)
    return tuple(parts)
