"""npm 注册表客户端

接口:
  - GET {base}/{编码后的包名}             包元数据
  - GET {base}/-/v1/search?text=&size=&from=  搜索

所有查询先查缓存；离线模式下在发起任何网络请求之前直接返回空结果。
网络错误、非 2xx 状态码、JSON 解析失败一律视为 "未找到"，
调用方无法区分 "包不存在" 与 "注册表不可达"。
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from typing import Any

from depscope.core.models import SearchResult
from depscope.registry.cache import RegistryCache
from depscope.utils.net import package_url, search_url, validate_url_scheme
from depscope.utils.version import dotted_sort_key

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_URL = "https://registry.npmjs.org"


class RegistryClient:
    """注册表查询（带缓存）"""

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        *,
        cache: RegistryCache | None = None,
        cache_timeout: float = 30,
        offline_mode: bool = False,
        timeout: float | None = 30,
    ) -> None:
        validate_url_scheme(registry_url, context="registry_url")
        self.base_url = registry_url.rstrip("/")
        self.cache = cache if cache is not None else RegistryCache(cache_timeout)
        self.offline_mode = offline_mode
        self.timeout = timeout

    def _fetch_json(self, url: str) -> Any | None:
        """GET 并解析 JSON，任何失败返回 None"""
        req = urllib.request.Request(url, headers={"Accept": "application/json"})
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:  # nosec B310
                status = getattr(resp, "status", 200)
                if not 200 <= status < 300:
                    logger.debug("注册表返回非成功状态 %s: %s", status, url)
                    return None
                return json.loads(resp.read().decode("utf-8"))
        except urllib.error.HTTPError as e:
            logger.debug("注册表 HTTP %s: %s", e.code, url)
        except (urllib.error.URLError, OSError) as e:
            logger.debug("注册表不可达: %s (%s)", url, e)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.debug("注册表响应解析失败: %s (%s)", url, e)
        return None

    # ------------------------------------------------------------------
    # 包元数据
    # ------------------------------------------------------------------

    def get_package(self, name: str) -> dict[str, Any] | None:
        """获取包的完整元数据（versions / dist-tags / license 等）"""
        cache_key = f"pkg:{name}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        if self.offline_mode:
            return None

        data = self._fetch_json(package_url(self.base_url, name))
        if not isinstance(data, dict):
            return None
        self.cache.set(cache_key, data)
        return data

    def get_latest_version(self, name: str) -> str | None:
        pkg = self.get_package(name)
        if not pkg:
            return None
        return latest_tag(pkg)

    def get_versions(self, name: str) -> list[str]:
        """已发布版本列表，从新到旧"""
        pkg = self.get_package(name)
        if not pkg:
            return []
        versions = pkg.get("versions")
        if not isinstance(versions, dict):
            return []
        return sorted(versions, key=dotted_sort_key, reverse=True)

    # ------------------------------------------------------------------
    # 搜索
    # ------------------------------------------------------------------

    def search(self, query: str, limit: int = 20, offset: int = 0) -> list[SearchResult]:
        cache_key = f"search:{query}:{limit}:{offset}"
        cached = self.cache.get(cache_key)
        if cached is not None:
            return cached

        if self.offline_mode:
            return []

        data = self._fetch_json(search_url(self.base_url, query, limit, offset))
        if not isinstance(data, dict):
            return []
        try:
            results = [_map_search_result(obj) for obj in data.get("objects", [])]
        except (KeyError, TypeError, AttributeError) as e:
            logger.debug("搜索结果结构异常: %s (%s)", query, e)
            return []

        self.cache.set(cache_key, results)
        return results

    def clear_cache(self) -> None:
        self.cache.clear()


def _map_search_result(obj: dict[str, Any]) -> SearchResult:
    pkg = obj["package"]
    author = pkg.get("author")
    if isinstance(author, dict):
        author = author.get("name")
    return SearchResult(
        name=pkg["name"],
        version=pkg.get("version", ""),
        description=pkg.get("description"),
        keywords=list(pkg.get("keywords") or []),
        author=author,
        date=pkg.get("date"),
        links=dict(pkg.get("links") or {}),
    )


def latest_tag(pkg: dict[str, Any]) -> str | None:
    """dist-tags.latest，结构异常时返回 None"""
    dist_tags = pkg.get("dist-tags")
    if not isinstance(dist_tags, dict):
        return None
    latest = dist_tags.get("latest")
    return latest if isinstance(latest, str) else None
