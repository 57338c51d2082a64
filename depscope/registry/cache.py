"""注册表查询缓存

缓存策略:
  - 键为查询描述（如 "pkg:lodash"、"search:react:20:0"），值为解析后的响应
  - 写入时记录过期时间戳，默认 30 分钟
  - 过期条目在下一次访问时惰性清除，没有后台清理线程

更新检查和许可证检查会在线程池中并发查询，所有读写都在锁内完成。
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)


class RegistryCache:
    """带 TTL 的进程内缓存"""

    def __init__(
        self,
        ttl_minutes: float = 30,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_minutes * 60
        self._clock = clock
        self._lock = threading.Lock()
        # key -> (value, expires_at)
        self._cache: dict[str, tuple[Any, float]] = {}

    def _live(self, key: str) -> tuple[Any, float] | None:
        """返回未过期条目，过期则顺手删除（调用方需持锁）"""
        entry = self._cache.get(key)
        if entry is None:
            return None
        if self._clock() > entry[1]:
            del self._cache[key]
            logger.debug("缓存过期: %s", key)
            return None
        return entry

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._live(key)
            return entry[0] if entry else None

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._cache[key] = (value, self._clock() + self.ttl_seconds)

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live(key) is not None

    def delete(self, key: str) -> None:
        with self._lock:
            self._cache.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    @property
    def size(self) -> int:
        """当前条目数（含尚未被惰性清除的过期条目）"""
        with self._lock:
            return len(self._cache)
