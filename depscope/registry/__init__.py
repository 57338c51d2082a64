"""npm 注册表访问

- cache.py: 带 TTL 的查询缓存
- client.py: 包元数据 / 搜索 / 版本列表
"""

from depscope.registry.cache import RegistryCache
from depscope.registry.client import RegistryClient

__all__ = ["RegistryCache", "RegistryClient"]
