"""网络工具: 注册表地址校验与 URL 拼接"""

from __future__ import annotations

from urllib.parse import quote, urlencode, urlparse

from depscope.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """校验 URL 仅使用 http/https，防止 file:// 等非预期协议访问

    Raises:
        ValidationError: URL scheme 不在白名单内
    """
    parsed = urlparse(url)
    if parsed.scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{parsed.scheme}'{label}，"
            f"仅支持 http/https: {url}"
        )


def package_url(base: str, name: str) -> str:
    """包元数据地址；scoped 包名中的 '/' 也需要编码"""
    return f"{base.rstrip('/')}/{quote(name, safe='')}"


def search_url(base: str, text: str, size: int, offset: int = 0) -> str:
    params: dict[str, str] = {"text": text, "size": str(size)}
    if offset:
        params["from"] = str(offset)
    return f"{base.rstrip('/')}/-/v1/search?{urlencode(params)}"
