"""只读 JSON API（基于 Flask）

对外暴露项目列表、依赖清单、依赖图、冲突、未使用依赖、过期依赖与汇总统计。
不提供任何变更类接口。

启动方式: depscope serve --port 8888
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from depscope import __version__
from depscope.core.exceptions import (
    ConfigError,
    DepScopeError,
    ManifestError,
    PackageNotFoundError,
    UnsupportedOperationError,
    ValidationError,
)
from depscope.web.blueprints import projects_bp

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.json.ensure_ascii = False  # type: ignore[attr-defined]
app.register_blueprint(projects_bp)

# 业务异常 -> HTTP 状态码，未列出的按 500 处理
_STATUS_BY_ERROR: tuple[tuple[type[DepScopeError], int], ...] = (
    (PackageNotFoundError, 404),
    (ValidationError, 400),
    (UnsupportedOperationError, 400),
    (ManifestError, 422),
    (ConfigError, 500),
)


# =========================================================================
# 全局 JSON 错误处理
# =========================================================================


@app.errorhandler(HTTPException)
def handle_http_exception(exc):
    """将所有 HTTP 异常统一返回 JSON"""
    return jsonify(error=exc.description), exc.code


@app.errorhandler(DepScopeError)
def handle_depscope_error(exc: DepScopeError):
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            break
    else:
        status = 500
    if status >= 500:
        logger.error("请求处理失败: %s", exc)
    return jsonify(error=str(exc), code=exc.code), status


@app.errorhandler(Exception)
def handle_generic_exception(exc):  # noqa: ARG001
    """捕获未处理异常，返回 500 JSON"""
    logger.exception("未处理的异常")
    return jsonify(error="服务器内部错误"), 500


@app.route("/api/health")
def health():
    return jsonify(status="ok", version=__version__)


def run_server(port: int = 8888, debug: bool = False, host: str = "127.0.0.1") -> None:
    logger.info("depscope API 已启动: http://%s:%d", host, port)
    app.run(host=host, port=port, debug=debug)
