"""日志配置

支持普通文本和结构化 JSON 两种输出格式，统一输出到 stderr，
避免与 CLI 的 stdout 数据输出（如 --json）混在一起。
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志格式器，便于 CI 流水线消费

    输出字段: timestamp / level / logger / message / module / function / line，
    有异常时追加 exception。
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            # 记录事件发生时间而非格式化时间
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器

    参数:
        level: 日志级别字符串（DEBUG, INFO, WARNING, ERROR, CRITICAL）
        json_output: True 时使用 JSON 格式，否则使用人类可读格式

    已有 handlers 会先被清理，重复调用不会导致日志重复输出。
    """
    reset_logging()
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"
        handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def reset_logging() -> None:
    """清理根日志器上所有已注册的 handlers"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()


def setup_from_env(debug: bool = False) -> None:
    """按 DEPSCOPE_LOG_LEVEL（默认 WARNING）/ DEPSCOPE_LOG_JSON=1 配置日志，debug 时强制 DEBUG"""
    level = "DEBUG" if debug else os.getenv("DEPSCOPE_LOG_LEVEL", "WARNING")
    setup_logging(level=level, json_output=os.getenv("DEPSCOPE_LOG_JSON", "") == "1")
