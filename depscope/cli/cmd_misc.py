"""CLI: 杂项命令"""

from __future__ import annotations

import click


def register(group: click.Group) -> None:
    group.add_command(serve)


@click.command()
@click.option("--port", default=8888, help="监听端口")
@click.option("--host", default="127.0.0.1", help="监听地址")
@click.option("--root", default=None, help="项目扫描根目录（覆盖配置中的 workspace_root）")
def serve(port: int, host: str, root: str | None) -> None:
    """启动只读 JSON API 服务"""
    from depscope.core.config import get_config
    from depscope.web.app import run_server
    cfg = get_config()
    if root:
        cfg.workspace_root = root
    run_server(port=port, host=host, debug=cfg.debug)
