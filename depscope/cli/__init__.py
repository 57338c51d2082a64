"""depscope 命令行接口

CLI 按领域拆分为子模块，每个模块注册自己的命令到 main group。
所有分析类命令都接受 --path 指定项目目录、--json 输出机器可读结果。
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import click

from depscope import __version__
from depscope.core.exceptions import DepScopeError
from depscope.core.models import Project
from depscope.services.container import get_container, reset_container
from depscope.utils.logger import setup_from_env


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


def _load_project(path: str, with_packages: bool = True) -> Project:
    """把目录解析为 Project，找不到 package.json 时以 CLI 错误退出"""
    project = _svc().detector.create_project(Path(path) / "package.json")
    if project is None:
        raise click.ClickException(f"未找到可用的 package.json: {path}")
    if with_packages:
        project = _svc().detector.load_packages(project)
    return project


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _fail(e: DepScopeError) -> click.ClickException:
    return click.ClickException(f"[{e.code}] {e}")


path_option = click.option(
    "--path", "-C", default=".", type=click.Path(file_okay=False),
    help="项目目录（含 package.json）",
)
json_option = click.option("--json", "as_json", is_flag=True, help="以 JSON 输出")


class _Group(click.Group):
    """把领域异常统一转换为 CLI 错误（退出码 1，不打印堆栈）"""

    def invoke(self, ctx: click.Context) -> Any:
        try:
            return super().invoke(ctx)
        except DepScopeError as e:
            raise _fail(e) from e


@click.group(cls=_Group)
@click.version_option(version=__version__)
@click.option("--config", "config_path", default="depscope.yml", help="配置文件路径")
def main(config_path: str) -> None:
    """depscope - JavaScript 项目依赖清点与分析"""
    setup_from_env()
    from depscope.core.config import init_config
    cfg = init_config(config_path)
    if cfg.debug:
        setup_from_env(debug=True)
    reset_container()


# 注册各领域子命令
from depscope.cli.cmd_projects import register as _reg_projects  # noqa: E402
from depscope.cli.cmd_analyze import register as _reg_analyze  # noqa: E402
from depscope.cli.cmd_registry import register as _reg_registry  # noqa: E402
from depscope.cli.cmd_manage import register as _reg_manage  # noqa: E402
from depscope.cli.cmd_misc import register as _reg_misc  # noqa: E402

_reg_projects(main)
_reg_analyze(main)
_reg_registry(main)
_reg_manage(main)
_reg_misc(main)
