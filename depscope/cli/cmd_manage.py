"""CLI: 依赖变更命令

install / uninstall / update / audit-fix 直接透传给项目的包管理器，
输出原样回显，进程退出码与包管理器一致。
"""

from __future__ import annotations

import click

from depscope.cli import _load_project, _svc, path_option
from depscope.core.models import DependencyType
from depscope.utils.shell import CommandResult

_DEP_TYPES = [t.value for t in DependencyType]


def register(group: click.Group) -> None:
    group.add_command(install)
    group.add_command(uninstall)
    group.add_command(update)
    group.add_command(audit_fix)
    group.add_command(move)


def _finish(result: CommandResult) -> None:
    if result.stdout:
        click.echo(result.stdout, nl=False)
    if result.stderr:
        click.echo(result.stderr, nl=False, err=True)
    if not result.success:
        raise SystemExit(result.returncode)


@click.command()
@click.argument("packages", nargs=-1)
@path_option
@click.option("--dev", "-D", is_flag=True, help="安装为开发依赖")
@click.option("--exact", "-E", is_flag=True, help="锁定精确版本")
def install(packages: tuple[str, ...], path: str, dev: bool, exact: bool) -> None:
    """安装依赖（不指定包名时安装清单中的全部依赖）"""
    project = _load_project(path, with_packages=False)
    _finish(_svc().package_manager(project).install(list(packages), dev=dev, exact=exact))


@click.command()
@click.argument("packages", nargs=-1, required=True)
@path_option
def uninstall(packages: tuple[str, ...], path: str) -> None:
    """卸载依赖"""
    project = _load_project(path, with_packages=False)
    _finish(_svc().package_manager(project).uninstall(list(packages)))


@click.command()
@click.argument("packages", nargs=-1)
@path_option
def update(packages: tuple[str, ...], path: str) -> None:
    """在版本范围内更新依赖（不指定包名时更新全部）"""
    project = _load_project(path, with_packages=False)
    _finish(_svc().package_manager(project).update(list(packages) or None))


@click.command(name="audit-fix")
@path_option
def audit_fix(path: str) -> None:
    """自动修复安全漏洞（bun 不支持）"""
    project = _load_project(path, with_packages=False)
    _finish(_svc().package_manager(project).audit_fix())


@click.command()
@click.argument("name")
@click.option("--from", "from_type", required=True, type=click.Choice(_DEP_TYPES), help="源依赖段")
@click.option("--to", "to_type", required=True, type=click.Choice(_DEP_TYPES), help="目标依赖段")
@path_option
def move(name: str, from_type: str, to_type: str, path: str) -> None:
    """在 package.json 的依赖段之间移动依赖"""
    project = _load_project(path, with_packages=False)
    _svc().package_manager(project).move_dependency(
        name, DependencyType(from_type), DependencyType(to_type),
    )
    click.echo(f"已移动: {name} {from_type} -> {to_type}")
