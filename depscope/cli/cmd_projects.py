"""CLI: 项目与依赖清单命令"""

from __future__ import annotations

import click

from depscope.cli import _echo_json, _load_project, _svc, json_option, path_option


def register(group: click.Group) -> None:
    group.add_command(projects)
    group.add_command(list_packages)
    group.add_command(summary)


@click.command()
@click.argument("root", default=".", type=click.Path(exists=True, file_okay=False))
@json_option
def projects(root: str, as_json: bool) -> None:
    """扫描目录树，列出所有含 package.json 的项目"""
    found = _svc().detector.detect_projects(root)
    if as_json:
        _echo_json([p.to_dict() for p in found])
        return
    if not found:
        click.echo("没有发现项目。")
        return
    for p in found:
        click.echo(f"  {p.id}  {p.name:30s} [{p.package_manager.value:4s}] {p.path}")


@click.command(name="list")
@path_option
@json_option
def list_packages(path: str, as_json: bool) -> None:
    """列出 package.json 中声明的全部依赖"""
    project = _load_project(path)
    if as_json:
        _echo_json([p.to_dict() for p in project.packages])
        return
    if not project.packages:
        click.echo("没有声明任何依赖。")
        return
    for p in project.packages:
        click.echo(
            f"  {p.name:30s} {p.specified_version:14s} ({p.dependency_type.value})"
        )


@click.command()
@path_option
@json_option
@click.option("--no-audit", is_flag=True, help="跳过安全审计")
def summary(path: str, as_json: bool, no_audit: bool) -> None:
    """项目依赖汇总: 更新分布 / 漏洞 / 弃用 / 许可证"""
    data = _svc().dashboard(_load_project(path), audit=not no_audit)

    if as_json:
        _echo_json(data.to_dict())
        return
    status = data.update_status
    click.echo(f"项目: {data.project_name}  依赖总数: {data.total_packages}")
    click.echo(
        f"  更新: 最新 {status.up_to_date} / patch {status.patch} / "
        f"minor {status.minor} / major {status.major}"
    )
    sec = data.security
    click.echo(
        f"  漏洞: {sec.total} (critical {sec.critical}, high {sec.high}, "
        f"moderate {sec.moderate}, low {sec.low})"
    )
    click.echo(f"  已弃用: {data.deprecation_total}")
    for lic, count in sorted(data.licenses.items(), key=lambda kv: (-kv[1], kv[0])):
        click.echo(f"  {lic:20s} {count}")
