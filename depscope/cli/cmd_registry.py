"""CLI: 注册表查询命令"""

from __future__ import annotations

import click

from depscope.cli import _echo_json, _svc, json_option


def register(group: click.Group) -> None:
    group.add_command(search)
    group.add_command(versions)


@click.command()
@click.argument("query")
@click.option("--limit", default=20, type=click.IntRange(1, 250), help="返回条数")
@click.option("--offset", default=0, type=click.IntRange(0), help="起始偏移")
@json_option
def search(query: str, limit: int, offset: int, as_json: bool) -> None:
    """在注册表中搜索包"""
    results = _svc().registry.search(query, limit=limit, offset=offset)
    if as_json:
        _echo_json([r.to_dict() for r in results])
        return
    if not results:
        click.echo("没有匹配的包。")
        return
    for r in results:
        click.echo(f"  {r.name:30s} {r.version:12s} {r.description or ''}")


@click.command()
@click.argument("name")
@click.option("--limit", default=0, type=click.IntRange(0), help="只显示最新的 N 个（0 为全部）")
@json_option
def versions(name: str, limit: int, as_json: bool) -> None:
    """列出包在注册表中已发布的版本（从新到旧）"""
    registry = _svc().registry
    found = registry.get_versions(name)
    if limit:
        found = found[:limit]
    if as_json:
        _echo_json({"name": name, "latest": registry.get_latest_version(name), "versions": found})
        return
    if not found:
        click.echo(f"注册表中没有找到: {name}")
        return
    latest = registry.get_latest_version(name)
    for v in found:
        marker = " <- latest" if v == latest else ""
        click.echo(f"  {v}{marker}")
