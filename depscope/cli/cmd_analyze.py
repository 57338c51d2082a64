"""CLI: 依赖分析命令（只读）"""

from __future__ import annotations

import click

from depscope.cli import _echo_json, _load_project, _svc, json_option, path_option
from depscope.core.models import SEVERITIES, DependencyNode


def register(group: click.Group) -> None:
    group.add_command(outdated)
    group.add_command(tree)
    group.add_command(conflicts)
    group.add_command(unused)
    group.add_command(updates)
    group.add_command(audit)
    group.add_command(licenses)


def _echo_node(node: DependencyNode, depth: int) -> None:
    mark = f"  !! {node.error}" if node.error else ""
    click.echo(f"{'  ' * depth}{node.name}@{node.version or '?'}{mark}")
    for child in node.dependencies:
        _echo_node(child, depth + 1)


@click.command()
@path_option
@json_option
def outdated(path: str, as_json: bool) -> None:
    """包管理器报告的过期依赖"""
    project = _load_project(path, with_packages=False)
    rows = _svc().package_manager(project).outdated()
    if as_json:
        _echo_json([r.to_dict() for r in rows])
        return
    if not rows:
        click.echo("所有依赖均为最新。")
        return
    for r in rows:
        click.echo(f"  {r.name:30s} {r.current:12s} -> {r.wanted:12s} (latest {r.latest})")


@click.command()
@path_option
@json_option
def tree(path: str, as_json: bool) -> None:
    """完整依赖树"""
    from depscope.dependency.graph import DependencyGraphService
    project = _load_project(path, with_packages=False)
    graph = DependencyGraphService(_svc().package_manager(project)).generate_graph()
    if as_json:
        _echo_json(graph.to_dict())
        return
    click.echo(f"{graph.name}@{graph.version}")
    for node in graph.dependencies:
        _echo_node(node, 1)


@click.command()
@path_option
@json_option
@click.option("--duplicates", is_flag=True, help="同时列出存在多个版本的包")
def conflicts(path: str, as_json: bool, duplicates: bool) -> None:
    """依赖树中被工具标记为 missing / invalid 的节点"""
    from depscope.dependency.conflicts import ConflictDetector
    project = _load_project(path, with_packages=False)
    detector = ConflictDetector(_svc().package_manager(project))
    found = detector.detect_conflicts()
    if as_json:
        data: dict = {"conflicts": [c.to_dict() for c in found]}
        if duplicates:
            data["duplicates"] = detector.duplicates()
        _echo_json(data)
        return
    if not found:
        click.echo("未发现冲突。")
    for c in found:
        click.echo(f"  [{c.kind.value}] {c.package_name}: {c.message}")
    if duplicates:
        for name, versions in detector.duplicates().items():
            click.echo(f"  {name}: {', '.join(versions)}")


@click.command()
@path_option
@json_option
def unused(path: str, as_json: bool) -> None:
    """dependencies 中声明但源码从未导入的包"""
    from depscope.dependency.analyzer import DependencyAnalyzer
    project = _load_project(path, with_packages=False)
    names = DependencyAnalyzer(_svc().package_manager(project), project.path).find_unused_dependencies()
    if as_json:
        _echo_json(names)
        return
    if not names:
        click.echo("没有未使用的依赖。")
        return
    for name in names:
        click.echo(f"  {name}")


@click.command()
@path_option
@json_option
@click.option("--all", "show_all", is_flag=True, help="同时显示已是最新的依赖")
def updates(path: str, as_json: bool, show_all: bool) -> None:
    """查询注册表，按 major / minor / patch 分类可用更新"""
    svc = _svc()
    project = _load_project(path)
    checked = svc.updates.check_updates(project.packages)
    if not show_all:
        checked = [p for p in checked if p.update_available]
    if as_json:
        _echo_json({
            "packages": [p.to_dict() for p in checked],
            "summary": svc.updates.get_update_summary(checked).to_dict(),
        })
        return
    if not checked:
        click.echo("所有依赖均为最新。")
        return
    for p in checked:
        level = p.update_available.value if p.update_available else "-"
        click.echo(
            f"  {p.name:30s} {p.current_version:12s} -> {p.latest_version or '?':12s} [{level}]"
        )


@click.command()
@path_option
@json_option
@click.option("--check", is_flag=True, help="存在不低于阈值的漏洞时以退出码 1 结束")
@click.option(
    "--threshold", default=None, type=click.Choice(list(SEVERITIES)),
    help="严重级别阈值（默认取配置 severity_threshold）",
)
def audit(path: str, as_json: bool, check: bool, threshold: str | None) -> None:
    """安全审计（调用包管理器的 audit 命令）"""
    svc = _svc()
    threshold = threshold or svc.config.severity_threshold
    project = _load_project(path, with_packages=False)
    results = svc.security.scan(project.path, project.package_manager)
    stats = svc.security.get_summary(results)
    if as_json:
        _echo_json({
            "results": [r.to_dict() for r in results],
            "summary": stats.to_dict(),
        })
    else:
        for r in results:
            for v in r.vulnerabilities:
                click.echo(f"  [{v.severity:8s}] {v.package_name}: {v.title}")
        click.echo(
            f"共 {stats.total} 个漏洞 (critical {stats.critical}, high {stats.high}, "
            f"moderate {stats.moderate}, low {stats.low})"
        )
    if check and svc.security.count_at_or_above(results, threshold):
        raise SystemExit(1)


@click.command()
@path_option
@json_option
@click.option("--allow", multiple=True, help="允许的许可证（可多次指定，覆盖配置）")
@click.option("--block", multiple=True, help="禁止的许可证（可多次指定，覆盖配置）")
def licenses(path: str, as_json: bool, allow: tuple[str, ...], block: tuple[str, ...]) -> None:
    """按允许 / 禁止列表检查依赖许可证"""
    from depscope.services.license_checker import LicenseChecker
    svc = _svc()
    checker = svc.licenses
    if allow or block:
        checker = LicenseChecker(
            svc.registry,
            allowed=list(allow) or checker.allowed,
            blocked=list(block) or checker.blocked,
            batch_size=checker.batch_size,
        )
    project = _load_project(path)
    violations = checker.check_licenses(project)
    if as_json:
        _echo_json([v.to_dict() for v in violations])
        return
    if not violations:
        click.echo("未发现许可证违规。")
        return
    for v in violations:
        click.echo(f"  {v.package_name:30s} {v.license:16s} ({v.violation_type})")
