"""项目分析 API Blueprint

项目由 workspace_root 下的扫描结果按 id 定位，全部为只读接口。
"""

from __future__ import annotations

from flask import Blueprint, Response, request

from depscope.core.models import Project
from depscope.web.responses import bad_request, not_found, ok

projects_bp = Blueprint("projects", __name__, url_prefix="/api/projects")


def _container():  # type: ignore[no-untyped-def]
    from depscope.services.container import get_container
    return get_container()


def _project(project_id: str) -> Project | None:
    project = _container().find_project(project_id)
    if project is None:
        return None
    return _container().detector.load_packages(project)


@projects_bp.route("", methods=["GET"])
def list_all() -> Response:
    found = _container().detector.detect_projects(_container().config.workspace_root)
    return ok({"projects": [p.to_dict() for p in found]})  # type: ignore[return-value]


@projects_bp.route("/<project_id>/packages", methods=["GET"])
def packages(project_id: str) -> tuple[Response, int] | Response:
    project = _project(project_id)
    if project is None:
        return not_found("项目")
    return ok({"packages": [p.to_dict() for p in project.packages]})


@projects_bp.route("/<project_id>/graph", methods=["GET"])
def graph(project_id: str) -> tuple[Response, int] | Response:
    from depscope.dependency.graph import DependencyGraphService
    project = _container().find_project(project_id)
    if project is None:
        return not_found("项目")
    pm = _container().package_manager(project)
    return ok(DependencyGraphService(pm).generate_graph().to_dict())


@projects_bp.route("/<project_id>/conflicts", methods=["GET"])
def conflicts(project_id: str) -> tuple[Response, int] | Response:
    from depscope.dependency.conflicts import ConflictDetector
    project = _container().find_project(project_id)
    if project is None:
        return not_found("项目")
    detector = ConflictDetector(_container().package_manager(project))
    found = detector.detect_conflicts()
    return ok({
        "conflicts": [c.to_dict() for c in found],
        "duplicates": detector.duplicates(),
    })


@projects_bp.route("/<project_id>/unused", methods=["GET"])
def unused(project_id: str) -> tuple[Response, int] | Response:
    from depscope.dependency.analyzer import DependencyAnalyzer
    project = _container().find_project(project_id)
    if project is None:
        return not_found("项目")
    analyzer = DependencyAnalyzer(_container().package_manager(project), project.path)
    return ok({"unused": analyzer.find_unused_dependencies()})


@projects_bp.route("/<project_id>/outdated", methods=["GET"])
def outdated(project_id: str) -> tuple[Response, int] | Response:
    project = _container().find_project(project_id)
    if project is None:
        return not_found("项目")
    rows = _container().package_manager(project).outdated()
    return ok({"outdated": [r.to_dict() for r in rows]})


@projects_bp.route("/<project_id>/summary", methods=["GET"])
def summary(project_id: str) -> tuple[Response, int] | Response:
    audit_flag = request.args.get("audit", "1")
    if audit_flag not in ("0", "1"):
        return bad_request("参数 audit 只能是 0 或 1")
    project = _project(project_id)
    if project is None:
        return not_found("项目")
    return ok(_container().dashboard(project, audit=audit_flag == "1").to_dict())
