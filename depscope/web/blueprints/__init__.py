from depscope.web.blueprints.projects_bp import projects_bp

__all__ = ["projects_bp"]
