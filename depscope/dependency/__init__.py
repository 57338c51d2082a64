from depscope.dependency.analyzer import DependencyAnalyzer
from depscope.dependency.conflicts import ConflictDetector
from depscope.dependency.graph import DependencyGraphService

__all__ = ["DependencyAnalyzer", "ConflictDetector", "DependencyGraphService"]
