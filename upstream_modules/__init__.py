"""Upstream module resolver: install packaged JS modules from a dependency graph."""

from upstream_modules.models import DependencyNode, ManifestDescriptor, ProcessResult
from upstream_modules.processor import process_upstream_dependencies
from upstream_modules.walker import GraphWalker

__all__ = [
    "DependencyNode",
    "GraphWalker",
    "ManifestDescriptor",
    "ProcessResult",
    "process_upstream_dependencies",
]
