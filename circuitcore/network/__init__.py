"""
Topology layer: solving units (nodes, super nodes, meshes) and their adjacency graph.
"""

from .tools import Tool, ToolType  # noqa: F401
from .graph import ToolGraph  # noqa: F401

__all__ = ["Tool", "ToolType", "ToolGraph"]
