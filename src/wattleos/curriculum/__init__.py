"""
Curriculum Module

Curriculum instances, node management and tree building.
"""

from .service import CurriculumService
from .tree import TreeNode, build_tree, count_nodes, flatten_tree

__all__ = [
    "CurriculumService",
    "TreeNode",
    "build_tree",
    "count_nodes",
    "flatten_tree",
]
