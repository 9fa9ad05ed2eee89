"""Node package initialization.

Exposes node types for building workflows.
"""

from flowgraph.core.graph.nodes.base.node import BaseNode, Node
from flowgraph.core.graph.nodes.batch import BatchNode, ParallelBatchNode

__all__ = [
    # Base node types
    "BaseNode",
    "Node",

    # Batch node types
    "BatchNode",
    "ParallelBatchNode",
]
