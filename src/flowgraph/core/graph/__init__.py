"""Graph package initialization.

Exposes core graph components for building workflows.
"""

from flowgraph.core.graph.base import Flow
from flowgraph.core.graph.batch import BatchFlow, ParallelBatchFlow
from flowgraph.core.graph.state import DEFAULT_ACTION, RetryPolicy
from flowgraph.core.graph.nodes import (
    BaseNode,
    Node,
    BatchNode,
    ParallelBatchNode,
)

__all__ = [
    # Flows
    "Flow",
    "BatchFlow",
    "ParallelBatchFlow",

    # Nodes
    "BaseNode",
    "Node",
    "BatchNode",
    "ParallelBatchNode",

    # Helpers
    "DEFAULT_ACTION",
    "RetryPolicy",
]
