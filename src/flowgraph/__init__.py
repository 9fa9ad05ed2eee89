"""Flowgraph - minimal async workflow orchestration library."""

from flowgraph.core import (
    BaseNode,
    Node,
    BatchNode,
    ParallelBatchNode,
    Flow,
    BatchFlow,
    ParallelBatchFlow,
    configure_logging,
    LogLevel,
    LogComponent,
)

__all__ = [
    'BaseNode',
    'Node',
    'BatchNode',
    'ParallelBatchNode',
    'Flow',
    'BatchFlow',
    'ParallelBatchFlow',
    'configure_logging',
    'LogLevel',
    'LogComponent'
]
