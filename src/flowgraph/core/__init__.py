"""Core modules for flowgraph."""

from flowgraph.core.graph import (
    BaseNode,
    Node,
    BatchNode,
    ParallelBatchNode,
    Flow,
    BatchFlow,
    ParallelBatchFlow,
)
from flowgraph.core.logging import configure_logging, FlowLoggingConfig, LogLevel, LogComponent

__all__ = [
    'BaseNode',
    'Node',
    'BatchNode',
    'ParallelBatchNode',
    'Flow',
    'BatchFlow',
    'ParallelBatchFlow',
    'configure_logging',
    'FlowLoggingConfig',
    'LogLevel',
    'LogComponent'
]
