"""Shared test fixtures for flowgraph tests."""

import logging
from typing import Any, Dict, List, Optional

import pytest

from flowgraph.core.graph import BatchNode, Node
from flowgraph.core.logging import LogComponent


class ArrayChunkNode(BatchNode):
    """Splits ``shared["input_array"]`` into chunks and sums each chunk."""
    chunk_size: int = 10

    async def prep(self, shared: Dict[str, Any]) -> List[List[int]]:
        array = shared.get("input_array", [])
        return [
            array[start:start + self.chunk_size]
            for start in range(0, len(array), self.chunk_size)
        ]

    async def exec(self, chunk: List[int]) -> int:
        return sum(chunk)

    async def post(self, shared, prep_res, exec_res) -> Optional[str]:
        shared["chunk_results"] = exec_res
        return "processed"


class SumReduceNode(Node):
    """Adds up ``shared["chunk_results"]`` into ``shared["total"]``."""

    async def prep(self, shared: Dict[str, Any]) -> List[int]:
        return shared.get("chunk_results", [])

    async def exec(self, chunk_results: List[int]) -> int:
        return sum(chunk_results)

    async def post(self, shared, prep_res, exec_res) -> Optional[str]:
        shared["total"] = exec_res
        return "reduced"


@pytest.fixture
def shared() -> Dict[str, Any]:
    """Fixture providing empty shared storage."""
    return {}


@pytest.fixture
def restore_logging():
    """Restore root handlers and component levels changed by a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    root_level = root.level
    levels = {c: logging.getLogger(c.value).level for c in LogComponent}
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(root_level)
    for component, level in levels.items():
        logging.getLogger(component.value).setLevel(level)


class AmbiguousSequence:
    """Iterable whose truth value is undefined, like a numpy array."""

    def __init__(self, values):
        self.values = list(values)

    def __iter__(self):
        return iter(self.values)

    def __len__(self):
        return len(self.values)

    def __bool__(self):
        raise ValueError("The truth value of a sequence with more than one element is ambiguous")
