"""
Map-Reduce Sum Example

This example demonstrates:
1. A BatchNode that splits an array into chunks and sums each chunk
2. A reduce node wired on the "processed" action label
3. Running both through a Flow over shared storage
"""

import asyncio
from typing import Any, Dict, List

from flowgraph.core.graph import BatchNode, Flow, Node
from flowgraph.core.logging import (
    Colors,
    FlowLoggingConfig,
    LogComponent,
    LogLevel,
    configure_logging,
    get_logger,
)

logger = get_logger(LogComponent.FLOW)

###################################################################
# Nodes
###################################################################

class ArrayChunkNode(BatchNode):
    """Splits the input array and sums every chunk."""
    chunk_size: int = 10

    async def prep(self, shared: Dict[str, Any]) -> List[List[int]]:
        array = shared.get("input_array", [])
        return [array[i:i + self.chunk_size] for i in range(0, len(array), self.chunk_size)]

    async def exec(self, chunk: List[int]) -> int:
        await asyncio.sleep(0.01)
        return sum(chunk)

    async def post(self, shared, prep_res, exec_res) -> str:
        shared["chunk_results"] = exec_res
        return "processed"

class SumReduceNode(Node):
    """Adds up the chunk sums."""

    async def prep(self, shared: Dict[str, Any]) -> List[int]:
        return shared.get("chunk_results", [])

    async def exec(self, chunk_results: List[int]) -> int:
        return sum(chunk_results)

    async def post(self, shared, prep_res, exec_res) -> str:
        shared["total"] = exec_res
        return "reduced"

###################################################################
# Main
###################################################################

async def main():
    configure_logging(
        default_level=LogLevel.INFO,
        component_levels={LogComponent.FLOW: LogLevel.INFO}
    )

    chunk = ArrayChunkNode(chunk_size=10)
    chunk - "processed" >> SumReduceNode()
    flow = Flow(chunk, logging_config=FlowLoggingConfig(show_node_transitions=True))

    shared = {"input_array": list(range(25))}
    await flow.run(shared)

    print(f"\n{Colors.INFO}Chunk sums:{Colors.RESET} {shared['chunk_results']}")
    print(f"{Colors.SUCCESS}Total:{Colors.RESET} {shared['total']}")

if __name__ == "__main__":
    asyncio.run(main())
