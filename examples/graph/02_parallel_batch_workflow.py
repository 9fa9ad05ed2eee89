"""
Parallel Batch Example

This example demonstrates:
1. A flaky node recovered by retries and a fallback
2. A ParallelBatchFlow running the same graph for several parameter sets
3. Params merged over the flow's base params for every run
"""

import asyncio
import random
from typing import Any, Dict, List

from flowgraph.core.graph import Node, ParallelBatchFlow
from flowgraph.core.logging import (
    Colors,
    LogComponent,
    LogLevel,
    configure_logging,
    get_logger,
)

logger = get_logger(LogComponent.FLOW)

###################################################################
# Nodes
###################################################################

class FetchPrice(Node):
    """Pretends to fetch a price, failing now and then."""

    async def prep(self, shared: Dict[str, Any]) -> str:
        return self.params["symbol"]

    async def exec(self, symbol: str) -> float:
        await asyncio.sleep(random.uniform(0.05, 0.2))
        if random.random() < 0.3:
            raise ConnectionError(f"feed timeout for {symbol}")
        return round(random.uniform(10, 100), 2)

    async def exec_fallback(self, symbol: str, exc: Exception) -> float:
        logger.warning(f"Giving up on {symbol} after {self.cur_retry + 1} attempts: {exc}")
        return float("nan")

    async def post(self, shared, prep_res, exec_res) -> None:
        converted = exec_res * self.params["rate"]
        shared.setdefault("prices", {})[prep_res] = round(converted, 2)

class PriceBatch(ParallelBatchFlow):
    """One run per symbol in shared storage."""

    async def prep(self, shared: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [{"symbol": symbol} for symbol in shared["symbols"]]

###################################################################
# Main
###################################################################

async def main():
    configure_logging(
        default_level=LogLevel.INFO,
        component_levels={LogComponent.NODES: LogLevel.VERBOSE}
    )

    batch = PriceBatch(FetchPrice(max_retries=3, wait=0.1), params={"rate": 0.92})
    shared = {"symbols": ["ACME", "GLOBEX", "INITECH", "UMBRELLA"]}
    await batch.run(shared)

    print(f"\n{Colors.INFO}Prices (EUR):{Colors.RESET}")
    for symbol in shared["symbols"]:
        print(f"  {symbol:<10} {shared['prices'][symbol]}")

if __name__ == "__main__":
    asyncio.run(main())
