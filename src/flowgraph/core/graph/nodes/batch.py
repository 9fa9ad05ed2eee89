"""Batch node variants.

Both variants expect ``prep`` to return a sequence and call ``exec`` once per
item, each call wrapped in the inherited retry/fallback policy. ``post`` gets the
list of per-item results, in the same order as the items.
"""

from typing import Any, List, Optional, Sequence

from flowgraph.core.logging import get_logger, log_verbose, LogComponent
from flowgraph.core.graph.execution import gather_in_order
from flowgraph.core.graph.nodes.base.node import Node

logger = get_logger(LogComponent.BATCH)

class BatchNode(Node):
    """Runs ``exec`` over the items from ``prep`` one after another.

    The first item whose exec fails after its retries and fallback aborts the
    batch; the remaining items are not run.
    """

    async def _exec(self, items: Optional[Sequence[Any]]) -> List[Any]:
        items = [] if items is None else list(items)
        log_verbose(logger, f"{type(self).__name__}: running {len(items)} items sequentially")
        results = []
        # Single-item attempt loop, not the next _exec in the MRO
        for item in items:
            results.append(await Node._exec(self, item))
        return results

class ParallelBatchNode(Node):
    """Runs ``exec`` over the items from ``prep`` concurrently.

    Results keep the order of the items, not the order they finished in. Every
    item runs to completion; if any failed, the error of the first failed item
    (by position) is raised.
    """

    async def _exec(self, items: Optional[Sequence[Any]]) -> List[Any]:
        items = [] if items is None else list(items)
        log_verbose(logger, f"{type(self).__name__}: dispatching {len(items)} items concurrently")
        return await gather_in_order(Node._exec(self, item) for item in items)
