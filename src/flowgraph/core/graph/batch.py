"""Batch flows.

``prep`` returns a sequence of parameter mappings. The whole graph is walked
once per mapping, with the mapping merged over the flow's own params. ``post``
receives the parameter list as ``prep_res`` and ``None`` as ``exec_res``.
"""

from typing import Any, List, Optional, Sequence

from flowgraph.core.logging import get_logger, log_verbose, LogComponent
from flowgraph.core.graph.base import Flow
from flowgraph.core.graph.execution import gather_in_order, resolve
from flowgraph.core.graph.state import Params

logger = get_logger(LogComponent.BATCH)

class BatchFlow(Flow):
    """Walks the graph once per parameter set, in order."""

    async def _prepare_batch(self, shared: Any) -> List[Params]:
        batch: Optional[Sequence[Params]] = await resolve(self.prep(shared))
        return [] if batch is None else list(batch)

    async def _run_lifecycle(self, shared: Any) -> Any:
        batch = await self._prepare_batch(shared)
        log_verbose(logger, f"{type(self).__name__}: running {len(batch)} parameter sets sequentially")
        for index, batch_params in enumerate(batch):
            log_verbose(logger, f"{type(self).__name__}: parameter set {index + 1}/{len(batch)}: {batch_params}")
            await self._orchestrate(shared, {**self.params, **batch_params})
        return await resolve(self.post(shared, batch, None))

class ParallelBatchFlow(BatchFlow):
    """Walks the graph for every parameter set concurrently.

    All runs finish before ``post``. If any run failed, the error of the first
    failed parameter set (by position) is raised and ``post`` is not called.
    """

    async def _run_lifecycle(self, shared: Any) -> Any:
        batch = await self._prepare_batch(shared)
        log_verbose(logger, f"{type(self).__name__}: dispatching {len(batch)} parameter sets concurrently")
        await gather_in_order(
            self._orchestrate(shared, {**self.params, **batch_params})
            for batch_params in batch
        )
        return await resolve(self.post(shared, batch, None))
