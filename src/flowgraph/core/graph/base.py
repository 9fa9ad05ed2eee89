"""Flow Base Classes

This module defines the flow, the orchestrator that walks a graph of nodes.
A flow:
1. Starts at its start node
2. Runs the node's full lifecycle (prep -> exec with retries -> post)
3. Follows the successor registered for the action label ``post`` returned
4. Stops when no successor matches that label

A Flow is itself a node, so a flow can be wired into another flow and is run
like any other step.

Example:
    ```python
    load = LoadNode()
    check = CheckNode(max_retries=3, wait=1)
    report = ReportNode()

    load >> check
    check - "ok" >> report
    check - "retry" >> load

    flow = Flow(start=load)
    await flow.run(shared)
    ```
"""

from typing import Any, Optional

from pydantic import Field

from flowgraph.core.logging import (
    FlowLoggingConfig,
    LogComponent,
    get_logger,
    log_verbose,
)
from flowgraph.core.graph.execution import resolve
from flowgraph.core.graph.state import DEFAULT_ACTION, Action, Params
from flowgraph.core.graph.nodes.base.node import BaseNode

# Get logger for flow component
logger = get_logger(LogComponent.FLOW)

class Flow(BaseNode):
    """Orchestrates a graph of nodes, starting from ``start``.

    Every visited node is shallow-copied before it runs and the copy receives
    the flow's params, so the nodes the graph was built from are never touched
    by a run.

    Attributes:
        start: First node to run
        max_steps: Optional cap on node runs per traversal; None means no cap
        logging_config: Controls logging verbosity
    """
    start: Optional[BaseNode] = None
    max_steps: Optional[int] = Field(default=None, ge=1)
    logging_config: FlowLoggingConfig = Field(default_factory=FlowLoggingConfig)

    def __init__(self, start: Optional[BaseNode] = None, **data):
        super().__init__(start=start, **data)

    def start_with(self, node: BaseNode) -> BaseNode:
        """Set the start node and return it for chaining."""
        self.start = node
        return node

    def get_next_node(self, curr: BaseNode, action: Action) -> Optional[BaseNode]:
        """Look up the successor of ``curr`` for ``action``.

        Args:
            curr: Node that just finished
            action: Label returned by its post phase (None means "default")

        Returns:
            The successor, or None when the flow should stop
        """
        nxt = curr.successors.get(action or DEFAULT_ACTION)
        if nxt is None and curr.successors:
            logger.warning(
                f"Flow ends: action '{action or DEFAULT_ACTION}' not found in "
                f"{list(curr.successors)} of {type(curr).__name__}"
            )
        return nxt

    def _log_transition(self, curr: BaseNode, action: Action, nxt: Optional[BaseNode]) -> None:
        if nxt is not None:
            message = (
                f"Transitioning {type(curr).__name__} --[{action or DEFAULT_ACTION}]--> "
                f"{type(nxt).__name__}"
            )
        else:
            message = f"Reached terminal node: {type(curr).__name__}"

        if self.logging_config.show_node_transitions:
            logger.info(message)
        else:
            log_verbose(logger, message)

    async def _orchestrate(self, shared: Any, params: Optional[Params] = None) -> Action:
        """Walk the graph from ``start`` until no successor matches.

        Args:
            shared: Shared storage passed to every node
            params: Params for every node; defaults to a copy of the flow's params

        Returns:
            The action label returned by the last node
        """
        if self.start is None:
            raise ValueError(f"{type(self).__name__} has no start node")

        params = params if params is not None else {**self.params}
        curr: Optional[BaseNode] = self.start.model_copy()
        action: Action = None
        steps = 0

        while curr is not None:
            steps += 1
            if self.max_steps is not None and steps > self.max_steps:
                raise RuntimeError(
                    f"{type(self).__name__} exceeded max_steps={self.max_steps}"
                )
            curr.set_params(params)
            action = await curr._run(shared)
            nxt = self.get_next_node(curr, action)
            self._log_transition(curr, action, nxt)
            curr = nxt.model_copy() if nxt is not None else None

        return action

    async def _run(self, shared: Any) -> Any:
        previous_levels = self.logging_config.apply()
        try:
            return await self._run_lifecycle(shared)
        finally:
            self.logging_config.restore(previous_levels)

    async def _run_lifecycle(self, shared: Any) -> Any:
        logger.debug(f"Starting {type(self).__name__}")
        prep_res = await resolve(self.prep(shared))
        exec_res = await self._orchestrate(shared)
        return await resolve(self.post(shared, prep_res, exec_res))

    async def exec(self, prep_res: Any) -> Any:
        raise RuntimeError("Flow can't exec.")

    async def post(self, shared: Any, prep_res: Any, exec_res: Any) -> Any:
        """Return the last action of the traversal unless overridden."""
        return exec_res
