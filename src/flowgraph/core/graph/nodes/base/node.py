"""Base node classes for the graph system.

This module defines the node abstraction for the Flow framework. A node is an
individual unit of work with a three-phase lifecycle:

    prep(shared)                      -> read what the node needs from shared storage
    exec(prep_res)                    -> do the work (retried on failure)
    post(shared, prep_res, exec_res)  -> write results back, return an action label

Nodes are pydantic models, so configuration declared on a subclass is validated
on construction. Transitions to other nodes are registered with ``next`` (or the
``>>`` / ``- "label" >>`` operators) and followed only by a Flow.

Typical Usage:
    ```python
    class Summarize(Node):
        async def prep(self, shared):
            return shared["text"]

        async def exec(self, text):
            return text[:100]

        async def post(self, shared, prep_res, exec_res):
            shared["summary"] = exec_res
            return "done"

    summarize = Summarize(max_retries=3, wait=0.5)
    summarize - "done" >> Publish()
    ```
"""

import asyncio
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field

from flowgraph.core.logging import get_logger, log_verbose, LogComponent
from flowgraph.core.graph.state import DEFAULT_ACTION, Action, Params, RetryPolicy
from flowgraph.core.graph.execution import current_retry, resolve

# Get logger for node operations
logger = get_logger(LogComponent.NODES)

class BaseNode(BaseModel):
    """
    Graph vertex with a prep/exec/post lifecycle.

    Attributes:
        params: Parameters assigned by the orchestrating flow before each run
        successors: Mapping of action labels to the next node
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    params: Params = Field(default_factory=dict)
    successors: Dict[str, "BaseNode"] = Field(
        default_factory=dict, repr=False, exclude=True
    )

    def set_params(self, params: Params) -> None:
        """Replace this node's params wholesale."""
        self.params = params

    def next(self, node: "BaseNode", action: str = DEFAULT_ACTION) -> "BaseNode":
        """Register ``node`` as the successor for ``action``.

        Args:
            node: Node to transition to
            action: Label returned by ``post`` that selects this edge

        Returns:
            ``node``, so calls can be chained
        """
        if not isinstance(node, BaseNode):
            raise TypeError(f"Successor must be a node, got {type(node).__name__}")
        if action in self.successors:
            logger.warning(f"Overwriting successor for action '{action}' on {type(self).__name__}")
        self.successors[action] = node
        return node

    def on(self, action: str, node: "BaseNode") -> "BaseNode":
        """Same as ``next`` with the label first."""
        return self.next(node, action)

    async def prep(self, shared: Any) -> Any:
        return None

    async def exec(self, prep_res: Any) -> Any:
        return None

    async def post(self, shared: Any, prep_res: Any, exec_res: Any) -> Action:
        return None

    async def _exec(self, prep_res: Any) -> Any:
        return await resolve(self.exec(prep_res))

    async def _run(self, shared: Any) -> Any:
        prep_res = await resolve(self.prep(shared))
        exec_res = await self._exec(prep_res)
        return await resolve(self.post(shared, prep_res, exec_res))

    async def run(self, shared: Any) -> Any:
        """Run this node's lifecycle once, without following successors.

        Args:
            shared: Shared storage, passed by reference to every hook

        Returns:
            Whatever ``post`` returns
        """
        if self.successors:
            logger.warning(f"{type(self).__name__} won't run successors. Use Flow.")
        return await self._run(shared)

    def __rshift__(self, other: "BaseNode") -> "BaseNode":
        return self.next(other)

    def __sub__(self, action: str) -> "_ConditionalTransition":
        if isinstance(action, str):
            return _ConditionalTransition(self, action)
        raise TypeError("Action must be a string")

class _ConditionalTransition:
    """Left half of ``node - "label" >> other``."""

    def __init__(self, src: BaseNode, action: str):
        self.src = src
        self.action = action

    def __rshift__(self, target: BaseNode) -> BaseNode:
        return self.src.next(target, self.action)

class Node(BaseNode):
    """
    Node with bounded retry and a fallback around ``exec``.

    ``exec`` is attempted up to ``max_retries`` times, sleeping ``wait`` seconds
    between attempts. When the last attempt fails, ``exec_fallback`` decides the
    result; by default it re-raises the error.

    Attributes:
        max_retries: Total number of exec attempts, at least 1
        wait: Seconds to sleep between attempts
    """
    max_retries: int = Field(default=1, ge=1, frozen=True)
    wait: float = Field(default=0, ge=0, frozen=True)

    @property
    def cur_retry(self) -> int:
        """Index of the exec attempt in progress (0 for the first attempt)."""
        return current_retry.get()

    @property
    def retry_policy(self) -> RetryPolicy:
        """Policy the exec attempt loop follows. Override to compute it per node."""
        return RetryPolicy(max_retries=self.max_retries, wait=self.wait)

    async def exec_fallback(self, prep_res: Any, exc: Exception) -> Any:
        """Produce a result after every attempt failed. Re-raises by default."""
        raise exc

    async def _exec(self, prep_res: Any) -> Any:
        policy = self.retry_policy
        token = current_retry.set(0)
        try:
            for attempt in range(policy.max_retries):
                current_retry.set(attempt)
                try:
                    return await resolve(self.exec(prep_res))
                except Exception as e:
                    if attempt == policy.retries:
                        logger.debug(
                            f"{type(self).__name__}: all {policy.max_retries} attempts failed, "
                            f"using fallback: {e!r}"
                        )
                        return await resolve(self.exec_fallback(prep_res, e))
                    log_verbose(
                        logger,
                        f"{type(self).__name__}: attempt {attempt + 1}/{policy.max_retries} failed: {e!r}"
                    )
                    if policy.wait > 0:
                        await asyncio.sleep(policy.wait)
        finally:
            current_retry.reset(token)
