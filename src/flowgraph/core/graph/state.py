"""Shared types for the graph system.

This module provides:
1. DEFAULT_ACTION: The label followed when a node's post phase returns nothing
2. Params / Action: Aliases used across node and flow signatures
3. RetryPolicy: A validated description of a node's retry behaviour

Shared storage itself has no type here: it is whatever
mapping or object the caller hands to ``run`` and is passed by reference to
every lifecycle hook.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field

DEFAULT_ACTION = "default"

Params = Dict[str, Any]
Action = Optional[str]

class RetryPolicy(BaseModel):
    """Retry policy applied around a node's exec phase.

    Attributes:
        max_retries: Total number of exec attempts (1 means no retry)
        wait: Seconds to sleep between a failed attempt and the next one
    """
    model_config = ConfigDict(frozen=True)

    max_retries: int = Field(default=1, ge=1)
    wait: float = Field(default=0, ge=0)

    @property
    def retries(self) -> int:
        """Number of attempts made after the first one."""
        return self.max_retries - 1
