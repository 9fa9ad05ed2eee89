"""Tests for BatchFlow and ParallelBatchFlow.

This module tests:
- One full traversal per parameter set
- Merging batch params over the flow's own params
- Sequential vs concurrent runs
- Param isolation between concurrent runs
- Error propagation
"""

import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import pytest

from flowgraph.core.graph import BatchFlow, Flow, Node, ParallelBatchFlow
from flowgraph.core.logging import FlowLoggingConfig, LogComponent, LogLevel
from tests.conftest import AmbiguousSequence


class RecordParams(Node):
    """Writes ``value * multiplier`` under ``params["key"]``."""
    delay: float = 0.0

    async def prep(self, shared: Dict[str, Any]) -> Dict[str, Any]:
        return dict(self.params)

    async def exec(self, params: Dict[str, Any]) -> int:
        if self.delay:
            await asyncio.sleep(self.delay)
        return params.get("value", 0) * params.get("multiplier", 1)

    async def post(self, shared, prep_res, exec_res) -> Optional[str]:
        shared.setdefault("results", {})[prep_res["key"]] = exec_res
        shared.setdefault("order", []).append(prep_res["key"])
        return None


class KeyBatchFlow(BatchFlow):
    """Batch flow with one parameter set per key in ``shared["keys"]``."""

    async def prep(self, shared: Dict[str, Any]) -> List[Dict[str, Any]]:
        return [
            {"key": key, "value": value}
            for key, value in shared.get("keys", {}).items()
        ]

    async def post(self, shared, prep_res, exec_res) -> Optional[str]:
        shared["batch_post"] = (len(prep_res), exec_res)
        return "batched"


class ParallelKeyBatchFlow(ParallelBatchFlow, KeyBatchFlow):
    pass


class TestBatchFlow:
    """Test suite for sequential batch flows."""

    async def test_runs_once_per_param_set(self, shared):
        """Test one traversal per parameter set, in order."""
        shared["keys"] = {"a": 1, "b": 2, "c": 3}
        action = await KeyBatchFlow(RecordParams()).run(shared)
        assert shared["results"] == {"a": 1, "b": 2, "c": 3}
        assert shared["order"] == ["a", "b", "c"]
        assert shared["batch_post"] == (3, None)
        assert action == "batched"

    async def test_batch_params_merged_over_flow_params(self, shared):
        """Test merging batch params over the flow's base params."""
        shared["keys"] = {"x": 5, "y": 7}
        flow = KeyBatchFlow(RecordParams(), params={"multiplier": 10, "value": 99})
        await flow.run(shared)
        assert shared["results"] == {"x": 50, "y": 70}
        assert flow.params == {"multiplier": 10, "value": 99}

    async def test_sequential_runs_do_not_overlap(self, shared):
        """Test that each traversal finishes before the next starts."""
        shared["keys"] = {"a": 1, "b": 2, "c": 3}
        start = time.monotonic()
        await KeyBatchFlow(RecordParams(delay=0.05)).run(shared)
        assert time.monotonic() - start >= 0.15 - 0.005
        assert shared["order"] == ["a", "b", "c"]

    @pytest.mark.parametrize("batch", [None, []])
    async def test_empty_batch(self, shared, batch):
        """Test that an empty batch runs nothing but still calls post."""

        class EmptyBatchFlow(BatchFlow):
            async def prep(self, shared):
                return batch

            async def post(self, shared, prep_res, exec_res):
                shared["post"] = prep_res

        await EmptyBatchFlow(RecordParams()).run(shared)
        assert shared["post"] == []
        assert "results" not in shared

    @pytest.mark.parametrize("flow_class", [BatchFlow, ParallelBatchFlow])
    async def test_array_like_batch(self, shared, flow_class):
        """Test that parameter sets are iterated without testing their truth value."""

        class ArrayBatchFlow(flow_class):
            async def prep(self, shared):
                return AmbiguousSequence([{"key": "a", "value": 1}, {"key": "b", "value": 2}])

        await ArrayBatchFlow(RecordParams()).run(shared)
        assert shared["results"] == {"a": 1, "b": 2}

    async def test_logging_level_scoped_to_run(self, restore_logging, shared):
        """Test that a batch flow applies its logging level only while it runs."""
        batch_logger = logging.getLogger(LogComponent.BATCH.value)
        batch_logger.setLevel(logging.INFO)
        seen = []

        class LevelRecorder(Node):
            async def exec(self, prep_res):
                seen.append(batch_logger.level)

        shared["keys"] = {"a": 1, "b": 2}
        flow = KeyBatchFlow(
            LevelRecorder(),
            logging_config=FlowLoggingConfig(level=LogLevel.WARNING),
        )
        await flow.run(shared)
        assert seen == [logging.WARNING, logging.WARNING]
        assert batch_logger.level == logging.INFO

    async def test_multi_node_flow_per_param_set(self, shared):
        """Test that every parameter set walks the whole graph."""

        class Double(Node):
            async def post(self, shared, prep_res, exec_res):
                shared.setdefault("trace", []).append(("double", self.params["key"]))

        first = RecordParams()
        first >> Double()
        shared["keys"] = {"a": 1, "b": 2}
        await KeyBatchFlow(first).run(shared)
        assert shared["trace"] == [("double", "a"), ("double", "b")]

    async def test_error_stops_batch(self, shared):
        """Test that a failing parameter set stops the remaining ones."""

        class FailOnB(Node):
            async def exec(self, prep_res):
                if self.params["key"] == "b":
                    raise ValueError("bad key b")

            async def post(self, shared, prep_res, exec_res):
                shared.setdefault("order", []).append(self.params["key"])

        shared["keys"] = {"a": 1, "b": 2, "c": 3}
        with pytest.raises(ValueError, match="bad key b"):
            await KeyBatchFlow(FailOnB()).run(shared)
        assert shared["order"] == ["a"]
        assert "batch_post" not in shared

    async def test_batch_flow_nested_in_flow(self, shared):
        """Test a batch flow used as one step of a bigger flow."""

        class Finish(Node):
            async def post(self, shared, prep_res, exec_res):
                shared["finished"] = True

        batch = KeyBatchFlow(RecordParams())
        batch - "batched" >> Finish()
        shared["keys"] = {"a": 1}
        await Flow(batch).run(shared)
        assert shared["results"] == {"a": 1}
        assert shared["finished"] is True


class TestParallelBatchFlow:
    """Test suite for concurrent batch flows."""

    async def test_runs_concurrently(self, shared):
        """Test that parameter sets overlap instead of running in sequence."""
        shared["keys"] = {f"k{i}": i for i in range(5)}
        start = time.monotonic()
        await ParallelKeyBatchFlow(RecordParams(delay=0.1)).run(shared)
        assert time.monotonic() - start < 0.3
        assert shared["results"] == {f"k{i}": i for i in range(5)}

    async def test_params_isolated_between_runs(self, shared):
        """Test that concurrent runs never see each other's params."""
        seen = []

        class SlowEcho(Node):
            async def exec(self, prep_res):
                before = dict(self.params)
                await asyncio.sleep(0.02 * (3 - before["value"]))
                seen.append((before, dict(self.params)))

        class ThreeRuns(ParallelBatchFlow):
            async def prep(self, shared):
                return [{"value": i} for i in range(3)]

        await ThreeRuns(SlowEcho()).run(shared)
        assert len(seen) == 3
        assert all(before == after for before, after in seen)
        assert sorted(before["value"] for before, _ in seen) == [0, 1, 2]

    async def test_post_after_all_runs(self, shared):
        """Test that post only runs once every parameter set finished."""
        shared["keys"] = {"a": 1, "b": 2, "c": 3}
        await ParallelKeyBatchFlow(RecordParams(delay=0.01)).run(shared)
        assert shared["batch_post"] == (3, None)
        assert sorted(shared["order"]) == ["a", "b", "c"]

    async def test_first_failure_by_position(self, shared):
        """Test that all runs settle and the lowest-index failure is raised."""

        class FailSome(Node):
            async def exec(self, prep_res):
                value = self.params["value"]
                await asyncio.sleep(0.01 * (4 - value))
                if value in (1, 3):
                    raise ValueError(f"run {value} failed")
                shared.setdefault("done", []).append(value)

        class FourRuns(ParallelBatchFlow):
            async def prep(self, shared):
                return [{"value": i} for i in range(4)]

        with pytest.raises(ValueError, match="run 1 failed"):
            await FourRuns(FailSome()).run(shared)
        assert sorted(shared["done"]) == [0, 2]
