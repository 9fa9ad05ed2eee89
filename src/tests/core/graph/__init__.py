"""Test suite for the Flowgraph graph system.

This package contains tests for the node/flow workflow system, organized into
the following structure:

1. Flow Tests (test_base.py)
   - Traversal and termination
   - Params propagation
   - Nested flows
   - Error propagation

2. Batch Flow Tests (test_batch.py)
   - Sequential batch flows
   - Parallel batch flows

3. Node Tests (nodes/)
   - Lifecycle, successors and warnings
   - Retry, wait and fallback
   - Batch and parallel batch nodes

4. Shared Types and Helpers (test_state.py, test_execution.py)
"""
