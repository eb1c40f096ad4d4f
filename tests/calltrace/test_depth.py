"""
Tests for call depth tracking.
"""

import asyncio
import threading

import pytest

from calltrace.depth import current_depth, nested


@pytest.mark.unit
class TestNested:
    """Test entering and leaving depth levels."""

    def test_starts_at_zero(self):
        assert current_depth() == 0

    def test_nested_levels(self):
        with nested() as outer:
            assert outer == 1
            with nested() as inner:
                assert inner == 2
                assert current_depth() == 2
            assert current_depth() == 1
        assert current_depth() == 0

    def test_restored_after_exception(self):
        with pytest.raises(RuntimeError):
            with nested():
                with nested():
                    raise RuntimeError("boom")
        assert current_depth() == 0

    def test_threads_have_own_depth(self):
        seen = []

        def worker():
            seen.append(current_depth())

        with nested():
            thread = threading.Thread(target=worker)
            thread.start()
            thread.join()
        assert seen == [0]

    def test_tasks_have_own_depth(self):
        async def leaf():
            with nested() as depth:
                await asyncio.sleep(0)
                return depth

        async def main():
            return await asyncio.gather(leaf(), leaf())

        assert asyncio.run(main()) == [1, 1]
