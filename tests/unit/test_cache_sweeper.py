"""Unit tests for the background cache sweeper."""

import asyncio
import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from askdad.cache.store import AnswerCache
from askdad.cache.sweeper import CacheSweeper


class TestCacheSweeper:
    """Test sweeper lifecycle and loop behavior."""

    def test_interval_must_be_positive(self, cache: AnswerCache) -> None:
        """Test that a non-positive interval is rejected."""
        with pytest.raises(ValueError, match="interval must be positive"):
            CacheSweeper(cache, interval=0)

    @pytest.mark.asyncio
    async def test_sweeps_expired_entries_periodically(
        self, cache: AnswerCache, clock
    ) -> None:
        """Test that the running sweeper evicts entries once they expire."""
        token = cache.store("answer")
        clock.advance(minutes=10)

        sweeper = CacheSweeper(cache, interval=0.01)
        sweeper.start()
        try:
            for _ in range(100):
                if token not in cache:
                    break
                await asyncio.sleep(0.01)
        finally:
            await sweeper.stop()

        assert token not in cache

    @pytest.mark.asyncio
    async def test_start_and_stop_lifecycle(self, cache: AnswerCache) -> None:
        """Test running flag across start/stop, and that stop is idempotent."""
        sweeper = CacheSweeper(cache, interval=60)
        assert not sweeper.running

        sweeper.start()
        assert sweeper.running

        await sweeper.stop()
        assert not sweeper.running

        await sweeper.stop()
        assert not sweeper.running

    @pytest.mark.asyncio
    async def test_start_twice_keeps_single_task(self, cache: AnswerCache) -> None:
        """Test that a second start does not spawn a second loop."""
        sweeper = CacheSweeper(cache, interval=60)
        sweeper.start()
        task = sweeper._task

        sweeper.start()
        try:
            assert sweeper._task is task
        finally:
            await sweeper.stop()

    @pytest.mark.asyncio
    async def test_failing_sweep_does_not_stop_loop(self) -> None:
        """Test that an exception in sweep is logged and the loop continues."""
        cache = MagicMock()
        cache.sweep.side_effect = [RuntimeError("boom"), 0, 0, 0, 0, 0, 0, 0]

        sweeper = CacheSweeper(cache, interval=0.01)
        sweeper.start()
        try:
            for _ in range(100):
                if cache.sweep.call_count >= 3:
                    break
                await asyncio.sleep(0.01)
            assert sweeper.running
        finally:
            await sweeper.stop()

        assert cache.sweep.call_count >= 3
