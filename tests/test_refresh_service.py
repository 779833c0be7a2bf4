"""
Density Refresh Service Tests

Tests for the scheduled density push:
- Single refresh payload
- Start/stop lifecycle
- Error tolerance of the loop
"""

import asyncio
import threading

import pytest
from unittest.mock import AsyncMock, MagicMock

from tafweej.dashboard import DensityRefreshService


READINGS = [
    {"location_name": "Mina", "density_level": "critical", "crowd_size": 900000, "occupancy_percentage": 75.0},
    {"location_name": "Arafat", "density_level": "low", "crowd_size": 100000, "occupancy_percentage": 4.0},
]


@pytest.fixture
def density_store():
    store = MagicMock()
    store.get_current.return_value = READINGS
    return store


@pytest.fixture
def emitter():
    mock = MagicMock()
    mock.emit_density_update = AsyncMock()
    return mock


class TestRefreshNow:
    """Test one refresh"""

    @pytest.mark.asyncio
    async def test_payload(self, density_store, emitter):
        service = DensityRefreshService(density_store, emitter)

        payload = await service.refresh_now()

        assert payload['readings'] == READINGS
        assert payload['insights']['totalPilgrims'] == 1000000
        assert payload['insights']['criticalAreas'] == ["Mina"]
        emitter.emit_density_update.assert_awaited_once_with(payload, room=None)
        density_store.get_current.assert_called_once_with(force=False)
        assert service.total_refreshes == 1

    @pytest.mark.asyncio
    async def test_targeted_forced_refresh(self, density_store, emitter):
        service = DensityRefreshService(density_store, emitter)

        await service.refresh_now(room="sid-1", force=True)

        density_store.get_current.assert_called_once_with(force=True)
        assert emitter.emit_density_update.await_args.kwargs == {"room": "sid-1"}

    @pytest.mark.asyncio
    async def test_store_read_runs_in_worker_thread(self, density_store, emitter):
        loop_thread = threading.get_ident()
        seen = []

        def read(force=False):
            seen.append(threading.get_ident())
            return READINGS

        density_store.get_current.side_effect = read
        service = DensityRefreshService(density_store, emitter)

        await service.refresh_now()

        assert seen and seen[0] != loop_thread

    @pytest.mark.asyncio
    async def test_without_emitter(self, density_store):
        service = DensityRefreshService(density_store)
        payload = await service.refresh_now()
        assert payload['readings'] == READINGS


class TestLifecycle:
    """Test start/stop of the background task"""

    @pytest.mark.asyncio
    async def test_start_and_stop(self, density_store, emitter):
        service = DensityRefreshService(density_store, emitter, refresh_interval=0.01)

        await service.start()
        assert service.is_running
        await asyncio.sleep(0.1)
        await service.stop()

        assert not service.is_running
        assert service._task is None
        assert service.total_refreshes >= 1
        assert emitter.emit_density_update.await_count == service.total_refreshes

    @pytest.mark.asyncio
    async def test_start_twice_keeps_one_task(self, density_store, emitter):
        service = DensityRefreshService(density_store, emitter, refresh_interval=10)

        await service.start()
        task = service._task
        await service.start()

        assert service._task is task
        await service.stop()

    @pytest.mark.asyncio
    async def test_first_push_waits_one_interval(self, density_store, emitter):
        service = DensityRefreshService(density_store, emitter, refresh_interval=10)

        await service.start()
        await asyncio.sleep(0.05)
        await service.stop()

        assert service.total_refreshes == 0

    @pytest.mark.asyncio
    async def test_stop_without_start(self, density_store):
        service = DensityRefreshService(density_store)
        await service.stop()
        assert not service.is_running

    @pytest.mark.asyncio
    async def test_errors_do_not_end_loop(self, density_store, emitter):
        calls = {"count": 0}

        def flaky():
            calls["count"] += 1
            if calls["count"] == 1:
                raise RuntimeError("store unavailable")
            return READINGS

        density_store.get_current.side_effect = lambda force=False: flaky()
        service = DensityRefreshService(density_store, emitter, refresh_interval=0.01)

        await service.start()
        await asyncio.sleep(0.1)
        await service.stop()

        stats = service.get_statistics()
        assert stats['totalErrors'] == 1
        assert stats['totalRefreshes'] >= 1
        assert stats['running'] is False
