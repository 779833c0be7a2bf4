"""
Density Refresh Service

Background task that pushes current crowd densities to connected
dashboards.

Broadcast frequency:
- density:update every 30 seconds (dashboard.refreshIntervalSeconds)
- density:update immediately on a client density:refresh request

The task only runs while at least one dashboard is connected; the
Socket.IO handlers start it on the first connection and stop it on the
last disconnect.
"""

import asyncio
import time
from typing import Optional, TYPE_CHECKING

from tafweej.dashboard.insights import CrowdInsights

if TYPE_CHECKING:
    from tafweej.density.density_store import DensityStore
    from tafweej.websocket.emitter import CrowdEmitter


DEFAULT_REFRESH_INTERVAL = 30.0


class DensityRefreshService:
    """
    Scheduled density broadcaster

    Usage:
        service = DensityRefreshService(density_store, emitter)
        await service.start()
        # ... later ...
        await service.stop()
    """

    def __init__(self,
                 density_store: 'DensityStore',
                 emitter: 'CrowdEmitter' = None,
                 refresh_interval: float = DEFAULT_REFRESH_INTERVAL):
        """
        Initialize the refresh service

        Args:
            density_store: Source of current readings
            emitter: Socket.IO emitter (nothing is sent while unset)
            refresh_interval: Seconds between broadcasts
        """
        self.density_store = density_store
        self.emitter = emitter
        self.refresh_interval = refresh_interval

        self._running = False
        self._task: Optional[asyncio.Task] = None

        # Statistics
        self.total_refreshes = 0
        self.total_errors = 0
        self.last_refresh_time = 0

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self):
        """Start the background refresh task"""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._refresh_loop())
        print(f"[OK] Density refresh service started (every {self.refresh_interval:g}s)")

    async def stop(self):
        """Stop the background refresh task"""
        if not self._running and self._task is None:
            return

        self._running = False

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        print("[OK] Density refresh service stopped")

    async def _refresh_loop(self):
        """Main refresh loop"""
        while self._running:
            try:
                await asyncio.sleep(self.refresh_interval)
                await self.refresh_now()
            except asyncio.CancelledError:
                break
            except Exception as e:
                self.total_errors += 1
                print(f"[ERROR] Density refresh error: {e}")

    async def refresh_now(self, room: str = None, force: bool = False) -> dict:
        """
        Read current densities and broadcast them

        Args:
            room: Optional Socket.IO room (default: all clients)
            force: Recompute even when stored readings are fresh

        Returns:
            The emitted payload
        """
        readings = await asyncio.to_thread(self.density_store.get_current, force=force)
        insights = CrowdInsights.calculate(readings)

        payload = {
            'timestamp': time.time(),
            'readings': readings,
            'insights': insights.to_dict(),
        }

        if self.emitter:
            await self.emitter.emit_density_update(payload, room=room)

        self.total_refreshes += 1
        self.last_refresh_time = payload['timestamp']
        return payload

    def get_statistics(self) -> dict:
        """Get refresh statistics"""
        return {
            'running': self._running,
            'refreshInterval': self.refresh_interval,
            'totalRefreshes': self.total_refreshes,
            'totalErrors': self.total_errors,
            'lastRefreshTime': self.last_refresh_time,
        }
