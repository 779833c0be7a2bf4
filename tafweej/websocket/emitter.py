"""
Socket.IO Event Emitter

All server→client events go through CrowdEmitter so that emission errors
are counted and logged in one place instead of failing the caller.
"""

import time
from typing import Any, Dict

from tafweej import __version__
from .events import (
    ServerEvent,
    ConnectionSuccessData,
    DensityUpdateData,
    AlertCreatedData,
    AlertDeletedData,
)


class CrowdEmitter:
    """
    Centralized Socket.IO event emitter

    Usage:
        emitter = CrowdEmitter(sio)
        await emitter.emit_alert_created(alert)
    """

    def __init__(self, sio):
        """
        Initialize the emitter

        Args:
            sio: Socket.IO AsyncServer instance
        """
        self.sio = sio

        # Statistics
        self._emit_count = 0
        self._error_count = 0
        self._last_emit_time = 0
        self._event_counts: Dict[str, int] = {}

    # ============================================
    # Connection Events
    # ============================================

    async def emit_connection_success(self, sid: str):
        """Emit connection success to a specific client"""
        data = ConnectionSuccessData(timestamp=time.time(), serverVersion=__version__)
        await self._emit(ServerEvent.CONNECTION_SUCCESS.value, data.model_dump(), room=sid)

    # ============================================
    # Density Events
    # ============================================

    async def emit_density_update(self, payload: Dict[str, Any], room: str = None):
        """
        Emit current densities

        Args:
            payload: {timestamp, readings, insights}
            room: Optional room to emit to (default: broadcast)
        """
        data = DensityUpdateData.model_validate(payload)
        await self._emit(ServerEvent.DENSITY_UPDATE.value, data.model_dump(), room)

    # ============================================
    # Alert Events
    # ============================================

    async def emit_alert_created(self, alert: Dict[str, Any]):
        """Broadcast a newly created safety alert"""
        data = AlertCreatedData(timestamp=time.time(), alert=alert)
        await self._emit(ServerEvent.ALERT_CREATED.value, data.model_dump())

    async def emit_alert_deleted(self, alert_id: int):
        """Broadcast removal of a safety alert"""
        data = AlertDeletedData(timestamp=time.time(), alertId=alert_id)
        await self._emit(ServerEvent.ALERT_DELETED.value, data.model_dump())

    # ============================================
    # Internal
    # ============================================

    async def _emit(self, event: str, data: Any, room: str = None):
        """
        Internal emit with error handling and statistics

        Args:
            event: Event name
            data: Event data
            room: Optional room to emit to
        """
        try:
            if room:
                await self.sio.emit(event, data, room=room)
            else:
                await self.sio.emit(event, data)

            self._emit_count += 1
            self._last_emit_time = time.time()
            self._event_counts[event] = self._event_counts.get(event, 0) + 1

        except Exception as e:
            self._error_count += 1
            print(f"[WS ERROR] Failed to emit {event}: {e}")

    def get_stats(self) -> Dict[str, Any]:
        """Get emitter statistics"""
        return {
            "totalEmits": self._emit_count,
            "errorCount": self._error_count,
            "lastEmitTime": self._last_emit_time,
            "eventCounts": dict(self._event_counts),
        }
