"""
Socket.IO Client Event Handlers

Tracks connected dashboards and ties the density refresh task to them:
the task is started when the first client connects and stopped when the
last one leaves.
"""

import time
from typing import Any, Dict, Optional, TYPE_CHECKING

from pydantic import ValidationError as PydanticValidationError

from .events import ClientEvent, DensityRefreshRequest
from .emitter import CrowdEmitter

if TYPE_CHECKING:
    from tafweej.dashboard.refresh_service import DensityRefreshService


class CrowdSocketHandlers:
    """
    Centralized Socket.IO event handlers

    Usage:
        handlers = CrowdSocketHandlers(sio, emitter, refresh_service)
    """

    def __init__(self, sio, emitter: CrowdEmitter,
                 refresh_service: Optional['DensityRefreshService'] = None):
        """
        Initialize handlers

        Args:
            sio: Socket.IO AsyncServer instance
            emitter: Socket.IO emitter instance
            refresh_service: Scheduled density push (None disables it)
        """
        self.sio = sio
        self.emitter = emitter
        self.refresh_service = refresh_service

        # Track connected clients
        self._clients: Dict[str, Dict[str, Any]] = {}

        self._register_handlers()

    def _register_handlers(self):
        """Register all Socket.IO event handlers"""
        self.sio.on(ClientEvent.CONNECT.value, self.handle_connect)
        self.sio.on(ClientEvent.DISCONNECT.value, self.handle_disconnect)
        self.sio.on(ClientEvent.DENSITY_REFRESH.value, self.handle_density_refresh)

    # ============================================
    # Connection Handlers
    # ============================================

    async def handle_connect(self, sid: str, environ: Dict, auth: Any = None):
        """
        Handle client connection

        Args:
            sid: Session ID
            environ: Connection environment
            auth: Optional auth payload sent by the client
        """
        self._clients[sid] = {
            "sid": sid,
            "connected_at": time.time(),
            "remote_addr": environ.get("REMOTE_ADDR", "unknown"),
        }

        print(f"[WS] Client connected: {sid} from {self._clients[sid]['remote_addr']}")

        await self.emitter.emit_connection_success(sid)

        if self.refresh_service and len(self._clients) == 1:
            await self.refresh_service.start()

    async def handle_disconnect(self, sid: str, *args):
        """
        Handle client disconnection

        Args:
            sid: Session ID
        """
        if sid in self._clients:
            client = self._clients.pop(sid)
            duration = time.time() - client["connected_at"]
            print(f"[WS] Client disconnected: {sid} (duration: {duration:.1f}s)")

        if self.refresh_service and not self._clients:
            await self.refresh_service.stop()

    # ============================================
    # Density Handlers
    # ============================================

    async def handle_density_refresh(self, sid: str, data: Dict = None):
        """
        Push current densities to the requesting client

        Args:
            sid: Session ID
            data: {force?: bool}
        """
        if not self.refresh_service:
            return

        try:
            request = DensityRefreshRequest.model_validate(data or {})
        except PydanticValidationError:
            request = DensityRefreshRequest()

        try:
            await self.refresh_service.refresh_now(room=sid, force=bool(request.force))
        except Exception as e:
            print(f"[ERROR] Density refresh for {sid} failed: {e}")

    # ============================================
    # Utilities
    # ============================================

    def get_client_count(self) -> int:
        """Get number of connected clients"""
        return len(self._clients)

    def is_client_connected(self, sid: str) -> bool:
        """Check if client is connected"""
        return sid in self._clients
