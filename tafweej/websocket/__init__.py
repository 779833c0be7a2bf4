"""
WebSocket Package

Real-time dashboard updates over Socket.IO.

Components:
- events: Event names and payload models
- emitter: Server→Client event emission
- handlers: Client→Server event handling

Usage:
    from tafweej.websocket import CrowdEmitter, CrowdSocketHandlers

    emitter = CrowdEmitter(sio)
    handlers = CrowdSocketHandlers(sio, emitter, refresh_service)
"""

from .events import ServerEvent, ClientEvent
from .emitter import CrowdEmitter
from .handlers import CrowdSocketHandlers

__all__ = [
    "ServerEvent",
    "ClientEvent",
    "CrowdEmitter",
    "CrowdSocketHandlers",
]
