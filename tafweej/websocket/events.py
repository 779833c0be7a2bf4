"""
Socket.IO Event Type Definitions

Events are categorized as:
- Server → Client: density pushes and alert changes
- Client → Server: dashboard requests
"""

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


# ============================================
# Event Name Constants
# ============================================

class ServerEvent(str, Enum):
    """Events emitted from server to client"""

    CONNECTION_SUCCESS = "connection:success"

    # Crowd density
    DENSITY_UPDATE = "density:update"

    # Safety alerts
    ALERT_CREATED = "alert:created"
    ALERT_DELETED = "alert:deleted"


class ClientEvent(str, Enum):
    """Events received from client"""

    CONNECT = "connect"
    DISCONNECT = "disconnect"

    # Ask for an immediate density push
    DENSITY_REFRESH = "density:refresh"


# ============================================
# Server → Client Payloads
# ============================================

class ConnectionSuccessData(BaseModel):
    message: str = "Connected to Tafweej Crowd Monitor"
    timestamp: float
    serverVersion: str


class DensityUpdateData(BaseModel):
    """density:update payload"""
    timestamp: float
    readings: List[Dict[str, Any]] = Field(default_factory=list)
    insights: Dict[str, Any] = Field(default_factory=dict)


class AlertCreatedData(BaseModel):
    """alert:created payload"""
    timestamp: float
    alert: Dict[str, Any]


class AlertDeletedData(BaseModel):
    """alert:deleted payload"""
    timestamp: float
    alertId: int


# ============================================
# Client → Server Requests
# ============================================

class DensityRefreshRequest(BaseModel):
    """density:refresh request; force bypasses the staleness window"""
    force: Optional[bool] = False
