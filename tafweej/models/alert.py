"""
Safety Alert Models

Operator-posted alerts shown on the dashboard until they expire.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from .density import Coordinates


class AlertSeverity(str, Enum):
    """Alert severity, ordered low < medium < high < critical"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# Rank used when ordering alerts, highest first
SEVERITY_RANK = {
    AlertSeverity.LOW.value: 0,
    AlertSeverity.MEDIUM.value: 1,
    AlertSeverity.HIGH.value: 2,
    AlertSeverity.CRITICAL.value: 3,
}


class SafetyAlertCreate(BaseModel):
    """
    Request to post a safety alert

    Every field is required; they are optional in the model so the
    alert store can report all missing ones at once.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    location_name: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    severity: Optional[AlertSeverity] = None
    expires_at: Optional[datetime] = None

    def missing_fields(self) -> List[str]:
        """Names of required fields that are absent or empty"""
        return [
            name for name in (
                'title', 'description', 'location_name',
                'coordinates', 'severity', 'expires_at',
            )
            if not getattr(self, name)
        ]

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Heavy congestion at Jamarat",
                "description": "Use the upper level access ramps until 16:00",
                "location_name": "Jamaraat Bridge",
                "coordinates": {"lng": 39.873485, "lat": 21.42365},
                "severity": "high",
                "expires_at": "2026-06-14T16:00:00+03:00"
            }
        }

