"""
Route Models

Walking route between two named sites, estimated from endpoint crowd density.
"""

from typing import List

from pydantic import BaseModel, Field

from .density import DensityLevel


class RouteResult(BaseModel):
    """
    Result of a route query

    Computed per request and never persisted. `distance` and `duration`
    are display strings; the numeric values ride along for clients that
    want to do their own formatting.
    """
    start: str
    destination: str
    distance: str                         # e.g. "1.8 km"
    duration: str                         # e.g. "27 minutes"
    congestion_level: DensityLevel
    directions: List[str] = Field(default_factory=list)

    distance_km: float
    duration_minutes: int

    class Config:
        json_schema_extra = {
            "example": {
                "start": "Mina",
                "destination": "Jamaraat Bridge",
                "distance": "1.8 km",
                "duration": "27 minutes",
                "congestion_level": "low",
                "directions": [
                    "Start at Mina",
                    "Head toward Jamaraat Bridge",
                    "Take the designated pathway following the crowd management barriers",
                    "Arrive at Jamaraat Bridge"
                ],
                "distance_km": 1.8,
                "duration_minutes": 27
            }
        }
