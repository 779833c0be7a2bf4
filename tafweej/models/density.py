"""
Density Models

Crowd density levels, readings and manual-entry requests.
"""

from enum import Enum
from typing import Iterable, List, Optional

from pydantic import BaseModel, Field


class DensityLevel(str, Enum):
    """Crowd density classification, ordered low < medium < high < critical"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _LEVEL_ORDER.index(self)

    @classmethod
    def parse(cls, value, default: "DensityLevel" = None) -> "DensityLevel":
        """Parse a level name, falling back to default for unknown values"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            if default is not None:
                return default
            raise

    @classmethod
    def worst(cls, levels: Iterable["DensityLevel"]) -> "DensityLevel":
        """Highest level of the given ones (LOW for an empty input)"""
        return max(levels, key=lambda level: level.rank, default=cls.LOW)


_LEVEL_ORDER = [DensityLevel.LOW, DensityLevel.MEDIUM, DensityLevel.HIGH, DensityLevel.CRITICAL]


class Coordinates(BaseModel):
    """Geographic point (WGS84)"""
    lng: float
    lat: float


class SectionReading(BaseModel):
    """Density of one named sub-area of a location"""
    id: str
    name: str
    density: float
    density_level: DensityLevel
    crowd_size: int


class DensityReading(BaseModel):
    """
    Computed crowd density for one location

    Produced by the crowd model; persisted as a CrowdDensityRecord row.
    """
    location_name: str
    coordinates: Coordinates
    density: float                        # people per square meter
    density_level: DensityLevel
    crowd_size: int
    capacity: int
    occupancy_percentage: float           # crowd vs capacity, one decimal
    sections: List[SectionReading] = Field(default_factory=list)
    timestamp: str                        # ISO 8601, UTC

    def to_record_fields(self) -> dict:
        """Column values for the crowd_density table"""
        return {
            'location_name': self.location_name,
            'coordinates': self.coordinates.model_dump(),
            'density_level': self.density_level.value,
            'crowd_size': self.crowd_size,
            'occupancy_percentage': self.occupancy_percentage,
            'meta_data': {
                'density': self.density,
                'capacity': self.capacity,
                'sections': [s.model_dump(mode='json') for s in self.sections],
            },
        }

    class Config:
        json_schema_extra = {
            "example": {
                "location_name": "Mina",
                "coordinates": {"lng": 39.892966, "lat": 21.413249},
                "density": 0.78,
                "density_level": "medium",
                "crowd_size": 633600,
                "capacity": 1200000,
                "occupancy_percentage": 52.8,
                "sections": [],
                "timestamp": "2026-06-14T09:30:00+00:00"
            }
        }


class DensityUpdateRequest(BaseModel):
    """
    Body of POST /api/crowd-density

    Either {"recalculate": true} or a manual reading. Fields are optional
    here so the endpoint can answer missing ones with its own 400 message.
    """
    recalculate: bool = False

    location_name: Optional[str] = None
    coordinates: Optional[Coordinates] = None
    density_level: Optional[DensityLevel] = None
    crowd_size: Optional[int] = None
    occupancy_percentage: Optional[float] = None
    meta_data: Optional[dict] = None

    def missing_fields(self) -> List[str]:
        """Required manual-entry fields that are absent or empty"""
        required = {
            'location_name': self.location_name,
            'coordinates': self.coordinates,
            'density_level': self.density_level,
        }
        return [name for name, value in required.items() if not value]
