"""
Pydantic Models Package

All data models for the crowd monitor.
Import from here for convenience.
"""

# Density models
from .density import (
    DensityLevel,
    Coordinates,
    SectionReading,
    DensityReading,
    DensityUpdateRequest,
)

# Route models
from .route import RouteResult

# Alert models
from .alert import (
    AlertSeverity,
    SEVERITY_RANK,
    SafetyAlertCreate,
)

__all__ = [
    "DensityLevel",
    "Coordinates",
    "SectionReading",
    "DensityReading",
    "DensityUpdateRequest",
    "RouteResult",
    "AlertSeverity",
    "SEVERITY_RANK",
    "SafetyAlertCreate",
]
