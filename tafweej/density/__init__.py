"""
Density Module

Crowd density simulation and storage for the monitored pilgrimage sites.

This module provides:
- Static location catalogue (area, capacity, sections, base point)
- Crowd density model driven by time of day and demo rules
- Density store with staleness checks and direct-computation fallback

Usage:
    from tafweej.density import CrowdDensityModel, DensityStore

    store = DensityStore(client, CrowdDensityModel())
    readings = store.get_current()
"""

from tafweej.density.locations import (
    LocationSection,
    LocationProfile,
    LOCATION_PROFILES,
    LOCATIONS_BY_NAME,
    get_base_coordinates,
)

from tafweej.density.crowd_model import (
    CrowdDensityModel,
    classify_density,
)

from tafweej.density.density_store import DensityStore


__all__ = [
    'LocationSection',
    'LocationProfile',
    'LOCATION_PROFILES',
    'LOCATIONS_BY_NAME',
    'get_base_coordinates',
    'CrowdDensityModel',
    'classify_density',
    'DensityStore',
]
