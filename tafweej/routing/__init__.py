"""
Routing Module

Direct walking routes between the primary sites with crowd-aware timing.
"""

from tafweej.routing.distance_graph import (
    DISTANCE_GRAPH,
    get_direct_distance,
    list_edges,
)
from tafweej.routing.route_calculator import RouteCalculator

__all__ = [
    'DISTANCE_GRAPH',
    'get_direct_distance',
    'list_edges',
    'RouteCalculator',
]
