"""
Dashboard Module

Summary figures, map layers and the scheduled density push that feed the
monitoring dashboard.
"""

from tafweej.dashboard.insights import CrowdInsights, DEFAULT_CROWD_BY_LEVEL
from tafweej.dashboard.map_layers import (
    COLOR_MAP,
    HEATMAP_WEIGHTS,
    get_color_for_level,
    build_markers,
    build_heatmap,
    build_route_layer,
)
from tafweej.dashboard.refresh_service import DensityRefreshService

__all__ = [
    'CrowdInsights',
    'DEFAULT_CROWD_BY_LEVEL',
    'COLOR_MAP',
    'HEATMAP_WEIGHTS',
    'get_color_for_level',
    'build_markers',
    'build_heatmap',
    'build_route_layer',
    'DensityRefreshService',
]
