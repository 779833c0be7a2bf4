"""
Map Layers

GeoJSON and marker data for the dashboard map widget. The widget itself
is a black box: it receives points and lines and renders them.
"""

from typing import List

from tafweej.density.locations import get_base_coordinates
from tafweej.models.density import DensityLevel
from tafweej.models.route import RouteResult


COLOR_MAP = {
    DensityLevel.LOW: '#10B981',       # Green
    DensityLevel.MEDIUM: '#F59E0B',    # Yellow
    DensityLevel.HIGH: '#F97316',      # Orange
    DensityLevel.CRITICAL: '#EF4444',  # Red
}

HEATMAP_WEIGHTS = {
    DensityLevel.LOW: 1,
    DensityLevel.MEDIUM: 2,
    DensityLevel.HIGH: 3,
    DensityLevel.CRITICAL: 4,
}


def get_color_for_level(level) -> str:
    """Marker/line colour for a density level"""
    return COLOR_MAP[DensityLevel.parse(level, DensityLevel.LOW)]


def _point(coordinates: dict) -> dict:
    return {
        'type': 'Point',
        'coordinates': [coordinates['lng'], coordinates['lat']],
    }


def build_markers(readings: List[dict]) -> List[dict]:
    """One colour-coded marker per location"""
    markers = []
    for reading in readings:
        level = DensityLevel.parse(reading.get('density_level'), DensityLevel.LOW)
        markers.append({
            'location_name': reading['location_name'],
            'coordinates': reading['coordinates'],
            'density_level': level.value,
            'color': get_color_for_level(level),
            'crowd_size': reading.get('crowd_size'),
            'occupancy_percentage': reading.get('occupancy_percentage'),
        })
    return markers


def build_heatmap(readings: List[dict]) -> dict:
    """
    Heatmap source data

    FeatureCollection of points weighted 1 (low) to 4 (critical).
    """
    features = []
    for reading in readings:
        level = DensityLevel.parse(reading.get('density_level'), DensityLevel.LOW)
        features.append({
            'type': 'Feature',
            'properties': {
                'location_name': reading['location_name'],
                'density': HEATMAP_WEIGHTS[level],
            },
            'geometry': _point(reading['coordinates']),
        })

    return {
        'type': 'FeatureCollection',
        'features': features,
    }


def build_route_layer(route: RouteResult) -> dict:
    """
    Route line between the two sites' base points

    LineString feature coloured by the route's congestion level.
    """
    start = get_base_coordinates(route.start)
    end = get_base_coordinates(route.destination)

    return {
        'type': 'Feature',
        'properties': {
            'congestion': route.congestion_level.value,
            'color': get_color_for_level(route.congestion_level),
            'distance': route.distance,
            'duration': route.duration,
        },
        'geometry': {
            'type': 'LineString',
            'coordinates': [[start.lng, start.lat], [end.lng, end.lat]],
        },
    }
