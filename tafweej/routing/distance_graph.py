"""
Distance Graph

Hand-authored walking distances (km) between the primary sites.
Symmetric; only direct edges are listed. Masjid al-Haram and Arafat share
no direct edge, and the secondary sites (gates, tent sections, access
corridors) are not routable.
"""

from typing import Dict, List, Optional, Tuple


DISTANCE_GRAPH: Dict[str, Dict[str, float]] = {
    'Masjid al-Haram': {
        'Mina': 6.2,
        'Muzdalifah': 12.8,
        'Jamaraat Bridge': 7.1,
    },
    'Mina': {
        'Masjid al-Haram': 6.2,
        'Arafat': 14.3,
        'Muzdalifah': 3.5,
        'Jamaraat Bridge': 1.8,
    },
    'Arafat': {
        'Mina': 14.3,
        'Muzdalifah': 8.2,
        'Jamaraat Bridge': 16.1,
    },
    'Muzdalifah': {
        'Masjid al-Haram': 12.8,
        'Mina': 3.5,
        'Arafat': 8.2,
        'Jamaraat Bridge': 5.3,
    },
    'Jamaraat Bridge': {
        'Masjid al-Haram': 7.1,
        'Mina': 1.8,
        'Arafat': 16.1,
        'Muzdalifah': 5.3,
    },
}


def get_direct_distance(start: str, destination: str, graph: Dict[str, Dict[str, float]] = None) -> Optional[float]:
    """Distance of the direct edge, None when there is none"""
    graph = DISTANCE_GRAPH if graph is None else graph
    distance = graph.get(start, {}).get(destination)
    if not distance:
        return None
    return distance


def list_edges(graph: Dict[str, Dict[str, float]] = None) -> List[Tuple[str, str, float]]:
    """Each undirected edge once, as (a, b, km) with a < b"""
    graph = DISTANCE_GRAPH if graph is None else graph
    return sorted(
        (a, b, km)
        for a, neighbours in graph.items()
        for b, km in neighbours.items()
        if a < b
    )
