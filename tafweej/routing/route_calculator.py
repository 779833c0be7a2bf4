"""
Route Calculator

Walking routes between two sites with crowd-aware duration estimates.

A route is the single direct edge between start and destination. Its
congestion is the worse of the two endpoint density levels, which scales
the base walking speed:

    low 1.0, medium 0.8, high 0.6, critical 0.4  (x 4 km/h)

    duration_minutes = ceil(distance_km / effective_speed * 60)
"""

import math
from typing import Callable, Dict, List

from tafweej.errors import NoRouteError
from tafweej.models.density import DensityLevel
from tafweej.models.route import RouteResult
from tafweej.routing.distance_graph import DISTANCE_GRAPH, get_direct_distance


DEFAULT_WALKING_SPEED_KMH = 4.0

DEFAULT_SPEED_MULTIPLIERS = {
    'low': 1.0,
    'medium': 0.8,
    'high': 0.6,
    'critical': 0.4,
}

CONGESTED_LEVELS = (DensityLevel.HIGH, DensityLevel.CRITICAL)


class RouteCalculator:
    """
    Calculate routes between named sites

    Features:
    - Direct-edge lookup in the static distance graph
    - Congestion from the current density of both endpoints
    - Speed-adjusted duration
    - Human-readable directions with crowd warnings

    Usage:
        calculator = RouteCalculator(density_store.get_density_levels)
        route = calculator.route("Mina", "Jamaraat Bridge")
    """

    def __init__(
        self,
        density_source: Callable[[], Dict[str, DensityLevel]],
        config: dict = None,
        distance_graph: Dict[str, Dict[str, float]] = None,
    ):
        """
        Initialize calculator

        Args:
            density_source: Returns location name -> current density level
            config: Routing configuration section (config/routing.yaml)
            distance_graph: Override of the static distance table
        """
        if config is None:
            config = {}

        self.density_source = density_source
        self.walking_speed = float(config.get('walkingSpeedKmh', DEFAULT_WALKING_SPEED_KMH))
        self.speed_multipliers = {**DEFAULT_SPEED_MULTIPLIERS, **config.get('speedMultipliers', {})}
        self.distance_graph = DISTANCE_GRAPH if distance_graph is None else distance_graph

        # Statistics
        self.routes_calculated = 0
        self.routes_failed = 0

    def route(self, start: str, destination: str) -> RouteResult:
        """
        Route between two sites using current densities

        Raises:
            NoRouteError: the sites share no direct edge
        """
        if get_direct_distance(start, destination, self.distance_graph) is None:
            self.routes_failed += 1
            raise NoRouteError()

        return self.calculate(start, destination, self.density_source())

    def calculate(
        self,
        start: str,
        destination: str,
        density_levels: Dict[str, DensityLevel],
    ) -> RouteResult:
        """
        Route between two sites for the given density levels

        Locations missing from density_levels count as low.

        Raises:
            NoRouteError: the sites share no direct edge
        """
        distance = get_direct_distance(start, destination, self.distance_graph)
        if distance is None:
            self.routes_failed += 1
            raise NoRouteError()

        start_level = density_levels.get(start, DensityLevel.LOW)
        dest_level = density_levels.get(destination, DensityLevel.LOW)

        # Only the two endpoints are known points on a direct route
        congestion = DensityLevel.worst([start_level, dest_level])

        print(f"[ROUTE] {start} ({start_level.value}) -> {destination} ({dest_level.value}): "
              f"congestion {congestion.value}")

        duration = self.estimate_duration(distance, congestion)
        directions = self.build_directions(start, destination, start_level, dest_level, congestion)

        self.routes_calculated += 1

        return RouteResult(
            start=start,
            destination=destination,
            distance=f"{distance:.1f} km",
            duration=f"{duration} minutes",
            congestion_level=congestion,
            directions=directions,
            distance_km=distance,
            duration_minutes=duration,
        )

    def get_speed_multiplier(self, congestion: DensityLevel) -> float:
        """Walking speed factor for a congestion level"""
        return self.speed_multipliers.get(congestion.value, 1.0)

    def estimate_duration(self, distance_km: float, congestion: DensityLevel) -> int:
        """Walking time in whole minutes, rounded up"""
        speed = self.walking_speed * self.get_speed_multiplier(congestion)
        return math.ceil(distance_km / speed * 60)

    def build_directions(
        self,
        start: str,
        destination: str,
        start_level: DensityLevel,
        dest_level: DensityLevel,
        congestion: DensityLevel,
    ) -> List[str]:
        """
        Step list shown to the pilgrim

        Warning priority: critical start, critical destination,
        critical route, high route.
        """
        directions = [f"Start at {start}"]

        if start_level in CONGESTED_LEVELS or dest_level in CONGESTED_LEVELS:
            if start_level == DensityLevel.CRITICAL:
                directions.append(f"⚠️ Warning: Extremely high crowd density at your starting point ({start})")
            elif dest_level == DensityLevel.CRITICAL:
                directions.append(f"⚠️ Warning: Extremely high crowd density at your destination ({destination})")
            elif congestion == DensityLevel.CRITICAL:
                directions.append("⚠️ Warning: Extremely high crowd density on this route")
            else:
                directions.append("⚠️ Warning: High crowd density detected on this route")

            directions.append("Consider traveling during off-peak hours if possible")

        directions.append(f"Head toward {destination}")
        directions.extend(self._route_hints(start, destination, start_level, dest_level))
        directions.append(f"Arrive at {destination}")

        if congestion in CONGESTED_LEVELS:
            directions.append("Stay hydrated and follow crowd management officials' instructions")

        return directions

    def _route_hints(
        self,
        start: str,
        destination: str,
        start_level: DensityLevel,
        dest_level: DensityLevel,
    ) -> List[str]:
        """Canned guidance for the two busiest corridors"""
        if start == 'Mina' and destination == 'Jamaraat Bridge':
            hints = ['Take the designated pathway following the crowd management barriers']
            if dest_level in CONGESTED_LEVELS:
                hints.append("Follow signs for your camp's designated time slot to avoid peak congestion")
            return hints

        if start == 'Masjid al-Haram' and destination == 'Mina':
            hints = ['Exit through the King Fahd expansion gate']
            if start_level in CONGESTED_LEVELS:
                hints.append('Follow the covered walkway path to Mina')
                hints.append('Keep right at the main junction to avoid heavier crowds')
            else:
                hints.append('Follow the main path to Mina')
            return hints

        return []

    def get_stats(self) -> dict:
        """Get calculator statistics"""
        return {
            'routesCalculated': self.routes_calculated,
            'routesFailed': self.routes_failed,
            'walkingSpeedKmh': self.walking_speed,
            'edges': sum(len(v) for v in self.distance_graph.values()) // 2,
        }
