"""
Route Calculator Tests

Tests for:
- Distance graph lookups
- Congestion and duration estimates
- Directions and warnings
- Missing routes
"""

import pytest

from tafweej.errors import NoRouteError
from tafweej.models.density import DensityLevel
from tafweej.routing import DISTANCE_GRAPH, RouteCalculator, get_direct_distance, list_edges


LOW = DensityLevel.LOW
MEDIUM = DensityLevel.MEDIUM
HIGH = DensityLevel.HIGH
CRITICAL = DensityLevel.CRITICAL


def calculator_for(levels: dict) -> RouteCalculator:
    return RouteCalculator(lambda: levels)


# ============================================
# Distance Graph Tests
# ============================================

class TestDistanceGraph:
    """Test the static distance table"""

    def test_symmetric(self):
        for a, neighbours in DISTANCE_GRAPH.items():
            for b, km in neighbours.items():
                assert DISTANCE_GRAPH[b][a] == km

    def test_direct_distance(self):
        assert get_direct_distance("Mina", "Jamaraat Bridge") == 1.8
        assert get_direct_distance("Arafat", "Muzdalifah") == 8.2

    def test_no_haram_arafat_edge(self):
        assert get_direct_distance("Masjid al-Haram", "Arafat") is None
        assert get_direct_distance("Arafat", "Masjid al-Haram") is None

    def test_secondary_locations_not_routable(self):
        assert get_direct_distance("Mina Entrance Gate 1", "Mina") is None

    def test_list_edges(self):
        edges = list_edges()
        assert len(edges) == 9
        assert ("Jamaraat Bridge", "Mina", 1.8) in edges


# ============================================
# Duration Tests
# ============================================

class TestDuration:
    """Test congestion-adjusted walking time"""

    def test_mina_to_jamaraat_low(self):
        route = calculator_for({"Mina": LOW, "Jamaraat Bridge": LOW}).route("Mina", "Jamaraat Bridge")
        assert route.distance == "1.8 km"
        assert route.duration == "27 minutes"
        assert route.duration_minutes == 27
        assert route.congestion_level == LOW

    def test_mina_to_jamaraat_critical(self):
        route = calculator_for({"Mina": LOW, "Jamaraat Bridge": CRITICAL}).route("Mina", "Jamaraat Bridge")
        assert route.duration == "68 minutes"
        assert route.congestion_level == CRITICAL

    @pytest.mark.parametrize("level,minutes", [
        (LOW, 93),       # 6.2 km at 4.0 km/h
        (MEDIUM, 117),   # at 3.2 km/h
        (HIGH, 155),     # at 2.4 km/h
        (CRITICAL, 233), # at 1.6 km/h
    ])
    def test_speed_multipliers(self, level, minutes):
        calc = calculator_for({})
        assert calc.estimate_duration(6.2, level) == minutes

    def test_congestion_is_worse_endpoint(self):
        route = calculator_for({"Mina": HIGH, "Muzdalifah": MEDIUM}).route("Muzdalifah", "Mina")
        assert route.congestion_level == HIGH

    def test_missing_levels_count_as_low(self):
        route = calculator_for({}).route("Arafat", "Muzdalifah")
        assert route.congestion_level == LOW
        assert route.duration_minutes == 123

    def test_configured_walking_speed(self):
        calc = RouteCalculator(lambda: {}, {'walkingSpeedKmh': 5.0})
        assert calc.estimate_duration(5.0, LOW) == 60


# ============================================
# Directions Tests
# ============================================

class TestDirections:
    """Test generated directions"""

    def test_quiet_route(self):
        route = calculator_for({}).route("Mina", "Jamaraat Bridge")
        assert route.directions == [
            "Start at Mina",
            "Head toward Jamaraat Bridge",
            "Take the designated pathway following the crowd management barriers",
            "Arrive at Jamaraat Bridge",
        ]

    def test_busy_destination_adds_time_slot_hint(self):
        route = calculator_for({"Jamaraat Bridge": HIGH}).route("Mina", "Jamaraat Bridge")
        assert route.directions[1] == "⚠️ Warning: High crowd density detected on this route"
        assert route.directions[2] == "Consider traveling during off-peak hours if possible"
        assert "Follow signs for your camp's designated time slot to avoid peak congestion" in route.directions
        assert route.directions[-1] == "Stay hydrated and follow crowd management officials' instructions"

    def test_critical_start_warning_wins(self):
        route = calculator_for({"Mina": CRITICAL, "Jamaraat Bridge": CRITICAL}).route("Mina", "Jamaraat Bridge")
        assert route.directions[1] == "⚠️ Warning: Extremely high crowd density at your starting point (Mina)"

    def test_critical_destination_warning(self):
        route = calculator_for({"Muzdalifah": CRITICAL}).route("Mina", "Muzdalifah")
        assert route.directions[1] == "⚠️ Warning: Extremely high crowd density at your destination (Muzdalifah)"

    def test_haram_to_mina_hints(self):
        quiet = calculator_for({}).route("Masjid al-Haram", "Mina")
        assert "Exit through the King Fahd expansion gate" in quiet.directions
        assert "Follow the main path to Mina" in quiet.directions

        busy = calculator_for({"Masjid al-Haram": HIGH}).route("Masjid al-Haram", "Mina")
        assert "Follow the covered walkway path to Mina" in busy.directions
        assert "Keep right at the main junction to avoid heavier crowds" in busy.directions

    def test_other_routes_have_no_hints(self):
        route = calculator_for({}).route("Arafat", "Muzdalifah")
        assert route.directions == ["Start at Arafat", "Head toward Muzdalifah", "Arrive at Muzdalifah"]


# ============================================
# Missing Route Tests
# ============================================

class TestMissingRoutes:
    """Test pairs without a direct edge"""

    def test_haram_to_arafat(self):
        calc = calculator_for({})
        with pytest.raises(NoRouteError, match="No direct route available between these locations"):
            calc.route("Masjid al-Haram", "Arafat")
        assert calc.routes_failed == 1

    def test_same_location(self):
        with pytest.raises(NoRouteError):
            calculator_for({}).route("Mina", "Mina")

    def test_unknown_location(self):
        with pytest.raises(NoRouteError):
            calculator_for({}).route("Tent City Section A", "Mina")

    def test_densities_not_read_for_missing_route(self):
        def fail():
            raise AssertionError("density source should not be called")

        with pytest.raises(NoRouteError):
            RouteCalculator(fail).route("Masjid al-Haram", "Arafat")

    def test_stats(self):
        calc = calculator_for({})
        calc.route("Mina", "Muzdalifah")
        stats = calc.get_stats()
        assert stats['routesCalculated'] == 1
        assert stats['edges'] == 9
