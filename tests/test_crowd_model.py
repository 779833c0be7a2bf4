"""
Crowd Density Model Tests

Tests for:
- Density classification thresholds
- Time-of-day, location and weather modifiers
- Demo variety pinning
- Reading structure and reproducibility
"""

import random
from datetime import datetime, timezone

import pytest

from tafweej.density.crowd_model import (
    CrowdDensityModel,
    classify_density,
    COORDINATE_JITTER,
)
from tafweej.density.locations import LOCATION_PROFILES, get_base_coordinates
from tafweej.models.density import DensityLevel


# 2026-06-12 is a Friday, 2026-06-10 a Wednesday
FRIDAY = datetime(2026, 6, 12, 10, 1, tzinfo=timezone.utc)
WEDNESDAY = datetime(2026, 6, 10, 10, 1, tzinfo=timezone.utc)


def make_model(**config):
    return CrowdDensityModel(config, rng=random.Random(42))


# ============================================
# Classification Tests
# ============================================

class TestClassification:
    """Test density thresholds"""

    @pytest.mark.parametrize("density,expected", [
        (0.0, DensityLevel.LOW),
        (0.5, DensityLevel.LOW),
        (0.51, DensityLevel.MEDIUM),
        (1.0, DensityLevel.MEDIUM),
        (1.01, DensityLevel.HIGH),
        (2.0, DensityLevel.HIGH),
        (2.01, DensityLevel.CRITICAL),
        (7.5, DensityLevel.CRITICAL),
    ])
    def test_bounds_are_inclusive(self, density, expected):
        assert classify_density(density) == expected

    def test_custom_thresholds(self):
        model = make_model(thresholds={'low': 0.2})
        assert model.classify(0.3) == DensityLevel.MEDIUM
        assert model.classify(1.5) == DensityLevel.HIGH


# ============================================
# Modifier Tests
# ============================================

class TestModifiers:
    """Test time, location and weather modifiers"""

    def setup_method(self):
        self.model = make_model()

    @pytest.mark.parametrize("hour,expected", [
        (23, 0.7),
        (0, 0.7),
        (3, 0.7),
        (4, 0.8),
        (5, 0.8),    # early morning wins over the dawn prayer
        (12, 2.5),
        (13, 1.8),
        (11, 2.0),
        (19, 1.8),   # after-prayer rule checked before before-prayer
        (9, 1.0),
    ])
    def test_time_modifier(self, hour, expected):
        assert self.model.get_time_modifier(hour) == expected

    def test_pilgrimage_day_on_friday(self):
        assert self.model.is_pilgrimage_day(FRIDAY)

    def test_pilgrimage_day_every_third_minute(self):
        assert not self.model.is_pilgrimage_day(WEDNESDAY)
        assert self.model.is_pilgrimage_day(WEDNESDAY.replace(minute=3))

    def test_location_overrides(self):
        assert self.model.get_location_time_modifier("Jamaraat Bridge", 14, 2.0, False) == 3.0
        assert self.model.get_location_time_modifier("Masjid al-Haram", 22, 0.7, False) == 2.5
        assert self.model.get_location_time_modifier("Arafat", 9, 1.0, True) == 3.0
        assert self.model.get_location_time_modifier("Arafat", 9, 1.0, False) == 1.0
        assert self.model.get_location_time_modifier("Mina", 14, 2.0, True) == 2.0

    def test_weather_modifier(self):
        assert self.model.get_weather_modifier(12) == 0.9
        assert self.model.get_weather_modifier(17) == 1.2
        assert self.model.get_weather_modifier(9) == 1.0

    def test_base_occupancy(self):
        now = WEDNESDAY.replace(hour=14)
        assert self.model.get_base_occupancy("Masjid al-Haram", now, False) == pytest.approx(0.9)
        assert self.model.get_base_occupancy("Jamaraat Bridge", now, False) == 0.9
        assert self.model.get_base_occupancy("Mina", now, True) == 0.95
        assert self.model.get_base_occupancy("Arafat", now, False) == 0.3
        assert self.model.get_base_occupancy("Muzdalifah", now, False) == 0.4
        assert self.model.get_base_occupancy("Tent City Section A", now, False) == pytest.approx(0.5)


# ============================================
# Demo Variety Tests
# ============================================

class TestDemoVariety:
    """Test list-position level pinning"""

    @pytest.mark.parametrize("hour", range(24))
    def test_pinned_levels_at_every_hour(self, hour):
        model = make_model()
        readings = model.compute_densities(WEDNESDAY.replace(hour=hour))

        assert readings[0].density_level == DensityLevel.HIGH
        assert readings[1].density_level == DensityLevel.MEDIUM
        assert readings[2].density_level == DensityLevel.CRITICAL
        assert readings[3].density_level == DensityLevel.LOW
        # positions 5-7 wrap around to the same pins
        assert readings[5].density_level == DensityLevel.HIGH
        assert readings[6].density_level == DensityLevel.MEDIUM
        assert readings[7].density_level == DensityLevel.CRITICAL

    def test_position_four_is_not_pinned(self):
        model = make_model()
        profile = LOCATION_PROFILES[4]
        assert model.apply_demo_variety(profile, 4, 0.4, 0.7) == (0.4, 0.7)

    def test_disabled_uses_time_of_day_model(self):
        # 02:01 on a Wednesday: Masjid al-Haram base 0.9 x night 0.7
        now = WEDNESDAY.replace(hour=2)

        plain = make_model(demoVariety=False).compute_densities(now)
        pinned = make_model().compute_densities(now)

        assert plain[0].density_level == DensityLevel.CRITICAL
        assert pinned[0].density_level == DensityLevel.HIGH


# ============================================
# Reading Tests
# ============================================

class TestReadings:
    """Test computed reading structure"""

    def setup_method(self):
        self.model = make_model()
        self.readings = self.model.compute_densities(WEDNESDAY)

    def test_one_reading_per_location_in_order(self):
        assert [r.location_name for r in self.readings] == [p.name for p in LOCATION_PROFILES]

    def test_density_matches_crowd_and_area(self):
        for reading, profile in zip(self.readings, LOCATION_PROFILES):
            assert reading.capacity == profile.capacity
            assert reading.density == round(reading.crowd_size / profile.area_sq_m, 2)

    def test_occupancy_has_one_decimal(self):
        for reading in self.readings:
            assert reading.occupancy_percentage == round(reading.occupancy_percentage, 1)

    def test_sections(self):
        for reading, profile in zip(self.readings, LOCATION_PROFILES):
            assert [s.id for s in reading.sections] == [s.id for s in profile.sections]
            for section in reading.sections:
                assert section.crowd_size <= reading.crowd_size
                assert section.density == round(section.density, 2)

    def test_coordinates_jitter_around_base_point(self):
        for reading in self.readings:
            base = get_base_coordinates(reading.location_name)
            assert abs(reading.coordinates.lng - base.lng) <= COORDINATE_JITTER
            assert abs(reading.coordinates.lat - base.lat) <= COORDINATE_JITTER

    def test_timestamp_is_utc_iso(self):
        assert self.readings[0].timestamp == WEDNESDAY.isoformat()

    def test_seeded_models_agree(self):
        again = make_model().compute_densities(WEDNESDAY)
        assert [r.model_dump() for r in again] == [r.model_dump() for r in self.readings]

    def test_record_fields(self):
        fields = self.readings[1].to_record_fields()
        assert fields['location_name'] == "Mina"
        assert fields['density_level'] == "medium"
        assert fields['meta_data']['capacity'] == 1200000
        assert len(fields['meta_data']['sections']) == 4
