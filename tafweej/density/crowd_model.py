"""
Crowd Density Model

Simulated crowd sensor network for the pilgrimage sites.

Each location's occupancy is derived from:
- a time-of-day modifier (prayer times, night hours)
- location-specific overrides (stoning hours at the bridge, tawaf hours
  at the mosque, the main pilgrimage day at Arafat)
- a weather modifier (hot midday, pleasant late afternoon)
- a location-specific base occupancy rule
- a demo variety rule pinning list positions to fixed levels
- +/-5% random jitter

Density (people per square meter) is crowd size / area and is classified
against fixed thresholds: <= 0.5 low, <= 1.0 medium, <= 2.0 high,
above that critical.

Usage:
    model = CrowdDensityModel(get_config().get_crowd_config())
    readings = model.compute_densities()
"""

import math
import random
from datetime import datetime, timezone
from typing import List, Optional, Sequence, Tuple

from tafweej.models.density import (
    Coordinates,
    DensityLevel,
    DensityReading,
    SectionReading,
)
from tafweej.density.locations import (
    ARAFAT,
    JAMARAAT_BRIDGE,
    LOCATION_PROFILES,
    MASJID_AL_HARAM,
    MINA,
    MUZDALIFAH,
    LocationProfile,
    get_base_coordinates,
)


DEFAULT_THRESHOLDS = {
    'low': 0.5,
    'medium': 1.0,
    'high': 2.0,
}

DEFAULT_TIME_MODIFIERS = {
    'beforePrayer': 2.0,
    'duringPrayer': 2.5,
    'afterPrayer': 1.8,
    'jamarat': 3.0,
    'tawaf': 2.5,
    'night': 0.7,
    'earlyMorning': 0.8,
    'hajjDay': 3.0,
}

DEFAULT_WEATHER_MODIFIERS = {
    'hot': 0.9,
    'pleasant': 1.2,
}

PRAYER_HOURS = (5, 12, 15, 18, 20)
AFTER_PRAYER_HOURS = (6, 13, 16, 19, 21)
BEFORE_PRAYER_HOURS = (4, 11, 14, 17, 19)

JAMARAT_HOURS = (6, 7, 8, 13, 14, 15, 16)
TAWAF_HOURS = (5, 6, 7, 21, 22, 23)

FRIDAY = 4  # datetime.weekday()

# Pinned density level by list position mod 5; position 4 is untouched
DEMO_VARIETY_LEVELS = {
    0: DensityLevel.HIGH,
    1: DensityLevel.MEDIUM,
    2: DensityLevel.CRITICAL,
    3: DensityLevel.LOW,
}

# People per square meter aimed at for a pinned level. Each target sits far
# enough inside its band that weather (0.9-1.2) and jitter (+/-5%) keep it there.
DEMO_VARIETY_TARGETS = {
    DensityLevel.LOW: 0.3,
    DensityLevel.MEDIUM: 0.75,
    DensityLevel.HIGH: 1.5,
    DensityLevel.CRITICAL: 3.0,
}

COORDINATE_JITTER = 0.00025


def classify_density(density: float, thresholds: dict = None) -> DensityLevel:
    """
    Classify people-per-square-meter density

    Bounds are inclusive: exactly 0.5 is low, exactly 1.0 medium,
    exactly 2.0 high.
    """
    thresholds = thresholds or DEFAULT_THRESHOLDS
    if density <= thresholds['low']:
        return DensityLevel.LOW
    elif density <= thresholds['medium']:
        return DensityLevel.MEDIUM
    elif density <= thresholds['high']:
        return DensityLevel.HIGH
    else:
        return DensityLevel.CRITICAL


class CrowdDensityModel:
    """
    Compute simulated density readings for every known location

    All inputs other than the clock and the random source are static, so
    two calls in the same hour classify the same way except where the
    jitter pushes a value across a threshold. Pass a seeded random.Random
    for reproducible output.
    """

    def __init__(
        self,
        config: dict = None,
        rng: Optional[random.Random] = None,
        profiles: Sequence[LocationProfile] = None,
    ):
        """
        Initialize model with configuration

        Args:
            config: Crowd configuration section (config/crowd.yaml)
            rng: Random source for the jitter draws
            profiles: Locations to simulate, in display order
        """
        if config is None:
            config = {}

        self.thresholds = {**DEFAULT_THRESHOLDS, **config.get('thresholds', {})}
        self.time_modifiers = {**DEFAULT_TIME_MODIFIERS, **config.get('timeModifiers', {})}
        self.weather_modifiers = {**DEFAULT_WEATHER_MODIFIERS, **config.get('weatherModifiers', {})}
        self.demo_variety = bool(config.get('demoVariety', True))

        self.rng = rng or random.Random()
        self.profiles = list(profiles) if profiles is not None else LOCATION_PROFILES

    # ============================================
    # Modifiers
    # ============================================

    def get_time_modifier(self, hour: int) -> float:
        """Site-wide modifier for the hour of day (first matching rule wins)"""
        if hour >= 22 or hour < 4:
            return self.time_modifiers['night']
        elif hour < 6:
            return self.time_modifiers['earlyMorning']
        elif hour in PRAYER_HOURS:
            return self.time_modifiers['duringPrayer']
        elif hour in AFTER_PRAYER_HOURS:
            return self.time_modifiers['afterPrayer']
        elif hour in BEFORE_PRAYER_HOURS:
            return self.time_modifiers['beforePrayer']
        return 1.0

    def is_pilgrimage_day(self, now: datetime) -> bool:
        """
        Main pilgrimage day flag

        Fridays stand in for the day of Arafah. Every third minute is
        also treated as one so the dashboard cycles through the peak state.
        """
        return now.weekday() == FRIDAY or now.minute % 3 == 0

    def get_location_time_modifier(
        self,
        location_name: str,
        hour: int,
        time_modifier: float,
        pilgrimage_day: bool,
    ) -> float:
        """Replace the site-wide modifier during a location's ritual peak"""
        if location_name == JAMARAAT_BRIDGE and hour in JAMARAT_HOURS:
            return self.time_modifiers['jamarat']
        elif location_name == MASJID_AL_HARAM and hour in TAWAF_HOURS:
            return self.time_modifiers['tawaf']
        elif location_name == ARAFAT and pilgrimage_day:
            return self.time_modifiers['hajjDay']
        return time_modifier

    def get_weather_modifier(self, hour: int) -> float:
        """Midday heat thins crowds, late afternoon draws them out"""
        if 11 <= hour <= 15:
            return self.weather_modifiers['hot']
        elif 16 <= hour <= 18:
            return self.weather_modifiers['pleasant']
        return 1.0

    def get_base_occupancy(self, location_name: str, now: datetime, pilgrimage_day: bool) -> float:
        """Baseline share of capacity before modifiers"""
        hour = now.hour

        if location_name == MASJID_AL_HARAM:
            return 0.7 + (hour % 3) * 0.1
        elif location_name == JAMARAAT_BRIDGE:
            return 0.9 if hour in JAMARAT_HOURS else 0.5
        elif location_name == MINA:
            return 0.95 if pilgrimage_day else 0.6
        elif location_name == ARAFAT:
            return 0.98 if pilgrimage_day else 0.3
        elif location_name == MUZDALIFAH:
            return 0.85 if 18 <= hour <= 23 else 0.4

        # Other sites vary with the minute
        return 0.4 + (now.minute % 10) / 10

    def apply_demo_variety(
        self,
        profile: LocationProfile,
        index: int,
        base_occupancy: float,
        time_modifier: float,
    ) -> Tuple[float, float]:
        """
        Pin list positions 0-3 (mod 5) to high/medium/critical/low

        Demonstration rule, not a crowd model: it guarantees every level
        shows up on the map whatever the hour. The pinned occupancy is
        derived from the location's area and capacity so the resulting
        density lands inside the level's band. Position 4 keeps its
        computed values.
        """
        level = DEMO_VARIETY_LEVELS.get(index % 5)
        if not self.demo_variety or level is None:
            return base_occupancy, time_modifier

        target_density = DEMO_VARIETY_TARGETS[level]
        return target_density * profile.area_sq_m / profile.capacity, 1.0

    # ============================================
    # Readings
    # ============================================

    def classify(self, density: float) -> DensityLevel:
        """Classify against this model's thresholds"""
        return classify_density(density, self.thresholds)

    def compute_location(
        self,
        profile: LocationProfile,
        index: int,
        now: datetime,
    ) -> DensityReading:
        """
        Compute the reading for one location

        Args:
            profile: Location to simulate
            index: Position of the location in the display order
            now: Current time (local to the sites)
        """
        hour = now.hour
        pilgrimage_day = self.is_pilgrimage_day(now)

        time_modifier = self.get_location_time_modifier(
            profile.name, hour, self.get_time_modifier(hour), pilgrimage_day
        )
        base_occupancy = self.get_base_occupancy(profile.name, now, pilgrimage_day)
        base_occupancy, time_modifier = self.apply_demo_variety(
            profile, index, base_occupancy, time_modifier
        )

        modified = base_occupancy * time_modifier * self.get_weather_modifier(hour)
        final_occupancy = modified * self.rng.uniform(0.95, 1.05)

        crowd_size = math.floor(final_occupancy * profile.capacity)
        density = crowd_size / profile.area_sq_m

        sections = []
        for section in profile.sections:
            section_density = density * self.rng.uniform(0.9, 1.1)
            sections.append(SectionReading(
                id=section.id,
                name=section.name,
                density=round(section_density, 2),
                density_level=self.classify(section_density),
                crowd_size=math.floor(crowd_size * section.percentage),
            ))

        base = get_base_coordinates(profile.name)
        coordinates = Coordinates(
            lng=base.lng + self.rng.uniform(-COORDINATE_JITTER, COORDINATE_JITTER),
            lat=base.lat + self.rng.uniform(-COORDINATE_JITTER, COORDINATE_JITTER),
        )

        return DensityReading(
            location_name=profile.name,
            coordinates=coordinates,
            density=round(density, 2),
            density_level=self.classify(density),
            crowd_size=crowd_size,
            capacity=profile.capacity,
            occupancy_percentage=round(final_occupancy * 100, 1),
            sections=sections,
            timestamp=_utc_isoformat(now),
        )

    def compute_densities(self, now: datetime = None) -> List[DensityReading]:
        """
        Compute readings for all locations, in catalogue order

        Args:
            now: Time to simulate (default: current local time)
        """
        if now is None:
            now = datetime.now().astimezone()

        return [
            self.compute_location(profile, index, now)
            for index, profile in enumerate(self.profiles)
        ]


def _utc_isoformat(now: datetime) -> str:
    if now.tzinfo is None:
        return now.isoformat()
    return now.astimezone(timezone.utc).isoformat()
