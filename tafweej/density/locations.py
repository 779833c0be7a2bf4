"""
Location Catalogue

Static profiles of the monitored pilgrimage sites: physical area,
capacity, named sections and map base point.

The order of LOCATION_PROFILES is significant: the crowd model walks it
in this order and the demo variety rule keys off the list position.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

from tafweej.models.density import Coordinates


@dataclass(frozen=True)
class LocationSection:
    """Named sub-area holding a fixed share of its location's crowd"""
    id: str
    name: str
    percentage: float


@dataclass(frozen=True)
class LocationProfile:
    """
    Physical characteristics of a monitored site

    Section percentages are not required to sum to 1.
    """
    name: str
    area_sq_m: float
    capacity: int
    sections: Tuple[LocationSection, ...] = field(default_factory=tuple)
    lng: float = 0.0
    lat: float = 0.0

    @property
    def base_coordinates(self) -> Coordinates:
        return Coordinates(lng=self.lng, lat=self.lat)

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses"""
        return {
            'name': self.name,
            'area_sq_m': self.area_sq_m,
            'capacity': self.capacity,
            'coordinates': {'lng': self.lng, 'lat': self.lat},
            'sections': [
                {'id': s.id, 'name': s.name, 'percentage': s.percentage}
                for s in self.sections
            ],
        }


def _sections(*rows) -> Tuple[LocationSection, ...]:
    return tuple(LocationSection(id=i, name=n, percentage=p) for i, n, p in rows)


MASJID_AL_HARAM = "Masjid al-Haram"
MINA = "Mina"
JAMARAAT_BRIDGE = "Jamaraat Bridge"
ARAFAT = "Arafat"
MUZDALIFAH = "Muzdalifah"


LOCATION_PROFILES: List[LocationProfile] = [
    LocationProfile(
        name=MASJID_AL_HARAM,
        area_sq_m=356800,          # including expansions
        capacity=1500000,
        sections=_sections(
            ('mataf', 'Mataf Area', 0.15),
            ('ground', 'Ground Floor', 0.45),
            ('first', 'First Floor', 0.25),
            ('roof', 'Roof Area', 0.15),
        ),
        lng=39.826174, lat=21.422487,
    ),
    LocationProfile(
        name=MINA,
        area_sq_m=812000,
        capacity=1200000,
        sections=_sections(
            ('tents-a', 'Tents Area A', 0.3),
            ('tents-b', 'Tents Area B', 0.3),
            ('tents-c', 'Tents Area C', 0.3),
            ('services', 'Services Area', 0.1),
        ),
        lng=39.892966, lat=21.413249,
    ),
    LocationProfile(
        name=JAMARAAT_BRIDGE,
        area_sq_m=52000,
        capacity=300000,           # hourly
        sections=_sections(
            ('lower', 'Lower Level', 0.3),
            ('middle', 'Middle Level', 0.4),
            ('upper', 'Upper Level', 0.3),
        ),
        lng=39.873485, lat=21.42365,
    ),
    LocationProfile(
        name=ARAFAT,
        area_sq_m=1456000,
        capacity=2500000,
        sections=_sections(
            ('jabal', 'Jabal al-Rahmah', 0.2),
            ('nimrah', 'Nimrah', 0.3),
            ('uranah', 'Uranah', 0.25),
            ('other', 'Other Areas', 0.25),
        ),
        lng=39.984687, lat=21.355461,
    ),
    LocationProfile(
        name=MUZDALIFAH,
        area_sq_m=623000,
        capacity=1000000,
        sections=_sections(
            ('mash', "Al-Mash'ar al-Haram", 0.3),
            ('north', 'Northern Area', 0.35),
            ('south', 'Southern Area', 0.35),
        ),
        lng=39.936322, lat=21.383082,
    ),
    LocationProfile(
        name="Mina Entrance Gate 1",
        area_sq_m=3000,
        capacity=20000,            # hourly
        sections=_sections(
            ('entry', 'Entry Points', 0.4),
            ('security', 'Security Check', 0.3),
            ('waiting', 'Waiting Area', 0.3),
        ),
        lng=39.887235, lat=21.411856,
    ),
    LocationProfile(
        name="Tent City Section A",
        area_sq_m=120000,
        capacity=180000,
        sections=_sections(
            ('a1', 'Block A1', 0.25),
            ('a2', 'Block A2', 0.25),
            ('a3', 'Block A3', 0.25),
            ('a4', 'Block A4', 0.25),
        ),
        lng=39.889124, lat=21.414501,
    ),
    LocationProfile(
        name="Jamarat Central Access",
        area_sq_m=8000,
        capacity=50000,            # hourly
        sections=_sections(
            ('entry', 'Entry Zone', 0.4),
            ('corridor', 'Main Corridor', 0.4),
            ('exit', 'Exit Zone', 0.2),
        ),
        lng=39.871952, lat=21.423850,
    ),
]

LOCATIONS_BY_NAME: Dict[str, LocationProfile] = {p.name: p for p in LOCATION_PROFILES}

# Map fallback for names outside the catalogue
DEFAULT_COORDINATES = Coordinates(lng=39.826174, lat=21.422487)


def get_base_coordinates(name: str) -> Coordinates:
    """Map base point for a location, Masjid al-Haram for unknown names"""
    profile = LOCATIONS_BY_NAME.get(name)
    return profile.base_coordinates if profile else DEFAULT_COORDINATES
