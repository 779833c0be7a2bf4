"""
Crowd Insights

Aggregate figures shown on the dashboard summary cards:
- total pilgrims across all sites
- critical and high density areas
- average occupancy
- share of pilgrims at each density level

Works on both stored rows and direct model output; only location_name,
density_level, crowd_size and occupancy_percentage are read.
"""

from dataclasses import dataclass, field
from typing import Dict, List

from tafweej.models.density import DensityLevel


# Stand-in crowd size for readings that carry only a level (manual entries)
DEFAULT_CROWD_BY_LEVEL = {
    DensityLevel.CRITICAL: 200000,
    DensityLevel.HIGH: 150000,
    DensityLevel.MEDIUM: 100000,
    DensityLevel.LOW: 50000,
}


@dataclass
class CrowdInsights:
    """Dashboard summary of the current readings"""
    total_pilgrims: int = 0
    critical_areas: List[str] = field(default_factory=list)
    high_areas: List[str] = field(default_factory=list)
    avg_occupancy: float = 0.0
    distribution: Dict[DensityLevel, int] = field(
        default_factory=lambda: {level: 0 for level in DensityLevel}
    )

    @classmethod
    def calculate(cls, readings: List[dict]) -> 'CrowdInsights':
        """
        Summarize a set of density readings

        Args:
            readings: Stored rows or model output dictionaries

        Returns:
            CrowdInsights (all zero for an empty input)
        """
        insights = cls()
        if not readings:
            return insights

        total_occupancy = 0.0

        for reading in readings:
            level = DensityLevel.parse(reading.get('density_level'), DensityLevel.LOW)

            crowd_size = reading.get('crowd_size') or DEFAULT_CROWD_BY_LEVEL[level]
            insights.total_pilgrims += crowd_size
            insights.distribution[level] += crowd_size

            occupancy = reading.get('occupancy_percentage')
            if occupancy:
                total_occupancy += float(occupancy)

            if level == DensityLevel.CRITICAL:
                insights.critical_areas.append(reading['location_name'])
            elif level == DensityLevel.HIGH:
                insights.high_areas.append(reading['location_name'])

        insights.avg_occupancy = round(total_occupancy / len(readings), 1)
        return insights

    def percentage(self, level: DensityLevel) -> float:
        """Share of all pilgrims at the given level, one decimal"""
        if self.total_pilgrims <= 0:
            return 0.0
        return round(self.distribution[level] / self.total_pilgrims * 100, 1)

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses"""
        return {
            'totalPilgrims': self.total_pilgrims,
            'criticalAreas': self.critical_areas,
            'highAreas': self.high_areas,
            'avgOccupancy': self.avg_occupancy,
            'pilgrimDistribution': {
                level.value: {
                    'count': self.distribution[level],
                    'percentage': self.percentage(level),
                }
                for level in DensityLevel
            },
        }

