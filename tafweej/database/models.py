"""
SQLAlchemy ORM Models

This module defines the database tables for the crowd monitor:
- crowd_density: latest density reading per location
- safety_alerts: operator-posted safety alerts
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, Text, JSON, Index

from .database import Base, ensure_utc, utc_now


def _isoformat(value):
    value = ensure_utc(value)
    return value.isoformat() if value else None


class CrowdDensityRecord(Base):
    """
    Current crowd density for one location

    Exactly one row per location_name; recomputation replaces rows,
    manual entries upsert by location_name.
    """
    __tablename__ = "crowd_density"

    id = Column(Integer, primary_key=True, autoincrement=True)
    location_name = Column(String, nullable=False, unique=True, index=True)

    coordinates = Column(JSON, nullable=False)  # {"lng": ..., "lat": ...}
    density_level = Column(String, nullable=False)  # low, medium, high, critical

    crowd_size = Column(Integer)
    occupancy_percentage = Column(Float)

    # {"density": float, "capacity": int, "sections": [...]}
    meta_data = Column(JSON)

    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, index=True)

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses"""
        return {
            'id': self.id,
            'location_name': self.location_name,
            'coordinates': self.coordinates,
            'density_level': self.density_level,
            'crowd_size': self.crowd_size,
            'occupancy_percentage': self.occupancy_percentage,
            'meta_data': self.meta_data,
            'updated_at': _isoformat(self.updated_at),
        }


class SafetyAlertRecord(Base):
    """
    Safety alert posted by an operator

    Expired rows are kept; read queries filter on expires_at.
    """
    __tablename__ = "safety_alerts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)

    location_name = Column(String, nullable=False, index=True)
    coordinates = Column(JSON, nullable=False)

    severity = Column(String, nullable=False)  # low, medium, high, critical

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    expires_at = Column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index('idx_alert_expiry_severity', 'expires_at', 'severity'),
    )

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses"""
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'location_name': self.location_name,
            'coordinates': self.coordinates,
            'severity': self.severity,
            'created_at': _isoformat(self.created_at),
            'expires_at': _isoformat(self.expires_at),
        }
