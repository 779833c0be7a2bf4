"""
Database Package

SQLAlchemy store client and ORM tables.
"""

from .database import Base, StoreClient, create_store_client, ensure_utc, utc_now
from .models import CrowdDensityRecord, SafetyAlertRecord

__all__ = [
    "Base",
    "StoreClient",
    "create_store_client",
    "ensure_utc",
    "utc_now",
    "CrowdDensityRecord",
    "SafetyAlertRecord",
]
