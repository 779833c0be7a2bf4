"""
Density Store

Keeps the crowd_density table holding the latest reading per location.

Read path:
- fresh rows (newest updated_at within the staleness window) are served as-is
- missing or stale rows trigger a recompute, then a re-read
- a failing or unconfigured store falls back to the crowd model's
  output, returned without persisting

Write path:
- recompute replaces the whole table in one transaction, so readers never
  see it empty
- manual entries upsert a single location's row
"""

from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError

from tafweej.database.database import StoreClient, ensure_utc, utc_now
from tafweej.database.models import CrowdDensityRecord
from tafweej.density.crowd_model import CrowdDensityModel
from tafweej.errors import ConfigurationError, PersistenceError, ValidationError
from tafweej.models.density import DensityLevel, DensityUpdateRequest


DEFAULT_STALENESS_MINUTES = 5


class DensityStore:
    """
    Adapter between the crowd model and the crowd_density table

    Usage:
        store = DensityStore(client, CrowdDensityModel())
        readings = store.get_current()
        count = store.force_recompute()
    """

    def __init__(
        self,
        client: Optional[StoreClient],
        model: CrowdDensityModel,
        staleness_minutes: float = DEFAULT_STALENESS_MINUTES,
        clock: Callable[[], datetime] = utc_now,
    ):
        """
        Initialize the store

        Args:
            client: Row store client (None when not configured)
            model: Crowd model used for recomputes and fallbacks
            staleness_minutes: Age after which stored rows are recomputed
            clock: Source of the current UTC time
        """
        self.client = client
        self.model = model
        self.staleness_window = timedelta(minutes=staleness_minutes)
        self.clock = clock

        # Statistics
        self.recompute_count = 0
        self.fallback_count = 0
        self.last_recompute_time: Optional[datetime] = None

    @property
    def is_configured(self) -> bool:
        return self.client is not None

    def _require_client(self) -> StoreClient:
        if self.client is None:
            raise ConfigurationError()
        return self.client

    # ============================================
    # Reads
    # ============================================

    def list_readings(self) -> List[dict]:
        """
        All stored readings, newest first

        Raises:
            ConfigurationError: no store client
            PersistenceError: the query failed
        """
        client = self._require_client()
        try:
            with client.session() as db:
                rows = db.query(CrowdDensityRecord)\
                    .order_by(CrowdDensityRecord.updated_at.desc(), CrowdDensityRecord.id)\
                    .all()
                return [row.to_dict() for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read crowd density: {e}") from e

    def is_stale(self, readings: List[dict]) -> bool:
        """True when there are no readings or the newest is too old"""
        if not readings:
            return True

        newest = readings[0].get('updated_at')
        if not newest:
            return True

        updated_at = ensure_utc(datetime.fromisoformat(newest))
        return updated_at < self.clock() - self.staleness_window

    def get_current(self, force: bool = False) -> List[dict]:
        """
        Current readings for every location

        Args:
            force: Recompute even when stored data is fresh

        Returns:
            Stored rows, or the crowd model's output when the store is
            unavailable
        """
        try:
            if force:
                print("[DENSITY] Force refresh requested, recomputing")
                self.force_recompute()
                return self.list_readings()

            readings = self.list_readings()
            if not self.is_stale(readings):
                return readings

            print("[DENSITY] Stored readings missing or stale, recomputing")
            self.force_recompute()
            return self.list_readings()

        except (ConfigurationError, PersistenceError) as e:
            print(f"[WARN] Density store unavailable ({e}), computing directly")
            return self.compute_direct()

    def compute_direct(self) -> List[dict]:
        """Crowd model output as API dictionaries, not persisted"""
        self.fallback_count += 1
        return [reading.model_dump(mode='json') for reading in self.model.compute_densities()]

    def get_density_levels(self) -> Dict[str, DensityLevel]:
        """Location name -> density level for the current readings"""
        return {
            reading['location_name']: DensityLevel.parse(reading.get('density_level'), DensityLevel.LOW)
            for reading in self.get_current()
        }

    # ============================================
    # Writes
    # ============================================

    def force_recompute(self) -> int:
        """
        Recompute every location and replace the table contents

        Delete and insert share one transaction; on failure it is rolled
        back and the previous rows stay visible.

        Returns:
            Number of readings written

        Raises:
            ConfigurationError: no store client
            PersistenceError: the transaction failed
        """
        client = self._require_client()
        readings = self.model.compute_densities()
        updated_at = self.clock()

        with client.session() as db:
            try:
                db.execute(delete(CrowdDensityRecord))
                db.add_all([
                    CrowdDensityRecord(**reading.to_record_fields(), updated_at=updated_at)
                    for reading in readings
                ])
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                print(f"[ERROR] Crowd density recompute failed: {e}")
                raise PersistenceError(f"Failed to update crowd density data: {e}") from e

        self.recompute_count += 1
        self.last_recompute_time = updated_at

        levels = ", ".join(f"{r.location_name}={r.density_level.value}" for r in readings)
        print(f"[DENSITY] Stored {len(readings)} readings ({levels})")
        return len(readings)

    def upsert_reading(self, fields: dict) -> dict:
        """
        Insert or replace the reading of one location

        Args:
            fields: location_name, coordinates and density_level (required),
                    crowd_size, occupancy_percentage, meta_data (optional)

        Returns:
            The stored row

        Raises:
            ValidationError: required fields missing or malformed
            ConfigurationError: no store client
            PersistenceError: the write failed
        """
        try:
            entry = DensityUpdateRequest.model_validate(fields)
        except PydanticValidationError as e:
            raise ValidationError([str(err['loc'][0]) for err in e.errors()]) from e

        missing = entry.missing_fields()
        if missing:
            raise ValidationError(missing)

        client = self._require_client()
        with client.session() as db:
            try:
                record = db.query(CrowdDensityRecord)\
                    .filter_by(location_name=entry.location_name)\
                    .first()
                if record is None:
                    record = CrowdDensityRecord(location_name=entry.location_name)
                    db.add(record)

                record.coordinates = entry.coordinates.model_dump()
                record.density_level = entry.density_level.value
                record.crowd_size = entry.crowd_size
                record.occupancy_percentage = entry.occupancy_percentage
                record.meta_data = entry.meta_data
                record.updated_at = self.clock()

                db.commit()
                db.refresh(record)
                return record.to_dict()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Failed to upsert crowd density: {e}") from e

    def get_stats(self) -> dict:
        """Get store statistics"""
        return {
            'configured': self.is_configured,
            'recomputeCount': self.recompute_count,
            'fallbackCount': self.fallback_count,
            'lastRecomputeTime': self.last_recompute_time.isoformat() if self.last_recompute_time else None,
            'stalenessMinutes': self.staleness_window.total_seconds() / 60,
        }
