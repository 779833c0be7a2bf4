"""
Safety Alert Store

CRUD over the safety_alerts table.

Only alerts whose expires_at lies in the future are listed; expired rows
are left in place. Listing order is severity descending (critical first),
with insertion order breaking ties.
"""

from datetime import datetime
from typing import Callable, List, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import case
from sqlalchemy.exc import SQLAlchemyError

from tafweej.database.database import StoreClient, ensure_utc, utc_now
from tafweej.database.models import SafetyAlertRecord
from tafweej.errors import ConfigurationError, NotFoundError, PersistenceError, ValidationError
from tafweej.models.alert import SEVERITY_RANK, SafetyAlertCreate


_severity_order = case(SEVERITY_RANK, value=SafetyAlertRecord.severity, else_=-1)


class AlertStore:
    """
    Safety alert persistence

    Usage:
        alerts = AlertStore(client)
        created = alerts.create({...})
        active = alerts.list_active()
        alerts.delete(created['id'])
    """

    def __init__(self, client: Optional[StoreClient], clock: Callable[[], datetime] = utc_now):
        """
        Initialize the store

        Args:
            client: Row store client (None when not configured)
            clock: Source of the current UTC time
        """
        self.client = client
        self.clock = clock

    def _require_client(self) -> StoreClient:
        if self.client is None:
            raise ConfigurationError()
        return self.client

    def list_active(self, now: datetime = None) -> List[dict]:
        """
        Alerts that have not expired, most severe first

        Args:
            now: Reference time (default: current time)
        """
        client = self._require_client()
        now = ensure_utc(now) if now else self.clock()

        try:
            with client.session() as db:
                rows = db.query(SafetyAlertRecord)\
                    .filter(SafetyAlertRecord.expires_at > now)\
                    .order_by(_severity_order.desc(), SafetyAlertRecord.id)\
                    .all()
                return [row.to_dict() for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read safety alerts: {e}") from e

    def get(self, alert_id: int) -> dict:
        """Single alert by id, expired or not"""
        client = self._require_client()
        try:
            with client.session() as db:
                row = db.get(SafetyAlertRecord, alert_id)
                if row is None:
                    raise NotFoundError(f"Safety alert {alert_id} not found")
                return row.to_dict()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to read safety alert: {e}") from e

    def create(self, fields: dict) -> dict:
        """
        Store a new alert

        Args:
            fields: title, description, location_name, coordinates,
                    severity, expires_at (all required)

        Raises:
            ValidationError: required fields missing or malformed
        """
        try:
            request = SafetyAlertCreate.model_validate(fields)
        except PydanticValidationError as e:
            raise ValidationError([str(err['loc'][0]) for err in e.errors()]) from e

        missing = request.missing_fields()
        if missing:
            raise ValidationError(missing)

        client = self._require_client()
        with client.session() as db:
            try:
                record = SafetyAlertRecord(
                    title=request.title,
                    description=request.description,
                    location_name=request.location_name,
                    coordinates=request.coordinates.model_dump(),
                    severity=request.severity.value,
                    created_at=self.clock(),
                    expires_at=ensure_utc(request.expires_at),
                )
                db.add(record)
                db.commit()
                db.refresh(record)
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Failed to create safety alert: {e}") from e

            print(f"[ALERT] Created #{record.id} ({record.severity}) at {record.location_name}: {record.title}")
            return record.to_dict()

    def delete(self, alert_id: int) -> None:
        """
        Remove an alert

        Raises:
            NotFoundError: no alert with this id
        """
        client = self._require_client()
        with client.session() as db:
            try:
                deleted = db.query(SafetyAlertRecord)\
                    .filter(SafetyAlertRecord.id == alert_id)\
                    .delete()
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise PersistenceError(f"Failed to delete safety alert: {e}") from e

        if not deleted:
            raise NotFoundError(f"Safety alert {alert_id} not found")

        print(f"[ALERT] Deleted #{alert_id}")
