"""
Database Tests

Tests for the store client, ORM models and timestamp handling.
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import inspect

from tafweej.database import (
    CrowdDensityRecord,
    SafetyAlertRecord,
    StoreClient,
    create_store_client,
    ensure_utc,
    utc_now,
)


@pytest.fixture(name="client")
def client_fixture():
    """In-memory store client with tables created"""
    store_client = StoreClient("sqlite:///:memory:")
    store_client.init_db()
    yield store_client
    store_client.dispose()


# ============================================
# Store Client Tests
# ============================================

class TestStoreClient:
    """Test engine and session management"""

    def test_tables_created(self, client):
        tables = inspect(client.engine).get_table_names()
        assert "crowd_density" in tables
        assert "safety_alerts" in tables

    def test_sessions_share_memory_database(self, client):
        with client.session() as db:
            db.add(CrowdDensityRecord(
                location_name="Mina",
                coordinates={"lng": 39.89, "lat": 21.41},
                density_level="low",
            ))
            db.commit()

        with client.session() as db:
            assert db.query(CrowdDensityRecord).count() == 1

    def test_file_database_creates_directory(self, tmp_path):
        path = tmp_path / "nested" / "data" / "tafweej.db"
        store_client = StoreClient(f"sqlite:///{path}")
        store_client.init_db()
        store_client.dispose()
        assert path.parent.is_dir()

    def test_create_without_url(self):
        assert create_store_client(None) is None
        assert create_store_client("") is None

    def test_create_with_url(self):
        store_client = create_store_client("sqlite:///:memory:")
        assert isinstance(store_client, StoreClient)
        store_client.dispose()


# ============================================
# Model Tests
# ============================================

class TestRecords:
    """Test ORM records"""

    def test_density_record_to_dict(self, client):
        stamp = datetime(2026, 6, 10, 9, 0, tzinfo=timezone.utc)
        with client.session() as db:
            record = CrowdDensityRecord(
                location_name="Arafat",
                coordinates={"lng": 39.98, "lat": 21.35},
                density_level="critical",
                crowd_size=4500000,
                occupancy_percentage=180.0,
                meta_data={"density": 3.09},
                updated_at=stamp,
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            data = record.to_dict()

        assert data['location_name'] == "Arafat"
        assert data['meta_data'] == {"density": 3.09}
        assert data['updated_at'] == stamp.isoformat()

    def test_default_updated_at(self, client):
        before = utc_now()
        with client.session() as db:
            record = CrowdDensityRecord(
                location_name="Mina",
                coordinates={"lng": 39.89, "lat": 21.41},
                density_level="low",
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            assert ensure_utc(record.updated_at) >= before

    def test_alert_record_to_dict(self, client):
        expires = datetime(2026, 6, 10, 12, 0, tzinfo=timezone.utc)
        with client.session() as db:
            record = SafetyAlertRecord(
                title="Gate closed",
                description="Gate 1 closed for cleaning",
                location_name="Mina Entrance Gate 1",
                coordinates={"lng": 39.887, "lat": 21.411},
                severity="medium",
                expires_at=expires,
            )
            db.add(record)
            db.commit()
            db.refresh(record)
            data = record.to_dict()

        assert data['severity'] == "medium"
        assert data['expires_at'] == expires.isoformat()
        assert data['created_at'] is not None


# ============================================
# Timestamp Helper Tests
# ============================================

class TestTimestamps:
    """Test UTC helpers"""

    def test_naive_values_are_utc(self):
        naive = datetime(2026, 6, 10, 9, 0)
        assert ensure_utc(naive) == datetime(2026, 6, 10, 9, 0, tzinfo=timezone.utc)

    def test_offset_values_are_converted(self):
        riyadh = datetime(2026, 6, 10, 12, 0, tzinfo=timezone(timedelta(hours=3)))
        converted = ensure_utc(riyadh)
        assert converted.utcoffset() == timedelta(0)
        assert converted.hour == 9

    def test_none(self):
        assert ensure_utc(None) is None

    def test_utc_now_is_aware(self):
        assert utc_now().tzinfo is not None
