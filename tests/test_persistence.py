# tests/test_persistence.py
"""Tests for the SQL slot gateway and collection load/save helpers."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import MagicMock
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from carwash.database import create_tables
from carwash.models.storage_slot import StorageSlot
from carwash.schemas.customer import Customer
from carwash.services.persistence import (
    CUSTOMERS_SLOT,
    SqlSlotGateway,
    load_collection,
    save_collection,
)


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_tables(bind=engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_customer(customer_id="C-1", name="Ana Ruiz"):
    return Customer(id=customer_id, name=name, plate="AAA-111", total_visits=1, total_spent=25.0)


class TestSqlSlotGateway:
    def test_missing_slot_reads_none(self, session_factory):
        assert SqlSlotGateway(session_factory).read("nothing") is None

    def test_write_then_read(self, session_factory):
        gateway = SqlSlotGateway(session_factory)
        gateway.write("demo", [{"name": "María"}])
        assert gateway.read("demo") == [{"name": "María"}]

    def test_write_overwrites_wholesale(self, session_factory):
        gateway = SqlSlotGateway(session_factory)
        gateway.write("demo", [1, 2, 3])
        gateway.write("demo", [4])
        assert gateway.read("demo") == [4]
        db = session_factory()
        try:
            assert db.query(StorageSlot).filter(StorageSlot.slot == "demo").count() == 1
        finally:
            db.close()

    def test_invalid_json_reads_none(self, session_factory):
        db = session_factory()
        db.add(StorageSlot(slot="broken", payload="{not json"))
        db.commit()
        db.close()
        assert SqlSlotGateway(session_factory).read("broken") is None


class TestCollections:
    def test_save_uses_camel_case(self):
        gateway = MagicMock()
        save_collection(gateway, CUSTOMERS_SLOT, [make_customer()])
        slot, payload = gateway.write.call_args.args
        assert slot == CUSTOMERS_SLOT
        assert payload[0]["totalVisits"] == 1
        assert payload[0]["hasDebt"] is False

    def test_save_failure_is_logged_not_raised(self):
        gateway = MagicMock()
        gateway.write.side_effect = RuntimeError("locked")
        save_collection(gateway, CUSTOMERS_SLOT, [make_customer()])

    def test_round_trip_through_database(self, session_factory):
        gateway = SqlSlotGateway(session_factory)
        customers = [make_customer("C-1"), make_customer("C-2", "Luis")]
        save_collection(gateway, CUSTOMERS_SLOT, customers)
        loaded = load_collection(gateway, CUSTOMERS_SLOT, Customer, list)
        assert loaded == customers

    def test_missing_slot_seeds_and_writes(self):
        gateway = MagicMock()
        gateway.read.return_value = None
        seeded = load_collection(gateway, CUSTOMERS_SLOT, Customer, lambda: [make_customer()])
        assert seeded == [make_customer()]
        gateway.write.assert_called_once()

    def test_non_list_slot_reseeded(self):
        gateway = MagicMock()
        gateway.read.return_value = {"oops": True}
        loaded = load_collection(gateway, CUSTOMERS_SLOT, Customer, lambda: [make_customer()])
        assert len(loaded) == 1

    def test_invalid_records_dropped(self):
        gateway = MagicMock()
        gateway.read.return_value = [{"id": "C-1", "name": "Ana"}, {"name": "sin id"}]
        loaded = load_collection(gateway, CUSTOMERS_SLOT, Customer, list)
        assert [c.id for c in loaded] == ["C-1"]
        gateway.write.assert_not_called()
