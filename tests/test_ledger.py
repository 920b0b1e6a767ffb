# tests/test_ledger.py
"""Unit tests for LedgerStore: intake, edits, workflow and persistence calls."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from datetime import datetime
from unittest.mock import MagicMock
from carwash.schemas.customer import CustomerCreate
from carwash.schemas.service import ServiceCreate, ServiceStatus, ServiceType, ServiceUpdate
from carwash.services.ledger import LedgerError, LedgerStore, TransitionError
from carwash.services.metrics import compute_metrics
from carwash.services.persistence import CUSTOMERS_SLOT, SERVICES_SLOT


FIXED_NOW = datetime(2026, 10, 19, 14, 30)


def make_gateway(services=None, customers=None):
    gateway = MagicMock()
    slots = {SERVICES_SLOT: services if services is not None else [],
             CUSTOMERS_SLOT: customers if customers is not None else []}
    gateway.read.side_effect = lambda slot: slots.get(slot)
    return gateway


def make_store(gateway=None):
    store = LedgerStore(gateway or make_gateway(), clock=lambda: FIXED_NOW)
    store.load()
    return store


def make_intake(**overrides):
    data = dict(
        plate="abc-123",
        customer_name="Ana Ruiz",
        phone="987654321",
        service_type=ServiceType.PREMIUM,
        price=45.0,
    )
    data.update(overrides)
    return ServiceCreate(**data)


def written_slots(gateway):
    return [c.args[0] for c in gateway.write.call_args_list]


class TestLoad:
    def test_empty_slots_stay_empty(self):
        store = make_store()
        assert store.services == []
        assert store.customers == []

    def test_missing_slots_are_seeded(self):
        gateway = MagicMock()
        gateway.read.return_value = None
        store = make_store(gateway)
        assert len(store.services) == 5
        assert len(store.customers) == 5
        assert set(written_slots(gateway)) == {SERVICES_SLOT, CUSTOMERS_SLOT}

    def test_invalid_records_dropped(self):
        gateway = make_gateway(services=[{"id": "BROKEN"}])
        store = make_store(gateway)
        assert store.services == []


class TestAddService:
    def test_new_ticket_defaults(self):
        store = make_store()
        record = store.add_service(make_intake())
        assert record.id.startswith("TKT-")
        assert record.plate == "ABC-123"
        assert record.status == ServiceStatus.WAITING
        assert record.entry_time == "14:30"
        assert record.customer_id is not None

    def test_prepends_and_creates_customer(self):
        store = make_store()
        first = store.add_service(make_intake(id="T1"))
        second = store.add_service(make_intake(id="T2", plate="ZZZ-999", customer_name="Otro"))
        assert [s.id for s in store.services] == ["T2", "T1"]
        assert len(store.customers) == 2
        assert first.customer_id != second.customer_id

    def test_repeat_customer_accumulates(self):
        store = make_store()
        store.add_service(make_intake(id="T1", price=45.0))
        store.add_service(make_intake(id="T2", price=25.0))
        assert len(store.customers) == 1
        customer = store.customers[0]
        assert customer.total_visits == 2
        assert customer.total_spent == 70.0

    def test_writes_both_slots(self):
        gateway = make_gateway()
        store = make_store(gateway)
        store.add_service(make_intake())
        assert written_slots(gateway) == [SERVICES_SLOT, CUSTOMERS_SLOT]

    def test_duplicate_id_rejected(self):
        store = make_store()
        store.add_service(make_intake(id="T1"))
        with pytest.raises(LedgerError):
            store.add_service(make_intake(id="T1"))
        assert len(store.services) == 1

    def test_blank_plate_or_name_rejected(self):
        store = make_store()
        with pytest.raises(LedgerError):
            store.add_service(ServiceCreate.model_construct(plate="  ", customer_name="Ana", price=25.0))
        with pytest.raises(LedgerError):
            store.add_service(ServiceCreate.model_construct(plate="ABC-123", customer_name="", price=25.0))
        assert store.services == []
        assert store.customers == []

    def test_debt_intake_flags_customer(self):
        store = make_store()
        record = store.add_service(make_intake(id="T1", status=ServiceStatus.DEBT))
        assert store.get_customer(record.customer_id).has_debt is True

    def test_write_failure_keeps_memory_state(self):
        gateway = make_gateway()
        gateway.write.side_effect = RuntimeError("disk full")
        store = make_store(gateway)
        record = store.add_service(make_intake())
        assert store.get_service(record.id) == record


class TestRemoveService:
    def test_customer_aggregates_untouched(self):
        gateway = make_gateway()
        store = make_store(gateway)
        record = store.add_service(make_intake(id="T1"))
        before = store.customers
        gateway.write.reset_mock()

        assert store.remove_service(record.id) is True
        assert store.services == []
        assert store.customers == before
        assert written_slots(gateway) == [SERVICES_SLOT]

    def test_missing_returns_false(self):
        gateway = make_gateway()
        store = make_store(gateway)
        assert store.remove_service("NOPE") is False
        gateway.write.assert_not_called()


class TestUpdateService:
    def test_edit_in_place_keeps_position_and_visits(self):
        store = make_store()
        store.add_service(make_intake(id="T1"))
        store.add_service(make_intake(id="T2"))
        updated = store.update_service("T1", ServiceUpdate(notes="rayón puerta"))
        assert updated.notes == "rayón puerta"
        assert [s.id for s in store.services] == ["T2", "T1"]
        assert store.customers[0].total_visits == 2

    def test_price_change_moves_total_spent(self):
        store = make_store()
        store.add_service(make_intake(id="T1", price=45.0))
        store.update_service("T1", ServiceUpdate(price=60.0))
        assert store.customers[0].total_spent == 60.0

    def test_explicit_null_ignored_except_notes(self):
        store = make_store()
        store.add_service(make_intake(id="T1", notes="algo"))
        updated = store.update_service("T1", ServiceUpdate(price=None, notes=None))
        assert updated.price == 45.0
        assert updated.notes is None

    def test_missing_returns_none(self):
        assert make_store().update_service("NOPE", ServiceUpdate(notes="x")) is None

    def test_status_edit_to_delivered_stamps_exit(self):
        store = make_store()
        store.add_service(make_intake(id="T1"))
        updated = store.update_service("T1", ServiceUpdate(status=ServiceStatus.DELIVERED))
        assert updated.exit_time == "14:30"


class TestWorkflow:
    def test_guided_path_and_metric_deltas(self):
        store = make_store()
        store.add_service(make_intake(id="T1", price=45.0))

        m = compute_metrics(store.services)
        assert (m.cars_in_process, m.cars_ready, m.revenue_today) == (1, 0, 0.0)

        store.start("T1")
        m = compute_metrics(store.services)
        assert (m.cars_in_process, m.cars_ready, m.revenue_today) == (1, 0, 0.0)

        store.finish("T1")
        m = compute_metrics(store.services)
        assert (m.cars_in_process, m.cars_ready, m.revenue_today) == (0, 1, 45.0)

        delivered = store.deliver("T1")
        m = compute_metrics(store.services)
        assert (m.cars_in_process, m.cars_ready, m.revenue_today) == (0, 0, 45.0)
        assert delivered.status == ServiceStatus.DELIVERED
        assert delivered.exit_time == "14:30"

    def test_guided_action_from_wrong_status(self):
        store = make_store()
        store.add_service(make_intake(id="T1"))
        with pytest.raises(TransitionError):
            store.finish("T1")
        assert store.get_service("T1").status == ServiceStatus.WAITING

    def test_guided_action_missing_ticket(self):
        assert make_store().start("NOPE") is None

    def test_set_status_bypasses_workflow(self):
        store = make_store()
        store.add_service(make_intake(id="T1"))
        updated = store.set_status("T1", ServiceStatus.READY)
        assert updated.status == ServiceStatus.READY

    def test_debt_flag_follows_tickets(self):
        store = make_store()
        record = store.add_service(make_intake(id="T1"))
        store.set_status("T1", ServiceStatus.DEBT)
        assert store.get_customer(record.customer_id).has_debt is True
        store.set_status("T1", ServiceStatus.DELIVERED)
        assert store.get_customer(record.customer_id).has_debt is False


class TestCustomersAndSearch:
    def test_add_customer_prepends(self):
        store = make_store()
        store.add_service(make_intake(id="T1"))
        customer = store.add_customer(CustomerCreate(name="Luis Vega", plate="LLL-111"))
        assert store.customers[0] == customer
        assert customer.id.startswith("C-")

    def test_manual_customer_plate_matches_later_tickets(self):
        store = make_store()
        customer = store.add_customer(CustomerCreate(name="Luis Vega", plate="abc-123"))
        assert customer.plate == "ABC-123"
        record = store.add_service(make_intake(plate="abc-123", customer_name="Otro"))
        assert len(store.customers) == 1
        assert record.customer_id == customer.id
        assert store.customers[0].total_visits == 1

    def test_add_customer_duplicate_id(self):
        store = make_store()
        store.add_customer(CustomerCreate(id="C-1", name="Luis"))
        with pytest.raises(LedgerError):
            store.add_customer(CustomerCreate(id="C-1", name="Otro"))

    def test_remove_customer_keeps_tickets(self):
        store = make_store()
        record = store.add_service(make_intake(id="T1"))
        assert store.remove_customer(record.customer_id) is True
        assert store.customers == []
        assert len(store.services) == 1
        assert store.remove_customer(record.customer_id) is False

    def test_search_services(self):
        store = make_store()
        store.add_service(make_intake(id="T1"))
        store.add_service(make_intake(id="T2", plate="ZZZ-999", customer_name="Pedro"))
        assert [s.id for s in store.search_services("zzz")] == ["T2"]
        assert [s.id for s in store.search_services("ana")] == ["T1"]
        assert len(store.search_services("")) == 2

    def test_services_for_customer(self):
        store = make_store()
        first = store.add_service(make_intake(id="T1"))
        store.add_service(make_intake(id="T2", plate="ZZZ-999", customer_name="Pedro"))
        assert [s.id for s in store.services_for_customer(first.customer_id)] == ["T1"]

    def test_reset_restores_sample_data(self):
        store = make_store()
        store.add_service(make_intake(id="T1"))
        store.reset()
        assert [s.id for s in store.services][0] == "TKT-0005"
        assert len(store.customers) == 5
