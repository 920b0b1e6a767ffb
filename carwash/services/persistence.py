# carwash/services/persistence.py
"""
Persistence gateway — durable key-value slots holding JSON documents.

Each slot stores one whole collection (services, customers, conversations)
and is overwritten wholesale on every write. Reads happen once at startup.
Backed by the storage_slots table through SQLAlchemy.
"""

from datetime import datetime
from typing import Any, Callable, Optional
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session
from carwash.models.storage_slot import StorageSlot
from carwash.utils.json_parser import dump_json, safe_parse_json
from carwash.utils.logger import get_logger

logger = get_logger(__name__)

SERVICES_SLOT = "carwash_services"
CUSTOMERS_SLOT = "carwash_customers"
CONVERSATIONS_SLOT = "carwash_conversations"


class SqlSlotGateway:
    """Reads and overwrites JSON slots. One short-lived session per call."""

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def read(self, slot: str) -> Optional[Any]:
        """Decoded slot contents, or None when the slot is missing or unreadable."""
        db = self._session_factory()
        try:
            row = db.query(StorageSlot).filter(StorageSlot.slot == slot).first()
            if row is None:
                return None
            data = safe_parse_json(row.payload)
            if data is None:
                logger.error(f"[STORAGE] Slot {slot} holds invalid JSON, ignoring it")
            return data
        finally:
            db.close()

    def write(self, slot: str, payload: Any) -> None:
        db = self._session_factory()
        try:
            row = db.query(StorageSlot).filter(StorageSlot.slot == slot).first()
            if row is None:
                row = StorageSlot(slot=slot)
                db.add(row)
            row.payload = dump_json(payload)
            row.updated_at = datetime.utcnow()
            db.commit()
            logger.debug(f"[STORAGE] Wrote {slot} ({len(row.payload)} bytes)")
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


def load_collection(gateway, slot: str, model: type[BaseModel], seed_factory: Callable[[], list]) -> list:
    """
    Read one slot into model instances. A missing (or non-list) slot is seeded
    with sample data and written back. Records that fail validation are dropped.
    """
    data = gateway.read(slot)
    if not isinstance(data, list):
        if data is not None:
            logger.error(f"[STORAGE] Slot {slot} is not a list, reseeding")
        records = seed_factory()
        logger.info(f"[STORAGE] Seeded {slot} with {len(records)} sample records")
        save_collection(gateway, slot, records)
        return records

    records = []
    for item in data:
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"[STORAGE] Dropping invalid record in {slot}: {e.errors()[:1]}")
    logger.info(f"[STORAGE] Loaded {len(records)} records from {slot}")
    return records


def save_collection(gateway, slot: str, records: list[BaseModel]) -> None:
    """Overwrite a slot with the whole collection. Failures are logged, not raised."""
    payload = [r.model_dump(mode="json", by_alias=True) for r in records]
    try:
        gateway.write(slot, payload)
    except Exception as e:
        logger.error(f"[STORAGE] Failed to write {slot}: {e}", exc_info=True)
