# carwash/models/storage_slot.py
"""
Durable key-value slots behind the persistence gateway.
One row per collection (services, customers, conversations); the value is
the whole collection serialized as JSON and is overwritten on every write.
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, Text
from carwash.database import Base


class StorageSlot(Base):
    __tablename__ = "storage_slots"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slot = Column(String(100), unique=True, nullable=False, index=True)
    payload = Column(Text, nullable=False)       # JSON document
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<StorageSlot {self.slot} bytes={len(self.payload or '')}>"
