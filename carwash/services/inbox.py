# carwash/services/inbox.py
"""
Unified inbox — customer conversations from WhatsApp / Instagram / Email.
Stored in its own slot, independent of the service/customer ledger; it only
reads tickets to give the assistant context about the customer's car.
"""

import re
import threading
import uuid
from datetime import datetime
from typing import Callable, Optional
from carwash import seed
from carwash.schemas.conversation import Conversation, Message
from carwash.schemas.service import ServiceRecord
from carwash.services.persistence import CONVERSATIONS_SLOT, load_collection, save_collection
from carwash.utils.logger import get_logger

logger = get_logger(__name__)

PLATE_PATTERN = re.compile(r"[A-Z]{3}-?\d{3,4}", re.IGNORECASE)


class InboxStore:
    def __init__(self, gateway, clock: Callable[[], datetime] = datetime.now):
        self._gateway = gateway
        self._clock = clock
        self._lock = threading.RLock()
        self._conversations: list[Conversation] = []

    def load(self) -> None:
        with self._lock:
            self._conversations = load_collection(
                self._gateway, CONVERSATIONS_SLOT, Conversation, seed.sample_conversations
            )

    def reset(self) -> None:
        with self._lock:
            self._conversations = seed.sample_conversations()
            self._save()

    @property
    def conversations(self) -> list[Conversation]:
        with self._lock:
            return list(self._conversations)

    def get(self, conversation_id: str) -> Optional[Conversation]:
        with self._lock:
            return next((c for c in self._conversations if c.id == conversation_id), None)

    def remove(self, conversation_id: str) -> bool:
        with self._lock:
            remaining = [c for c in self._conversations if c.id != conversation_id]
            if len(remaining) == len(self._conversations):
                return False
            self._conversations = remaining
            self._save()
        logger.info(f"[INBOX] Conversation {conversation_id} deleted")
        return True

    def send_message(self, conversation_id: str, content: str) -> Optional[Conversation]:
        """Append an agent reply; the thread counts as read afterwards."""
        with self._lock:
            conversation = self.get(conversation_id)
            if conversation is None:
                return None
            message = Message(
                id=uuid.uuid4().hex[:12],
                sender="agent",
                content=content,
                timestamp=self._clock().strftime("%H:%M"),
            )
            updated = conversation.model_copy(update={
                "messages": [*conversation.messages, message],
                "last_message": content,
                "unread_count": 0,
            })
            self._conversations = [updated if c.id == conversation_id else c for c in self._conversations]
            self._save()
        return updated

    def _save(self) -> None:
        save_collection(self._gateway, CONVERSATIONS_SLOT, self._conversations)


def detect_plate(conversation: Conversation) -> Optional[str]:
    """Plate from the conversation profile, else the first one mentioned in the chat."""
    if conversation.plate:
        return conversation.plate
    history = " ".join(m.content for m in conversation.messages)
    match = PLATE_PATTERN.search(history)
    return match.group(0).upper() if match else None


def find_relevant_services(
    conversation: Conversation, services: list[ServiceRecord], plate: Optional[str] = None
) -> list[ServiceRecord]:
    """Tickets for the detected plate (dash-insensitive), else by customer name."""
    if plate:
        wanted = plate.replace("-", "").upper()
        return [s for s in services if s.plate.replace("-", "") == wanted]
    name = conversation.customer_name.lower()
    return [s for s in services if name in s.customer_name.lower()]


def find_contact_phone(conversation: Conversation, services: list[ServiceRecord]) -> Optional[str]:
    """Phone of the first ticket matching the conversation's plate or customer name."""
    for s in services:
        if (conversation.plate and s.plate == conversation.plate) or s.customer_name == conversation.customer_name:
            if s.phone:
                return s.phone
    return None
