# carwash/schemas/conversation.py
from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class Channel(str, Enum):
    WHATSAPP = "WhatsApp"
    INSTAGRAM = "Instagram"
    EMAIL = "Email"


class Message(BaseModel):
    id: str
    sender: Literal["user", "agent", "system"]
    content: str
    timestamp: str


class Conversation(BaseModel):
    id: str
    customer_name: str
    plate: Optional[str] = None
    channel: Channel
    last_message: str = ""
    unread_count: int = 0
    messages: list[Message] = []
    status: Literal["active", "archived"] = "active"

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MessageCreate(BaseModel):
    content: str = Field(min_length=1)


class ReplySuggestion(BaseModel):
    conversation_id: str
    plate: Optional[str]
    matched_services: int
    suggestion: str
