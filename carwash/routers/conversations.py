# carwash/routers/conversations.py
"""Unified inbox — threads, agent replies and AI reply suggestions."""

from fastapi import APIRouter, Depends, HTTPException
from carwash.dependencies import get_inbox, get_ledger
from carwash.schemas.conversation import Conversation, MessageCreate, ReplySuggestion
from carwash.schemas.service import WhatsAppLinkOut
from carwash.services.assistant import generate_smart_reply
from carwash.services.inbox import InboxStore, detect_plate, find_contact_phone, find_relevant_services
from carwash.services.ledger import LedgerStore
from carwash.services.messaging import build_whatsapp_link, normalize_phone

router = APIRouter()


def _get_or_404(inbox: InboxStore, conversation_id: str) -> Conversation:
    conversation = inbox.get(conversation_id)
    if not conversation:
        raise HTTPException(status_code=404, detail=f"Conversation '{conversation_id}' not found")
    return conversation


@router.get("/conversations", response_model=list[Conversation])
def list_conversations(inbox: InboxStore = Depends(get_inbox)):
    return inbox.conversations


@router.delete("/conversations/{conversation_id}")
def remove_conversation(conversation_id: str, inbox: InboxStore = Depends(get_inbox)):
    removed = inbox.remove(conversation_id)
    return {"status": "removed" if removed else "not_found", "id": conversation_id}


@router.post("/conversations/{conversation_id}/messages", response_model=Conversation, summary="Send an agent reply")
def send_message(conversation_id: str, body: MessageCreate, inbox: InboxStore = Depends(get_inbox)):
    updated = inbox.send_message(conversation_id, body.content.strip())
    if updated is None:
        raise HTTPException(status_code=404, detail=f"Conversation '{conversation_id}' not found")
    return updated


@router.post("/conversations/{conversation_id}/suggest-reply", response_model=ReplySuggestion)
async def suggest_reply(
    conversation_id: str,
    inbox: InboxStore = Depends(get_inbox),
    ledger: LedgerStore = Depends(get_ledger),
):
    """Draft a reply using the customer's tickets as context (never saved automatically)."""
    conversation = _get_or_404(inbox, conversation_id)
    plate = detect_plate(conversation)
    services = find_relevant_services(conversation, ledger.services, plate)
    suggestion = await generate_smart_reply(conversation.messages, conversation.customer_name, plate, services)
    return ReplySuggestion(
        conversation_id=conversation_id,
        plate=plate,
        matched_services=len(services),
        suggestion=suggestion,
    )


@router.get("/conversations/{conversation_id}/whatsapp", response_model=WhatsAppLinkOut)
def conversation_whatsapp(
    conversation_id: str,
    text: str = "",
    phone: str = None,
    inbox: InboxStore = Depends(get_inbox),
    ledger: LedgerStore = Depends(get_ledger),
):
    """wa.me link for a reply. Phone comes from the customer's tickets unless given."""
    conversation = _get_or_404(inbox, conversation_id)
    phone = phone or find_contact_phone(conversation, ledger.services)
    if not phone:
        raise HTTPException(status_code=404, detail="No phone number on record for this conversation")
    return WhatsAppLinkOut(phone=normalize_phone(phone), url=build_whatsapp_link(phone, text))
