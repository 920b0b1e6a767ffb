# carwash/services/messaging.py
"""
Outbound WhatsApp deep links (wa.me). Output only: the client opens the
link, no response comes back to the ledger.
"""

import re
from urllib.parse import quote

COUNTRY_PREFIX = "51"      # Peru
LOCAL_MOBILE_DIGITS = 9
WA_BASE_URL = "https://wa.me"


def normalize_phone(phone: str) -> str:
    """Keep digits only; 9-digit local mobiles get the country prefix."""
    digits = re.sub(r"\D", "", phone or "")
    if len(digits) == LOCAL_MOBILE_DIGITS:
        digits = COUNTRY_PREFIX + digits
    return digits


def build_whatsapp_link(phone: str, text: str = "") -> str:
    url = f"{WA_BASE_URL}/{normalize_phone(phone)}"
    if text:
        url += f"?text={quote(text, safe='')}"
    return url
