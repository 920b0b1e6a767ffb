# carwash/services/assistant.py
"""
Generative text assistant (Gemini generateContent over REST).

Two uses:
  - daily operations report from the metrics snapshot + recent tickets
  - suggested chat reply from a conversation + the customer's tickets

Strictly downstream of the ledger: reads snapshots, returns display text.
Every failure (no API key, network, HTTP error, empty answer) degrades to a
fixed message; nothing is raised to the caller and nothing is retried.
"""

import json
from typing import Optional
import httpx
from carwash.config import settings
from carwash.schemas.conversation import Message
from carwash.schemas.dashboard import MetricsSnapshot
from carwash.schemas.service import ServiceRecord
from carwash.utils.json_parser import get_nested
from carwash.utils.logger import get_logger

logger = get_logger(__name__)

REPLY_NO_KEY = "Error: API Key no configurada."
REPLY_EMPTY = "Lo siento, no pude verificar el estado del vehículo."
REPLY_FAILED = "Error de conexión con el sistema CarWash."

REPORT_NO_KEY = "Error: API Key missing."
REPORT_EMPTY = "No se pudo generar el reporte."
REPORT_FAILED = "Error al generar el reporte diario."

REPORT_SERVICE_LIMIT = 10


class AssistantError(Exception):
    pass


async def _generate(prompt: str) -> Optional[str]:
    """Single generateContent call. Returns the answer text (None if empty)."""
    url = f"{settings.GEMINI_BASE_URL}/models/{settings.GEMINI_MODEL}:generateContent"
    body = {"contents": [{"parts": [{"text": prompt}]}]}
    headers = {"x-goog-api-key": settings.GEMINI_API_KEY or ""}

    try:
        async with httpx.AsyncClient(timeout=settings.GEMINI_TIMEOUT_SECONDS) as client:
            response = await client.post(url, json=body, headers=headers)
    except httpx.HTTPError as e:
        raise AssistantError(f"request failed: {e}") from e

    if response.status_code != 200:
        raise AssistantError(f"HTTP {response.status_code}: {response.text[:200]}")

    parts = get_nested(response.json(), "candidates", 0, "content", "parts", default=[])
    text = "".join(p.get("text", "") for p in parts if isinstance(p, dict)).strip()
    return text or None


def _services_json(services: list[ServiceRecord]) -> str:
    return json.dumps([s.model_dump(mode="json", by_alias=True) for s in services], ensure_ascii=False, indent=2)


def build_reply_prompt(
    messages: list[Message], customer_name: str, plate: Optional[str], services: list[ServiceRecord]
) -> str:
    history = "\n".join(f"{m.sender.upper()}: {m.content}" for m in messages)
    context = _services_json(services) if services else "No se encontraron servicios activos para esta placa/nombre."
    return f"""
Eres "AutoBot", el asistente virtual de "{settings.BUSINESS_NAME}", un centro de lavado y detailing automotriz.
Tu objetivo es informar el estado del auto y agendar servicios.

Cliente: {customer_name}
Placa identificada: {plate or "No detectada"}
Servicios del cliente (JSON): {context}

Conversación:
{history}

Reglas:
1. Si preguntan por su auto, revisa el campo status del JSON:
   READY = puede pasar a recogerlo; IN_PROCESS = pide paciencia; WAITING = pronto entra a lavado.
2. Si no hay servicio activo, ofrece precios (Lavado Básico S/25, Lavado Premium S/45).
3. Si el auto está listo, recuerda que aceptamos Yape/Plin.
4. Tono amable, rápido y servicial. Devuelve solo el texto de la respuesta.
""".strip()


def build_report_prompt(metrics: MetricsSnapshot, services: list[ServiceRecord]) -> str:
    metrics_json = json.dumps(metrics.model_dump(by_alias=True), indent=2)
    return f"""
Genera un Reporte Operativo Diario en Markdown para "{settings.BUSINESS_NAME}".

Métricas del día:
{metrics_json}

Servicios del día (más recientes primero):
{_services_json(services[:REPORT_SERVICE_LIMIT])}

Secciones:
# Reporte Diario - {settings.BUSINESS_NAME}
## Resumen Ejecutivo (flujo de autos y facturación)
## Eficiencia Operativa (autos lavados, cuellos de botella si hay muchos en espera)
## Finanzas (ingresos estimados, deudas pendientes)
## Recomendaciones (cómo mejorar el flujo de lavado mañana)
""".strip()


async def generate_smart_reply(
    messages: list[Message],
    customer_name: str,
    plate: Optional[str],
    services: Optional[list[ServiceRecord]] = None,
) -> str:
    if not settings.GEMINI_API_KEY:
        return REPLY_NO_KEY
    prompt = build_reply_prompt(messages, customer_name, plate, services or [])
    try:
        text = await _generate(prompt)
    except Exception as e:
        logger.error(f"[ASSISTANT] Reply generation failed: {e}")
        return REPLY_FAILED
    return text or REPLY_EMPTY


async def generate_daily_report(metrics: MetricsSnapshot, services: list[ServiceRecord]) -> str:
    if not settings.GEMINI_API_KEY:
        return REPORT_NO_KEY
    prompt = build_report_prompt(metrics, services)
    try:
        text = await _generate(prompt)
    except Exception as e:
        logger.error(f"[ASSISTANT] Report generation failed: {e}")
        return REPORT_FAILED
    logger.info(f"[ASSISTANT] Daily report generated ({len(text or '')} chars)")
    return text or REPORT_EMPTY
