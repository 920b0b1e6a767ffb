# tests/test_assistant.py
"""Tests for the generative assistant: fixed fallbacks and response parsing."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest
from unittest.mock import AsyncMock, patch
from carwash import seed
from carwash.config import settings
from carwash.services import assistant
from carwash.services.metrics import compute_metrics


def gemini_response(text, status_code=200):
    payload = {"candidates": [{"content": {"parts": [{"text": text}]}}]}
    return httpx.Response(status_code, json=payload, request=httpx.Request("POST", "https://example.test"))


class TestSmartReply:
    @pytest.mark.asyncio
    async def test_no_api_key(self):
        with patch.object(settings, "GEMINI_API_KEY", ""):
            reply = await assistant.generate_smart_reply([], "Carlos", "ABC-123")
        assert reply == assistant.REPLY_NO_KEY

    @pytest.mark.asyncio
    async def test_returns_model_text(self):
        conv = seed.sample_conversations()[0]
        with patch.object(settings, "GEMINI_API_KEY", "test-key"), \
             patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as post:
            post.return_value = gemini_response("  Su auto está en proceso.  ")
            reply = await assistant.generate_smart_reply(conv.messages, conv.customer_name, "ABC-123", seed.sample_services()[:1])

        assert reply == "Su auto está en proceso."
        prompt = post.call_args.kwargs["json"]["contents"][0]["parts"][0]["text"]
        assert "ABC-123" in prompt
        assert "TKT-0005" in prompt
        assert post.call_args.kwargs["headers"]["x-goog-api-key"] == "test-key"

    @pytest.mark.asyncio
    async def test_empty_answer(self):
        with patch.object(settings, "GEMINI_API_KEY", "test-key"), \
             patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as post:
            post.return_value = gemini_response("")
            reply = await assistant.generate_smart_reply([], "Carlos", None)
        assert reply == assistant.REPLY_EMPTY

    @pytest.mark.asyncio
    async def test_network_error(self):
        with patch.object(settings, "GEMINI_API_KEY", "test-key"), \
             patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as post:
            post.side_effect = httpx.ConnectError("unreachable")
            reply = await assistant.generate_smart_reply([], "Carlos", None)
        assert reply == assistant.REPLY_FAILED


class TestDailyReport:
    @pytest.mark.asyncio
    async def test_no_api_key(self):
        services = seed.sample_services()
        with patch.object(settings, "GEMINI_API_KEY", None):
            report = await assistant.generate_daily_report(compute_metrics(services), services)
        assert report == assistant.REPORT_NO_KEY

    @pytest.mark.asyncio
    async def test_http_error(self):
        services = seed.sample_services()
        with patch.object(settings, "GEMINI_API_KEY", "test-key"), \
             patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as post:
            post.return_value = gemini_response("quota", status_code=429)
            report = await assistant.generate_daily_report(compute_metrics(services), services)
        assert report == assistant.REPORT_FAILED

    @pytest.mark.asyncio
    async def test_report_text(self):
        services = seed.sample_services()
        with patch.object(settings, "GEMINI_API_KEY", "test-key"), \
             patch.object(httpx.AsyncClient, "post", new_callable=AsyncMock) as post:
            post.return_value = gemini_response("# Reporte Diario")
            report = await assistant.generate_daily_report(compute_metrics(services), services)
        assert report == "# Reporte Diario"

    def test_report_prompt_includes_metrics(self):
        services = seed.sample_services()
        prompt = assistant.build_report_prompt(compute_metrics(services), services)
        assert "revenueToday" in prompt
        assert "TKT-0001" in prompt
