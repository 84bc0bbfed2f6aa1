"""GuidanceService end-to-end tests with the Gemini SDK mocked.

get_guidance() must resolve to a GuidanceResult on every path.
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from ezrecycle.advisory_client import AdvisoryClient
from ezrecycle.errors import OracleCallFailed
from ezrecycle.guidance import GuidanceService
from ezrecycle.logic.interpreter import UNABLE_TO_DETERMINE
from ezrecycle.models import GuidanceResult


def _service_with_reply(reply=None, error=None) -> tuple[GuidanceService, AsyncMock]:
    client = MagicMock(spec=AdvisoryClient)
    client.request_guidance = AsyncMock(return_value=reply, side_effect=error)
    return GuidanceService(client), client.request_guidance


class TestHappyPath:
    def test_returns_parsed_guidance(self, water_bottle, guidance_reply, guidance_dict):
        service, request = _service_with_reply(guidance_reply)
        result = asyncio.run(service.get_guidance(water_bottle))
        assert isinstance(result, GuidanceResult)
        assert result.to_json_dict() == guidance_dict

    def test_prompt_contains_built_description(self, water_bottle, guidance_reply):
        service, request = _service_with_reply(guidance_reply)
        asyncio.run(service.get_guidance(water_bottle))
        prompt = request.await_args.args[0]
        assert "Item: water bottle\nMaterials: Plastic\nPlastic type/recycling code: #1 PET" in prompt

    def test_single_oracle_call_per_submission(self, water_bottle, guidance_reply):
        service, request = _service_with_reply(guidance_reply)
        asyncio.run(service.get_guidance(water_bottle))
        assert request.await_count == 1


class TestDegradedPaths:
    def test_scenario_d_no_secret(self, monkeypatch, water_bottle):
        """No key: degraded result, and the SDK is never constructed."""
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        with patch("ezrecycle.advisory_client.genai.Client") as client_cls:
            service = GuidanceService(AdvisoryClient())
            result = asyncio.run(service.get_guidance(water_bottle))
        client_cls.assert_not_called()
        assert result.analysis.recyclability == UNABLE_TO_DETERMINE
        assert "GEMINI_API_KEY not set" in result.analysis.item

    def test_oracle_call_failed(self, water_bottle):
        service, _ = _service_with_reply(error=OracleCallFailed("Gemini API error: 429"))
        result = asyncio.run(service.get_guidance(water_bottle))
        assert result.analysis.recyclability == UNABLE_TO_DETERMINE
        assert "429" in result.analysis.item

    def test_unexpected_client_error_still_degrades(self, water_bottle):
        service, _ = _service_with_reply(error=KeyError("boom"))
        result = asyncio.run(service.get_guidance(water_bottle))
        assert result.analysis.recyclability == UNABLE_TO_DETERMINE

    def test_prose_only_reply(self, water_bottle):
        service, _ = _service_with_reply("I cannot help with that.")
        result = asyncio.run(service.get_guidance(water_bottle))
        assert "I cannot help with that." in result.analysis.item

    def test_sdk_failure_through_real_client(self, water_bottle, mock_genai_client):
        mock_genai_client.aio.models.generate_content.side_effect = RuntimeError("network down")
        with patch("ezrecycle.advisory_client.genai.Client", return_value=mock_genai_client):
            service = GuidanceService(AdvisoryClient(api_key="test-key"))
            result = asyncio.run(service.get_guidance(water_bottle))
        assert result.analysis.recyclability == UNABLE_TO_DETERMINE
        assert "network down" in result.analysis.item

    def test_real_client_success(self, water_bottle, mock_genai_client, make_genai_response, guidance_dict):
        mock_genai_client.aio.models.generate_content.return_value = make_genai_response(
            "```json\n" + json.dumps(guidance_dict) + "\n```"
        )
        with patch("ezrecycle.advisory_client.genai.Client", return_value=mock_genai_client):
            service = GuidanceService(AdvisoryClient(api_key="test-key"))
            result = asyncio.run(service.get_guidance(water_bottle))
        assert result.analysis.material == "PET plastic"

    def test_pathologically_nested_reply_degrades(self, water_bottle):
        service, _ = _service_with_reply('{"a":' * 100000 + "1" + "}" * 100000)
        result = asyncio.run(service.get_guidance(water_bottle))
        assert result.analysis.recyclability == UNABLE_TO_DETERMINE
