import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from studypath.advisory.agent import AdvisoryAgent
from studypath.advisory.client import GeminiClient
from studypath.advisory.flow import ai_enabled_from_env, run_advisory
from studypath.advisory.prompts import build_prompt
from studypath.advisory.schemas import CareerResult, Domain, ProfileResult
from studypath.errors import MalformedContentError, SchemaViolationError, TransportError

PROFILE = {
    "gpa": 3.8,
    "toeflScore": 100,
    "satGreScore": 320,
    "budget": 50000,
    "fieldOfStudy": "CS",
    "extracurriculars": "debate club",
}

PROFILE_REPLY = {
    "strengthScore": 82,
    "universityMatches": [{"name": "X", "program": "MS CS", "cost": 40000, "matchScore": 90}],
}


def gemini_envelope(payload) -> str:
    text = payload if isinstance(payload, str) else json.dumps(payload)
    return json.dumps({"candidates": [{"content": {"parts": [{"text": text}]}}]})


def fake_client(raw: str) -> MagicMock:
    client = MagicMock()
    client.invoke = AsyncMock(return_value=raw)
    return client


@pytest.mark.asyncio
async def test_evaluate_profile_scenario():
    client = fake_client(gemini_envelope(PROFILE_REPLY))
    agent = AdvisoryAgent(client=client)

    result = await agent.evaluate_profile(PROFILE)

    assert isinstance(result, ProfileResult)
    assert result.strength_score == 82
    assert len(result.university_matches) == 1
    client.invoke.assert_called_once()
    prompt = client.invoke.call_args.args[0]
    assert prompt == build_prompt(Domain.PROFILE, PROFILE)


@pytest.mark.asyncio
async def test_career_guidance_uses_career_shape():
    reply = {"careerPaths": ["Data Scientist"], "jobMatches": ["Microsoft"], "immigrationInfo": "OPT + STEM extension"}
    agent = AdvisoryAgent(client=fake_client(gemini_envelope(reply)))

    result = await agent.career_guidance(
        {"fieldOfStudy": "CS", "careerInterests": "data", "preferredLocation": "Seattle"}
    )

    assert isinstance(result, CareerResult)
    assert result.job_matches == ["Microsoft"]


@pytest.mark.asyncio
async def test_timeout_is_forwarded_to_client():
    client = fake_client(gemini_envelope(PROFILE_REPLY))
    agent = AdvisoryAgent(client=client, timeout=12.5)

    await agent.advise("profile", PROFILE)

    assert client.invoke.call_args.kwargs["timeout"] == 12.5


@pytest.mark.asyncio
async def test_http_500_surfaces_transport_error():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    client = GeminiClient(api_key="k", transport=httpx.MockTransport(handler))
    agent = AdvisoryAgent(client=client)

    with pytest.raises(TransportError) as excinfo:
        await agent.evaluate_profile(PROFILE)

    assert excinfo.value.status_code == 500
    assert len(calls) == 1


@pytest.mark.asyncio
async def test_parse_failures_propagate_unchanged():
    agent = AdvisoryAgent(client=fake_client(gemini_envelope("not json at all")))
    with pytest.raises(MalformedContentError):
        await agent.visa_guidance({"nationality": "Kenyan", "destinationCountry": "UK", "programType": "MSc"})

    agent = AdvisoryAgent(client=fake_client(gemini_envelope({"strengthScore": 150, "universityMatches": []})))
    with pytest.raises(SchemaViolationError):
        await agent.evaluate_profile(PROFILE)


@pytest.mark.asyncio
async def test_client_errors_propagate_unchanged():
    client = MagicMock()
    client.invoke = AsyncMock(side_effect=TransportError("down", code="network"))
    agent = AdvisoryAgent(client=client)

    with pytest.raises(TransportError) as excinfo:
        await agent.cultural_tips({"originCountry": "Brazil", "destinationCountry": "Japan"})

    assert excinfo.value.code == "network"


@pytest.mark.asyncio
async def test_ai_disabled_never_calls_the_client():
    client = fake_client(gemini_envelope(PROFILE_REPLY))
    agent = AdvisoryAgent(client=client)
    placeholder = {"strengthScore": 85, "universityMatches": []}
    fallback = MagicMock(return_value=placeholder)

    outcome = await run_advisory(Domain.PROFILE, PROFILE, ai_enabled=False, fallback=fallback, agent=agent)

    assert outcome.ai_enabled is False
    assert outcome.result == placeholder
    fallback.assert_called_once_with(Domain.PROFILE, PROFILE)
    client.invoke.assert_not_called()


@pytest.mark.asyncio
async def test_ai_disabled_never_builds_a_client():
    with patch("studypath.advisory.agent.get_generative_client") as factory:
        outcome = await run_advisory("visa", {}, ai_enabled=False, fallback=lambda d, r: "mock")

    assert outcome.result == "mock"
    factory.assert_not_called()


@pytest.mark.asyncio
async def test_ai_enabled_goes_through_agent():
    client = fake_client(gemini_envelope(PROFILE_REPLY))
    fallback = MagicMock()

    outcome = await run_advisory(
        Domain.PROFILE, PROFILE, ai_enabled=True, fallback=fallback, agent=AdvisoryAgent(client=client)
    )

    assert outcome.ai_enabled is True
    assert outcome.result.strength_score == 82
    fallback.assert_not_called()


@pytest.mark.parametrize("value, expected", [("1", True), ("true", True), ("off", False), ("", False)])
def test_ai_enabled_from_env(monkeypatch, value, expected):
    monkeypatch.setenv("STUDYPATH_AI_ENABLED", value)
    assert ai_enabled_from_env() is expected


def test_ai_enabled_defaults_to_off(monkeypatch):
    monkeypatch.delenv("STUDYPATH_AI_ENABLED", raising=False)
    assert ai_enabled_from_env() is False
