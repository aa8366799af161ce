"""Tests for the tips collaborator and its static fallback."""

import json

import httpx
import pytest

from studycost.advice.tips import (
    STATIC_TIPS,
    OpenAITipsGenerator,
    TipsGenerator,
    TipsServiceError,
    build_prompt,
    build_tips_generator,
    get_recommendations,
    parse_tips,
)
from studycost.config import Settings
from studycost.sim.cost_estimator import EstimateInput

INPUTS = EstimateInput(
    tuition=20000.0,
    months=12,
    monthly_rent=800.0,
    monthly_food=400.0,
    monthly_transport=100.0,
    scholarship=5000.0,
)


def make_settings(**overrides):
    values = dict(_env_file=None, OPENAI_API_KEY="test-key", OPENAI_API_BASE="https://llm.test/v1")
    values.update(overrides)
    return Settings(**values)


def make_generator(handler, **overrides):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return OpenAITipsGenerator(make_settings(**overrides), client=client)


def chat_response(content, status_code=200):
    return httpx.Response(status_code, json={"choices": [{"message": {"content": content}}]})


class FailingGenerator(TipsGenerator):
    def generate(self, inputs):
        raise TipsServiceError("boom")


class EmptyGenerator(TipsGenerator):
    def generate(self, inputs):
        return []


def test_parse_tips_json_array():
    """Test a JSON array is taken as-is."""
    assert parse_tips('["a", "b", "c"]') == ["a", "b", "c"]


def test_parse_tips_code_fence():
    """Test a fenced JSON array is unwrapped."""
    text = '```json\n["Cook at home", "Share a flat"]\n```'

    assert parse_tips(text) == ["Cook at home", "Share a flat"]


def test_parse_tips_plain_lines():
    """Test non-JSON text falls back to the first five non-empty lines."""
    text = "1. one\n\n2. two\r\n3. three\n4. four\n5. five\n6. six\n"

    assert parse_tips(text) == ["1. one", "2. two", "3. three", "4. four", "5. five"]


def test_parse_tips_unusable():
    """Test empty content and non-array JSON yield no tips."""
    assert parse_tips(None) == []
    assert parse_tips("") == []
    assert parse_tips('{"tips": ["x"]}') == []


def test_build_prompt():
    """Test the prompt carries every figure."""
    prompt = build_prompt(INPUTS)

    assert "Tuition: 20000 USD" in prompt
    assert "rent 800, food 400, transport 100" in prompt
    assert "Scholarship: 5000 USD" in prompt
    assert "Duration: 12 months" in prompt
    assert "JSON array of strings" in prompt


def test_openai_generator_request_and_response():
    """Test the chat completions request shape and parsed tips."""
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return chat_response('["Tip one", "Tip two"]')

    generator = make_generator(handler)
    tips = generator.generate(INPUTS)

    assert tips == ["Tip one", "Tip two"]
    assert seen["url"] == "https://llm.test/v1/chat/completions"
    assert seen["auth"] == "Bearer test-key"
    assert seen["body"]["model"] == "gpt-4o-mini"
    assert seen["body"]["temperature"] == 0.7
    assert [m["role"] for m in seen["body"]["messages"]] == ["system", "user"]


def test_openai_generator_http_error():
    """Test a non-200 status raises TipsServiceError."""
    generator = make_generator(lambda request: httpx.Response(429, text="slow down"))

    with pytest.raises(TipsServiceError):
        generator.generate(INPUTS)


def test_openai_generator_connection_error():
    """Test transport failures raise TipsServiceError."""
    def handler(request):
        raise httpx.ConnectError("unreachable", request=request)

    generator = make_generator(handler)

    with pytest.raises(TipsServiceError):
        generator.generate(INPUTS)


def test_openai_generator_requires_key():
    """Test the generator refuses to start without an API key."""
    with pytest.raises(ValueError):
        OpenAITipsGenerator(make_settings(OPENAI_API_KEY=None))


def test_openai_generator_closes_its_own_client(monkeypatch):
    """Test a client opened for a request is closed once the request is done."""
    created = []
    real_client = httpx.Client

    def client_factory(**kwargs):
        kwargs["transport"] = httpx.MockTransport(lambda request: chat_response('["Tip"]'))
        client = real_client(**kwargs)
        created.append(client)
        return client

    monkeypatch.setattr("studycost.advice.tips.httpx.Client", client_factory)
    generator = OpenAITipsGenerator(make_settings())

    assert generator.generate(INPUTS) == ["Tip"]
    assert generator.generate(INPUTS) == ["Tip"]
    assert len(created) == 2
    assert all(client.is_closed for client in created)


def test_openai_generator_leaves_injected_client_open():
    """Test a caller-supplied client is reused and not closed."""
    client = httpx.Client(transport=httpx.MockTransport(lambda request: chat_response('["Tip"]')))
    generator = OpenAITipsGenerator(make_settings(), client=client)

    generator.generate(INPUTS)

    assert not client.is_closed
    client.close()


def test_tips_generator_requires_generate():
    """Test a generator without a generate method cannot be built."""
    class Incomplete(TipsGenerator):
        pass

    with pytest.raises(TypeError):
        TipsGenerator()
    with pytest.raises(TypeError):
        Incomplete()


def test_build_tips_generator():
    """Test a generator is built only when a key is configured."""
    assert build_tips_generator(make_settings(OPENAI_API_KEY=None)) is None
    assert isinstance(build_tips_generator(make_settings()), OpenAITipsGenerator)


def test_get_recommendations_fallbacks():
    """Test static tips are used when the service is absent, fails, or is empty."""
    assert get_recommendations(INPUTS, None) == STATIC_TIPS
    assert get_recommendations(INPUTS, FailingGenerator()) == STATIC_TIPS
    assert get_recommendations(INPUTS, EmptyGenerator()) == STATIC_TIPS

    tips = get_recommendations(INPUTS, None)
    tips.append("mutated")
    assert len(STATIC_TIPS) == 5


def test_get_recommendations_uses_service():
    """Test generated tips replace the static ones."""
    generator = make_generator(lambda request: chat_response("Walk more\nBuy used books"))

    assert get_recommendations(INPUTS, generator) == ["Walk more", "Buy used books"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
