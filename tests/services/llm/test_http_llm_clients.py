"""Tests for the OpenAI and Claude providers against a mock transport."""

import json

import httpx
import pytest

from glossia.core import ApiError, AuthenticationError, BadRequestError, ConfigError, ImageQueryOptimizationRequest
from glossia.services.http import RateLimiter, ResilientHttpClient, RetryConfig
from glossia.services.llm import ClaudeClient, LLMConfig, OpenAIClient


class RecordingHandler:
    def __init__(self, responder):
        self.responder = responder
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    def body(self, index=-1):
        return json.loads(self.requests[index].content)


def http_client(handler, recording_sleep):
    return ResilientHttpClient(
        transport=httpx.MockTransport(handler),
        retry_config=RetryConfig(max_retries=1, jitter=False),
        rate_limiter=RateLimiter(max_tokens=100),
        sleep=recording_sleep,
    )


def openai_reply(content):
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


def claude_reply(text):
    return httpx.Response(200, json={"content": [{"type": "text", "text": text}]})


SIMPLIFIED = json.dumps(
    {"original": "x", "simplified": "The recluse rose.", "words": [{"word": "hermit", "meaning": "a recluse", "is_phrase": False}]}
)


class TestOpenAIClient:
    """Tests for request shape and reply handling."""

    @pytest.mark.asyncio
    async def test_simplify_sends_json_mode_request(self, recording_sleep):
        handler = RecordingHandler(lambda request: openai_reply(SIMPLIFIED))
        config = LLMConfig.for_openai("sk-test")
        config.max_tokens = 500
        client = OpenAIClient(config, http_client=http_client(handler, recording_sleep))

        result = await client.simplify("The hermit rose.")

        request = handler.requests[0]
        assert str(request.url) == "https://api.openai.com/v1/chat/completions"
        assert request.headers["Authorization"] == "Bearer sk-test"
        body = handler.body()
        assert body["model"] == "gpt-4o-mini"
        assert body["response_format"] == {"type": "json_object"}
        assert body["temperature"] == 1
        assert body["max_completion_tokens"] == 500
        assert body["messages"][0]["role"] == "user"
        assert result.original == "The hermit rose."
        assert result.words[0].word == "hermit"
        await client.aclose()

    @pytest.mark.asyncio
    async def test_define_uses_short_completion(self, recording_sleep):
        handler = RecordingHandler(lambda request: openai_reply("  a person living alone \n"))
        client = OpenAIClient(LLMConfig.for_openai("sk-test"), http_client=http_client(handler, recording_sleep))

        meaning = await client.define("hermit", "The hermit rose.")

        assert meaning == "a person living alone"
        body = handler.body()
        assert body["temperature"] == 1.0
        assert body["max_completion_tokens"] == 30
        assert "response_format" not in body

    @pytest.mark.asyncio
    async def test_custom_base_url_and_model(self, recording_sleep):
        handler = RecordingHandler(lambda request: openai_reply('{"optimized_query": "hermit on sea"}'))
        config = LLMConfig.for_openai("sk-test", model="gpt-4.1")
        config.base_url = "https://llm.internal.test/v1/"
        client = OpenAIClient(config, http_client=http_client(handler, recording_sleep))

        query = await client.optimize_image_query(ImageQueryOptimizationRequest("hermit", "sea hermits", "a recluse"))

        assert query == "hermit on sea"
        assert str(handler.requests[0].url) == "https://llm.internal.test/v1/chat/completions"
        assert handler.body()["model"] == "gpt-4.1"

    @pytest.mark.asyncio
    async def test_auth_error_is_rewrapped(self, recording_sleep):
        error_body = {"error": {"message": "Incorrect API key", "type": "invalid_request_error", "code": "invalid_api_key"}}
        handler = RecordingHandler(lambda request: httpx.Response(401, json=error_body))
        client = OpenAIClient(LLMConfig.for_openai("sk-bad"), http_client=http_client(handler, recording_sleep))

        with pytest.raises(AuthenticationError) as excinfo:
            await client.simplify("Hi.")
        assert "OpenAI authentication failed" in excinfo.value.message
        assert excinfo.value.provider_code == "invalid_api_key"

    @pytest.mark.asyncio
    async def test_bad_request_is_rewrapped(self, recording_sleep):
        error_body = {"error": {"message": "model not found", "type": "invalid_request_error", "code": "model_not_found"}}
        handler = RecordingHandler(lambda request: httpx.Response(400, json=error_body))
        client = OpenAIClient(LLMConfig.for_openai("sk-test"), http_client=http_client(handler, recording_sleep))

        with pytest.raises(BadRequestError) as excinfo:
            await client.simplify("Hi.")
        assert "model not found" in excinfo.value.message

    @pytest.mark.asyncio
    async def test_missing_content_is_api_error(self, recording_sleep):
        handler = RecordingHandler(lambda request: httpx.Response(200, json={"choices": []}))
        client = OpenAIClient(LLMConfig.for_openai("sk-test"), http_client=http_client(handler, recording_sleep))
        with pytest.raises(ApiError):
            await client.define("x", "y")

    @pytest.mark.asyncio
    async def test_health_check_lists_models(self, recording_sleep):
        handler = RecordingHandler(lambda request: httpx.Response(200, json={"data": [{"id": "gpt-4o-mini"}]}))
        client = OpenAIClient(LLMConfig.for_openai("sk-test"), http_client=http_client(handler, recording_sleep))
        await client.health_check()
        assert handler.requests[0].method == "GET"
        assert handler.requests[0].url.path == "/v1/models"

    @pytest.mark.asyncio
    async def test_health_check_rejects_empty_model_list(self, recording_sleep):
        handler = RecordingHandler(lambda request: httpx.Response(200, json={"data": []}))
        client = OpenAIClient(LLMConfig.for_openai("sk-test"), http_client=http_client(handler, recording_sleep))
        with pytest.raises(ApiError):
            await client.health_check()

    def test_invalid_config_fails_at_construction(self):
        with pytest.raises(ConfigError):
            OpenAIClient(LLMConfig.for_openai("not-a-key"))


class TestClaudeClient:
    @pytest.mark.asyncio
    async def test_simplify_request_shape(self, recording_sleep):
        handler = RecordingHandler(lambda request: claude_reply(SIMPLIFIED))
        client = ClaudeClient(LLMConfig.for_claude("claude-key"), http_client=http_client(handler, recording_sleep))

        result = await client.simplify("The hermit rose.")

        request = handler.requests[0]
        assert str(request.url) == "https://api.anthropic.com/v1/messages"
        assert request.headers["x-api-key"] == "claude-key"
        assert request.headers["anthropic-version"] == "2023-06-01"
        body = handler.body()
        assert body["max_tokens"] == 1024
        assert len(body["messages"]) == 1
        assert body["messages"][0]["role"] == "user"
        assert "The hermit rose." in body["messages"][0]["content"]
        assert "temperature" not in body
        assert result.simplified == "The recluse rose."

    @pytest.mark.asyncio
    async def test_define_sets_temperature_and_token_cap(self, recording_sleep):
        handler = RecordingHandler(lambda request: claude_reply("someone who lives alone"))
        client = ClaudeClient(LLMConfig.for_claude("claude-key"), http_client=http_client(handler, recording_sleep))

        assert await client.define("hermit", "ctx") == "someone who lives alone"
        body = handler.body()
        assert body["temperature"] == 1.0
        assert body["max_tokens"] == 30

    @pytest.mark.asyncio
    async def test_unexpected_reply_is_api_error(self, recording_sleep):
        handler = RecordingHandler(lambda request: httpx.Response(200, json={"content": []}))
        client = ClaudeClient(LLMConfig.for_claude("claude-key"), http_client=http_client(handler, recording_sleep))
        with pytest.raises(ApiError):
            await client.define("x", "y")

    @pytest.mark.asyncio
    async def test_health_check_sends_minimal_prompt(self, recording_sleep):
        handler = RecordingHandler(lambda request: claude_reply("Hi!"))
        client = ClaudeClient(LLMConfig.for_claude("claude-key"), http_client=http_client(handler, recording_sleep))
        await client.health_check()
        assert handler.body()["messages"][0]["content"] == "Hello"
