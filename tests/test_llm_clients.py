import json
from types import SimpleNamespace

import httpx
import pytest

from rfi_responder.core.chat_client import ChatCompletionClient
from rfi_responder.core.embedding_client import (
    OpenAIEmbeddingClient,
    SentenceTransformerEmbeddingClient,
    create_embedding_client_from_settings,
)
from rfi_responder.core.exceptions import (
    ConfigurationError,
    OracleAuthError,
    OracleError,
    OracleMalformedOutputError,
    OracleQuotaError,
    OracleTimeoutError,
    OracleUnavailableError,
)
from rfi_responder.core.retry import RetryPolicy
from rfi_responder.core.unified_llm import LLMProvider, UnifiedLLMClient, create_llm_client_from_settings

CHAT_URL = "https://llm.test/v1/chat/completions"
NO_WAIT = RetryPolicy(max_attempts=3, base_delay=0.0)


def chat_response(content: str) -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]})


class Recorder:
    """httpx handler replaying a list of responses (or exceptions)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def chat_client(handler) -> ChatCompletionClient:
    return ChatCompletionClient(
        api_key="sk-test",
        model="test-model",
        base_url=CHAT_URL,
        retry_policy=NO_WAIT,
        transport=httpx.MockTransport(handler),
    )


def llm_settings(**overrides):
    values = dict(
        provider="openai",
        openai_api_key="sk-test",
        openai_api_url=CHAT_URL,
        openai_model="gpt-test",
        openrouter_api_key="",
        openrouter_api_url="https://openrouter.test/v1/chat/completions",
        openrouter_model="openrouter-test",
        request_timeout=5,
        max_retries=2,
        retry_delay=0.0,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestRetryPolicy:
    def test_delay_grows_and_is_capped(self):
        policy = RetryPolicy(base_delay=2.0, max_delay=5.0)
        assert [policy.delay_for(n) for n in range(3)] == [2.0, 4.0, 5.0]

    def test_at_least_one_attempt(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    @pytest.mark.asyncio
    async def test_non_retryable_error_is_not_retried(self):
        calls = []

        async def operation():
            calls.append(1)
            raise OracleAuthError("denied")

        with pytest.raises(OracleAuthError):
            await NO_WAIT.run(operation)
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_retries_until_success(self):
        calls = []

        async def operation():
            calls.append(1)
            if len(calls) < 3:
                raise OracleUnavailableError("try again")
            return "ok"

        assert await NO_WAIT.run(operation) == "ok"
        assert len(calls) == 3


class TestChatCompletionClient:
    @pytest.mark.asyncio
    async def test_builds_payload_and_returns_content(self):
        recorder = Recorder(chat_response("[]"))
        client = chat_client(recorder)

        result = await client.generate_content(
            "Find questions",
            system_instruction="You are a bid manager",
            generation_config={"temperature": 0.2, "max_output_tokens": 100},
        )

        assert result == "[]"
        body = json.loads(recorder.requests[0].content)
        assert body["model"] == "test-model"
        assert body["messages"] == [
            {"role": "system", "content": "You are a bid manager"},
            {"role": "user", "content": "Find questions"},
        ]
        assert body["temperature"] == 0.2
        assert body["max_tokens"] == 100
        assert recorder.requests[0].headers["Authorization"] == "Bearer sk-test"

    @pytest.mark.asyncio
    async def test_unauthorized_is_auth_error_without_retry(self):
        recorder = Recorder(httpx.Response(401, json={"error": {"message": "Invalid API key"}}))

        with pytest.raises(OracleAuthError):
            await chat_client(recorder).generate_content("hi")
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_quota_exhausted_is_quota_error_without_retry(self):
        recorder = Recorder(
            httpx.Response(429, json={"error": {"code": "insufficient_quota", "message": "You exceeded your quota"}})
        )

        with pytest.raises(OracleQuotaError):
            await chat_client(recorder).generate_content("hi")
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_rate_limit_is_retried(self):
        recorder = Recorder(httpx.Response(429, text="slow down"))

        with pytest.raises(OracleUnavailableError):
            await chat_client(recorder).generate_content("hi")
        assert len(recorder.requests) == 3

    @pytest.mark.asyncio
    async def test_server_error_then_success(self):
        recorder = Recorder(httpx.Response(503, text="unavailable"), chat_response("[1]"))

        assert await chat_client(recorder).generate_content("hi") == "[1]"
        assert len(recorder.requests) == 2

    @pytest.mark.asyncio
    async def test_timeout_on_every_attempt(self):
        recorder = Recorder(httpx.ReadTimeout("read timed out"))

        with pytest.raises(OracleTimeoutError):
            await chat_client(recorder).generate_content("hi")
        assert len(recorder.requests) == 3

    @pytest.mark.asyncio
    async def test_client_error_is_not_retried(self):
        recorder = Recorder(httpx.Response(400, text="bad request"))

        with pytest.raises(OracleError) as exc_info:
            await chat_client(recorder).generate_content("hi")
        assert type(exc_info.value) is OracleError
        assert len(recorder.requests) == 1

    @pytest.mark.asyncio
    async def test_missing_choices_is_malformed(self):
        recorder = Recorder(httpx.Response(200, json={"id": "x"}))

        with pytest.raises(OracleMalformedOutputError):
            await chat_client(recorder).generate_content("hi")


class TestFactories:
    def test_openai_client_from_settings(self):
        client = create_llm_client_from_settings(llm_settings())

        assert isinstance(client, UnifiedLLMClient)
        assert client.provider == LLMProvider.OPENAI
        assert client.model == "gpt-test"

    def test_missing_key_is_configuration_error(self):
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            create_llm_client_from_settings(llm_settings(openai_api_key="  "))

    def test_openrouter_requires_its_own_key(self):
        with pytest.raises(ConfigurationError, match="OPENROUTER_API_KEY"):
            create_llm_client_from_settings(llm_settings(provider="openrouter"))

    def test_unknown_provider(self):
        with pytest.raises(ConfigurationError):
            create_llm_client_from_settings(llm_settings(provider="carrier-pigeon"))

    def test_embedding_factory(self):
        local = SimpleNamespace(provider="sentence_transformers", model="all-MiniLM-L6-v2", dimension=384)
        assert isinstance(
            create_embedding_client_from_settings(local, llm_settings()), SentenceTransformerEmbeddingClient
        )

        remote = SimpleNamespace(
            provider="openai", model="text-embedding-ada-002", dimension=1536, openai_api_url="https://e.test"
        )
        with pytest.raises(ConfigurationError):
            create_embedding_client_from_settings(remote, llm_settings(openai_api_key=""))

        with pytest.raises(ConfigurationError):
            create_embedding_client_from_settings(
                SimpleNamespace(provider="unknown", model="m", dimension=3), llm_settings()
            )


class TestOpenAIEmbeddingClient:
    def client(self, handler, dimension=3):
        return OpenAIEmbeddingClient(
            api_key="sk-test",
            dimension=dimension,
            base_url="https://embeddings.test/v1/embeddings",
            retry_policy=NO_WAIT,
            transport=httpx.MockTransport(handler),
        )

    @pytest.mark.asyncio
    async def test_returns_vector(self):
        recorder = Recorder(httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2, 0.3]}]}))

        assert await self.client(recorder).embed("line one\nline two") == [0.1, 0.2, 0.3]
        assert json.loads(recorder.requests[0].content)["input"] == "line one line two"

    @pytest.mark.asyncio
    async def test_wrong_dimension_is_malformed(self):
        recorder = Recorder(httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2]}]}))

        with pytest.raises(OracleMalformedOutputError):
            await self.client(recorder).embed("text")

    @pytest.mark.asyncio
    async def test_unexpected_shape_is_malformed(self):
        recorder = Recorder(httpx.Response(200, json={"data": []}))

        with pytest.raises(OracleMalformedOutputError):
            await self.client(recorder).embed("text")
