"""OpenAI-compatible chat completions client (OpenAI, OpenRouter)."""

from typing import Any, Dict, List, Optional, Union

import httpx

from rfi_responder.core.base_llm_client import BaseLLMClient
from rfi_responder.core.exceptions import OracleMalformedOutputError
from rfi_responder.core.retry import RetryPolicy
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


class ChatCompletionClient:
    """Wrapper for a chat-completions endpoint.

    Exposes ``generate_content`` so callers never build provider payloads
    themselves.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: int = 60,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize chat client.

        Args:
            api_key: Provider API key
            model: Model name to use
            base_url: Full chat completions URL
            timeout: Request timeout in seconds
            retry_policy: Retry policy for transient failures
            transport: Optional httpx transport, used by tests
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.timeout = timeout

        self.client = BaseLLMClient(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            retry_policy=retry_policy,
            transport=transport,
        )

        LOGGER.info(f"Initialized chat completion client with model {self.model}")

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Generate content using the configured model.

        Args:
            contents: Input content (string or list of parts)
            system_instruction: Optional system instruction
            generation_config: Optional generation config (temperature, max_output_tokens)

        Returns:
            Generated text response

        Raises:
            OracleError: If generation fails
            OracleMalformedOutputError: If the response has no choices
        """
        messages = []

        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})

        if isinstance(contents, str):
            messages.append({"role": "user", "content": contents})
        else:
            user_content = ""
            for part in contents:
                if isinstance(part, str):
                    user_content += part
                elif isinstance(part, dict) and "text" in part:
                    user_content += part["text"]
            messages.append({"role": "user", "content": user_content})

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": 0.0,
        }

        if generation_config:
            if "temperature" in generation_config:
                payload["temperature"] = generation_config["temperature"]
            if "max_output_tokens" in generation_config:
                payload["max_tokens"] = generation_config["max_output_tokens"]

        response = await self.client.call_api(payload=payload)

        choices = response.get("choices") if isinstance(response, dict) else None
        if not choices:
            LOGGER.error(f"Unexpected chat completion response format: {str(response)[:500]}")
            raise OracleMalformedOutputError("Invalid response format from chat completion API")

        content = (choices[0].get("message") or {}).get("content") or ""
        if not content:
            LOGGER.warning("Empty response from chat completion API")
        return content
