"""Unified LLM client factory.

Selects the chat-completions provider from configuration and refuses to
build a client without a credential, so a misconfigured deployment fails at
startup instead of on the first uploaded document.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Union

import httpx

from rfi_responder.core.chat_client import ChatCompletionClient
from rfi_responder.core.exceptions import ConfigurationError
from rfi_responder.core.retry import RetryPolicy
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


class LLMProvider(str, Enum):
    """Supported LLM providers."""
    OPENAI = "openai"
    OPENROUTER = "openrouter"


class UnifiedLLMClient:
    """Provider-agnostic generative oracle."""

    def __init__(
        self,
        provider: Union[str, LLMProvider],
        api_key: str,
        model: str,
        base_url: str,
        timeout: int = 60,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize unified LLM client.

        Args:
            provider: LLM provider to use ("openai" or "openrouter")
            api_key: API key for the provider
            model: Model name to use
            base_url: Chat completions URL
            timeout: Request timeout in seconds
            retry_policy: Retry policy for transient failures
            transport: Optional httpx transport, used by tests
        """
        self.provider = LLMProvider(provider)
        self.model = model
        self.client = ChatCompletionClient(
            api_key=api_key,
            model=model,
            base_url=base_url,
            timeout=timeout,
            retry_policy=retry_policy,
            transport=transport,
        )
        LOGGER.info(f"Initialized unified LLM with {self.provider.value} provider (model: {model})")

    async def generate_content(
        self,
        contents: Union[str, List[Union[str, Dict[str, Any]]]],
        system_instruction: Optional[str] = None,
        generation_config: Optional[Dict[str, Any]] = None,
    ) -> str:
        """Generate content using the configured provider."""
        return await self.client.generate_content(
            contents=contents,
            system_instruction=system_instruction,
            generation_config=generation_config,
        )


def create_llm_client_from_settings(llm_settings) -> UnifiedLLMClient:
    """Create a unified LLM client from ``LLMSettings``.

    Raises:
        ConfigurationError: If the provider is unknown or has no API key
    """
    try:
        provider = LLMProvider(llm_settings.provider.lower())
    except ValueError as e:
        raise ConfigurationError(f"Unsupported LLM provider: {llm_settings.provider}") from e

    if provider == LLMProvider.OPENAI:
        api_key, model, base_url = (
            llm_settings.openai_api_key,
            llm_settings.openai_model,
            llm_settings.openai_api_url,
        )
        env_name = "OPENAI_API_KEY"
    else:
        api_key, model, base_url = (
            llm_settings.openrouter_api_key,
            llm_settings.openrouter_model,
            llm_settings.openrouter_api_url,
        )
        env_name = "OPENROUTER_API_KEY"

    if not api_key or not api_key.strip():
        raise ConfigurationError(
            f"API key required when provider='{provider.value}'. "
            f"Please set {env_name} environment variable."
        )

    return UnifiedLLMClient(
        provider=provider,
        api_key=api_key.strip(),
        model=model,
        base_url=base_url,
        timeout=llm_settings.request_timeout,
        retry_policy=RetryPolicy(
            max_attempts=llm_settings.max_retries,
            base_delay=llm_settings.retry_delay,
        ),
    )
