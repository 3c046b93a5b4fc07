"""Embedding oracle clients.

Two backends share one interface: a local SentenceTransformer model and the
OpenAI embeddings endpoint. Both return plain ``list[float]`` vectors of the
configured dimension.
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

import httpx
from sentence_transformers import SentenceTransformer

from rfi_responder.core.base_llm_client import BaseLLMClient
from rfi_responder.core.exceptions import ConfigurationError, OracleMalformedOutputError
from rfi_responder.core.retry import RetryPolicy
from rfi_responder.utils.logging import get_logger

LOGGER = get_logger(__name__)


class EmbeddingClient(ABC):
    """Computes dense vectors for text snippets."""

    def __init__(self, dimension: int):
        self.dimension = dimension

    @abstractmethod
    async def _embed(self, text: str) -> List[float]:
        pass

    async def embed(self, text: str) -> List[float]:
        """Embed one snippet, checking the vector size."""
        vector = await self._embed(text.replace("\n", " "))
        if len(vector) != self.dimension:
            raise OracleMalformedOutputError(
                f"Embedding has {len(vector)} dimensions, expected {self.dimension}"
            )
        return vector


class SentenceTransformerEmbeddingClient(EmbeddingClient):
    """Local SentenceTransformer model, loaded lazily on first use."""

    def __init__(self, model_name: str = "all-MiniLM-L6-v2", dimension: int = 384):
        super().__init__(dimension)
        self.model_name = model_name
        self._model: Optional[SentenceTransformer] = None

    @property
    def model(self) -> SentenceTransformer:
        """Lazy loader for the SentenceTransformer model."""
        if self._model is None:
            LOGGER.info(f"Loading embedding model: {self.model_name}")
            self._model = SentenceTransformer(self.model_name)
        return self._model

    async def _embed(self, text: str) -> List[float]:
        # encode() is CPU bound
        vector = await asyncio.to_thread(self.model.encode, text, normalize_embeddings=True)
        return [float(value) for value in vector]


class OpenAIEmbeddingClient(EmbeddingClient):
    """OpenAI embeddings endpoint."""

    def __init__(
        self,
        api_key: str,
        model_name: str = "text-embedding-ada-002",
        dimension: int = 1536,
        base_url: str = "https://api.openai.com/v1/embeddings",
        timeout: int = 60,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(dimension)
        self.model_name = model_name
        self.client = BaseLLMClient(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            retry_policy=retry_policy,
            transport=transport,
        )

    async def _embed(self, text: str) -> List[float]:
        response = await self.client.call_api(payload={"model": self.model_name, "input": text})
        try:
            return [float(value) for value in response["data"][0]["embedding"]]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise OracleMalformedOutputError(f"Unexpected embeddings response format: {e}") from e


def create_embedding_client_from_settings(embedding_settings, llm_settings) -> EmbeddingClient:
    """Create the embedding client selected by ``EmbeddingSettings``.

    Raises:
        ConfigurationError: If the provider is unknown or has no API key
    """
    provider = embedding_settings.provider.lower()

    if provider == "sentence_transformers":
        return SentenceTransformerEmbeddingClient(
            model_name=embedding_settings.model,
            dimension=embedding_settings.dimension,
        )

    if provider == "openai":
        api_key = llm_settings.openai_api_key
        if not api_key or not api_key.strip():
            raise ConfigurationError(
                "API key required when embedding provider='openai'. "
                "Please set OPENAI_API_KEY environment variable."
            )
        return OpenAIEmbeddingClient(
            api_key=api_key.strip(),
            model_name=embedding_settings.model,
            dimension=embedding_settings.dimension,
            base_url=embedding_settings.openai_api_url,
            timeout=llm_settings.request_timeout,
            retry_policy=RetryPolicy(
                max_attempts=llm_settings.max_retries,
                base_delay=llm_settings.retry_delay,
            ),
        )

    raise ConfigurationError(f"Unsupported embedding provider: {embedding_settings.provider}")
