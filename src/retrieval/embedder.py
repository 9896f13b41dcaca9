"""Text embedding adapters."""

import logging
from typing import Protocol

from openai import OpenAI

from src.errors import MalformedUpstreamError

logger = logging.getLogger(__name__)


class Embedder(Protocol):
    """Anything that turns a text into a fixed-length vector."""

    def embed(self, text: str, dimensions: int) -> list[float]: ...


class OpenAIEmbedder:
    """Embeds text with the OpenAI embeddings API.

    Retries and timeouts are handled by the SDK client.

    Args:
        api_key: OpenAI API key. If None, the SDK reads OPENAI_API_KEY.
        model: Embedding model name.
        client: Optional pre-built client (shared across calls).
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        client: OpenAI | None = None,
    ) -> None:
        self._model = model
        self._client = client or OpenAI(api_key=api_key)

    def embed(self, text: str, dimensions: int) -> list[float]:
        """Embed a single text.

        Args:
            text: Non-empty text to embed.
            dimensions: Requested vector length.

        Returns:
            The embedding vector.

        Raises:
            MalformedUpstreamError: If the response has no vector or one of
                the wrong length.
        """
        response = self._client.embeddings.create(
            model=self._model,
            input=[text],
            dimensions=dimensions,
        )

        if not response.data:
            raise MalformedUpstreamError(
                "Embedding response contained no data",
                source="openai",
                item=text[:80],
            )

        vector = list(response.data[0].embedding or [])
        if len(vector) != dimensions:
            raise MalformedUpstreamError(
                f"Expected {dimensions}-dimensional embedding, got {len(vector)}",
                source="openai",
                item=text[:80],
            )
        return vector

    def close(self) -> None:
        self._client.close()
