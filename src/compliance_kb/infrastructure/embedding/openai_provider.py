"""OpenAI-compatible embedding provider."""

from openai import AsyncOpenAI


class OpenAIEmbeddingProvider:
    """Embedding provider using OpenAI-compatible API.

    Without an API key no client is created and ``embed_text`` returns None.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        dimensions: int = 1536,
        max_input_chars: int = 8000,
    ) -> None:
        self._client = AsyncOpenAI(base_url=base_url, api_key=api_key) if api_key else None
        self._model = model
        self._dimensions = dimensions
        self._max_input_chars = max_input_chars

    @property
    def model(self) -> str:
        return self._model

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def max_input_chars(self) -> int:
        return self._max_input_chars

    def is_configured(self) -> bool:
        return self._client is not None

    async def embed_text(self, text: str) -> list[float] | None:
        """Generate an embedding for one text."""
        if self._client is None:
            return None
        t = text.strip()[: self._max_input_chars]
        if not t:
            return None
        response = await self._client.embeddings.create(
            model=self._model,
            input=t,
        )
        if not response.data:
            return None
        return list(response.data[0].embedding)
