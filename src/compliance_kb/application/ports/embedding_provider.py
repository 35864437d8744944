"""Embedding provider port - OpenAI compatible API."""

from typing import Protocol


class EmbeddingProvider(Protocol):
    """Port for generating text embeddings.

    An unconfigured provider reports ``is_configured() == False`` and
    returns None from ``embed_text`` instead of raising.
    """

    @property
    def model(self) -> str: ...

    @property
    def dimensions(self) -> int: ...

    @property
    def max_input_chars(self) -> int: ...

    def is_configured(self) -> bool: ...

    async def embed_text(self, text: str) -> list[float] | None: ...
