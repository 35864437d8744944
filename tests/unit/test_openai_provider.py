"""Unit tests for OpenAIEmbeddingProvider."""

from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from compliance_kb.infrastructure.embedding.openai_provider import OpenAIEmbeddingProvider


def _provider(api_key: str = "sk-test", max_input_chars: int = 8000) -> OpenAIEmbeddingProvider:
    return OpenAIEmbeddingProvider(
        base_url="https://api.openai.com/v1",
        api_key=api_key,
        model="text-embedding-3-small",
        dimensions=3,
        max_input_chars=max_input_chars,
    )


def _mock_client(data: list) -> MagicMock:
    client = MagicMock()
    client.embeddings.create = AsyncMock(return_value=SimpleNamespace(data=data))
    return client


@pytest.mark.asyncio
async def test_unconfigured_provider_returns_none() -> None:
    provider = _provider(api_key="")
    assert provider.is_configured() is False
    assert await provider.embed_text("hello") is None


@pytest.mark.asyncio
async def test_embed_text_strips_and_truncates() -> None:
    provider = _provider(max_input_chars=5)
    client = _mock_client([SimpleNamespace(embedding=[0.1, 0.2, 0.3])])
    provider._client = client

    vector = await provider.embed_text("  hello world  ")

    assert vector == [0.1, 0.2, 0.3]
    client.embeddings.create.assert_awaited_once_with(
        model="text-embedding-3-small", input="hello"
    )


@pytest.mark.asyncio
async def test_embed_blank_text_skips_request() -> None:
    provider = _provider()
    client = _mock_client([])
    provider._client = client

    assert await provider.embed_text("   ") is None
    client.embeddings.create.assert_not_awaited()


@pytest.mark.asyncio
async def test_empty_response_returns_none() -> None:
    provider = _provider()
    provider._client = _mock_client([])
    assert await provider.embed_text("hello") is None


def test_provider_properties() -> None:
    provider = _provider()
    assert provider.is_configured() is True
    assert provider.model == "text-embedding-3-small"
    assert provider.dimensions == 3
    assert provider.max_input_chars == 8000
