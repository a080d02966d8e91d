"""Pytest configuration and shared fixtures."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from simsearch.api.app import create_app
from simsearch.embeddings.models import EmbeddingResult
from simsearch.embeddings.service import EmbeddingService
from simsearch.llm.client import TextCompletionClient
from simsearch.store.document_store import DocumentStore


def embedding_of(vector: list[float], text: str = "query") -> EmbeddingResult:
    """Wrap a vector as an embedding result."""
    return EmbeddingResult(text=text, embedding=vector, model="test-model")


@pytest.fixture
def store() -> DocumentStore:
    """Empty document store with the default indexed fields."""
    return DocumentStore()


@pytest.fixture
def embedding_service() -> AsyncMock:
    """Embedding service that embeds every query as [1, 0]."""
    service = AsyncMock(spec=EmbeddingService)
    service.model_name = "test-model"
    service.embed.return_value = embedding_of([1.0, 0.0])
    return service


@pytest.fixture
def completion_client() -> AsyncMock:
    """Completion client that always answers the same text."""
    client = AsyncMock(spec=TextCompletionClient)
    client.model_name = "test-model"
    client.complete.return_value = "Generated answer"
    return client


@pytest.fixture
def app(
    store: DocumentStore,
    embedding_service: AsyncMock,
    completion_client: AsyncMock,
) -> FastAPI:
    """Application wired to the shared fixtures."""
    return create_app(
        store=store,
        embedding_service=embedding_service,
        completion_client=completion_client,
    )


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client for FastAPI app.

    Yields:
        AsyncClient configured for testing.
    """
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
