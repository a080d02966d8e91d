"""Embedding service interface and implementations."""

import time
from abc import ABC, abstractmethod

import httpx

from simsearch.config import EmbeddingSettings, get_settings
from simsearch.embeddings.models import EmbeddingResult
from simsearch.exceptions import EmbeddingError, ErrorCode
from simsearch.logging_config import get_logger
from simsearch.observability.metrics import track_embedding_request

logger = get_logger(__name__)


class EmbeddingService(ABC):
    """Abstract base class for embedding services.

    The search engine treats this as an external, possibly slow and
    possibly failing collaborator. Retries, if any, belong here.
    """

    @abstractmethod
    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text.

        Args:
            text: Text to embed.

        Returns:
            EmbeddingResult with vector.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts.

        Args:
            texts: List of texts to embed.

        Returns:
            List of EmbeddingResult objects, in input order.

        Raises:
            EmbeddingError: If embedding fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name used for embeddings."""
        ...


class HTTPEmbeddingService(EmbeddingService):
    """Embedding service using HTTP API.

    Compatible with OpenAI-style embedding APIs and
    text-embeddings-inference (TEI) servers.
    """

    def __init__(
        self,
        settings: EmbeddingSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the HTTP embedding service.

        Args:
            settings: Embedding configuration. Uses defaults if not provided.
            client: HTTP client. Creates new one if not provided.
        """
        self._settings = settings or get_settings().embedding
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client if we own it."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    async def embed(self, text: str) -> EmbeddingResult:
        """Generate embedding for a single text."""
        results = await self.embed_batch([text])
        if not results:
            return EmbeddingResult(text=text, embedding=[], model=self.model_name)
        return results[0]

    async def embed_batch(self, texts: list[str]) -> list[EmbeddingResult]:
        """Generate embeddings for multiple texts, batching requests."""
        if not texts:
            return []

        client = await self._get_client()
        url = f"{self._settings.base_url}/embeddings"

        all_results: list[EmbeddingResult] = []
        batch_size = self._settings.batch_size

        for i in range(0, len(texts), batch_size):
            batch = texts[i : i + batch_size]
            all_results.extend(await self._embed_batch_request(client, url, batch))

        return all_results

    async def _embed_batch_request(
        self,
        client: httpx.AsyncClient,
        url: str,
        texts: list[str],
    ) -> list[EmbeddingResult]:
        """Make embedding request for a batch.

        Raises:
            EmbeddingError: If the request or response parsing fails.
        """
        payload = {
            "input": texts,
            "model": self._settings.model,
        }
        start_time = time.perf_counter()

        try:
            response = await client.post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            track_embedding_request(self.model_name, time.perf_counter() - start_time, success=False)
            logger.error(
                f"Embedding request failed: {e.response.status_code}",
                extra={"url": url, "status": e.response.status_code},
            )
            raise EmbeddingError(
                f"Embedding service returned {e.response.status_code}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.RequestError as e:
            track_embedding_request(self.model_name, time.perf_counter() - start_time, success=False)
            logger.error(f"Embedding request error: {e}", extra={"url": url})
            raise EmbeddingError(
                f"Failed to connect to embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"url": url},
            ) from e

        try:
            data = response.json()
            embeddings = data.get("data", [])
            if len(embeddings) != len(texts):
                raise ValueError(f"expected {len(texts)} embeddings, got {len(embeddings)}")

            results = [
                EmbeddingResult(
                    text=texts[i],
                    embedding=emb_data.get("embedding", []),
                    model=self._settings.model,
                )
                for i, emb_data in enumerate(embeddings)
            ]
        except (KeyError, IndexError, ValueError, AttributeError) as e:
            track_embedding_request(self.model_name, time.perf_counter() - start_time, success=False)
            raise EmbeddingError(
                f"Invalid response from embedding service: {e}",
                code=ErrorCode.EMBEDDING_SERVICE_ERROR,
                details={"error": str(e)},
            ) from e

        track_embedding_request(self.model_name, time.perf_counter() - start_time)
        return results
