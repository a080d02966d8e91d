"""Text completion client interface and implementations."""

import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from simsearch.config import LLMSettings, get_settings
from simsearch.exceptions import CompletionError, ErrorCode
from simsearch.logging_config import get_logger
from simsearch.observability.metrics import track_completion_request

logger = get_logger(__name__)


class TextCompletionClient(ABC):
    """Opaque text completion collaborator: prompt in, text out."""

    @abstractmethod
    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
    ) -> str:
        """Generate text for a prompt.

        Args:
            prompt: User prompt.
            system_prompt: Optional system instructions.

        Returns:
            Generated text.

        Raises:
            CompletionError: If generation fails.
        """
        ...

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the model name."""
        ...


class OpenAICompatibleClient(TextCompletionClient):
    """Completion client for OpenAI-compatible chat completion APIs.

    Works with Ollama, vLLM, the OpenAI API and similar endpoints.
    """

    def __init__(
        self,
        settings: LLMSettings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Completion service configuration.
            client: HTTP client (for testing).
        """
        self._settings = settings or get_settings().llm
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._settings.timeout)
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def model_name(self) -> str:
        """Get the model name."""
        return self._settings.model

    async def complete(
        self,
        prompt: str,
        system_prompt: str | None = None,
    ) -> str:
        """Generate text using the chat completions API."""
        client = await self._get_client()
        url = f"{self._settings.base_url}/chat/completions"

        messages: list[dict[str, str]] = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        payload: dict[str, Any] = {
            "model": self._settings.model,
            "messages": messages,
            "temperature": self._settings.temperature,
            "max_tokens": self._settings.max_tokens,
        }

        headers = {}
        api_key = self._settings.api_key.get_secret_value()
        if api_key and api_key != "not-required":
            headers["Authorization"] = f"Bearer {api_key}"

        start_time = time.perf_counter()
        try:
            response = await client.post(url, json=payload, headers=headers)
            response.raise_for_status()

        except httpx.TimeoutException as e:
            self._track(start_time, success=False)
            logger.error(f"Completion request timed out: {e}")
            raise CompletionError(
                "Completion request timed out",
                code=ErrorCode.COMPLETION_TIMEOUT,
                details={"timeout": self._settings.timeout},
            ) from e

        except httpx.HTTPStatusError as e:
            self._track(start_time, success=False)
            status = e.response.status_code
            logger.error(f"Completion request failed: {status}")

            if status == 429:
                raise CompletionError(
                    "Rate limit exceeded",
                    code=ErrorCode.COMPLETION_RATE_LIMIT,
                    details={"status_code": status},
                ) from e

            raise CompletionError(
                f"Completion service returned {status}",
                code=ErrorCode.COMPLETION_SERVICE_ERROR,
                details={"status_code": status},
            ) from e

        except httpx.RequestError as e:
            self._track(start_time, success=False)
            logger.error(f"Completion connection error: {e}")
            raise CompletionError(
                f"Failed to connect to completion service: {e}",
                code=ErrorCode.COMPLETION_SERVICE_ERROR,
                details={"url": url},
            ) from e

        try:
            data = response.json()
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            self._track(start_time, success=False)
            raise CompletionError(
                f"Invalid response from completion service: {e}",
                code=ErrorCode.COMPLETION_SERVICE_ERROR,
                details={"error": str(e)},
            ) from e

        self._track(start_time, success=True)
        return content

    def _track(self, start_time: float, success: bool) -> None:
        track_completion_request(self.model_name, time.perf_counter() - start_time, success=success)
