"""Ollama HTTP client for single-shot text generation."""

from __future__ import annotations

import logging
import os

import httpx

from virtual_api.generation.errors import LLMRequestError

logger = logging.getLogger(__name__)

_DEFAULT_HOST = "http://localhost:11434"
_DEFAULT_MODEL = "llama3"
_DEFAULT_TIMEOUT = 120.0


class OllamaClient:
    """Client for the Ollama ``/api/generate`` endpoint (non-streaming)."""

    def __init__(
        self,
        host: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._host = (host or os.environ.get("OLLAMA_HOST", _DEFAULT_HOST)).rstrip("/")
        self._model = model or os.environ.get("OLLAMA_MODEL", _DEFAULT_MODEL)
        if timeout is None:
            timeout = float(os.environ.get("OLLAMA_TIMEOUT_SECONDS", _DEFAULT_TIMEOUT))
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def model(self) -> str:
        return self._model

    @property
    def url(self) -> str:
        return f"{self._host}/api/generate"

    async def generate(self, prompt: str) -> str:
        """Send a prompt and return the generated text.

        Args:
            prompt: Full prompt text

        Returns:
            The ``response`` field of the Ollama reply

        Raises:
            LLMRequestError: On transport errors, non-2xx status, or a
                body without a string ``response`` field.
        """
        payload = {"model": self._model, "prompt": prompt, "stream": False}
        logger.debug("POST %s (model=%s, %d prompt chars)", self.url, self._model, len(prompt))

        try:
            resp = await self._client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            raise LLMRequestError(f"Request to {self.url} failed: {e}") from e

        if not resp.is_success:
            raise LLMRequestError(f"Ollama returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise LLMRequestError("Ollama returned a non-JSON body") from e

        text = data.get("response") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise LLMRequestError("Ollama reply has no 'response' text")

        return text

    async def aclose(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> OllamaClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
