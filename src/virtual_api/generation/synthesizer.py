"""LLM-backed mock response synthesis.

The synthesizer asks an Ollama model for a JSON body matching an
endpoint's declared response shape, pulls the JSON out of whatever text
comes back, and falls back to schema-derived placeholders when any of
that fails. ``generate`` never raises.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from virtual_api.generation.errors import GenerationError, NoJSONFoundError
from virtual_api.generation.extraction import (
    DEFAULT_STRATEGIES,
    ExtractionStrategy,
    extract_json_candidate,
)
from virtual_api.generation.fallback import build_fallback
from virtual_api.generation.ollama_client import OllamaClient
from virtual_api.models import EndpointSchema

logger = logging.getLogger(__name__)

MOCK_RESPONSE_PROMPT = """You are a mock API generator. Return ONLY valid JSON, no explanations or extra text.

Based on the following schema and context, generate a realistic mock response that matches the schema exactly.

Context: {context}
Schema: {schema}
Input: {input}

IMPORTANT:
- Return ONLY valid JSON
- No explanations, comments, or additional text
- Match the schema structure exactly
- Use realistic sample data

JSON Response:"""


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def build_prompt(schema: EndpointSchema, input_data: Any) -> str:
    """Render the generation prompt for an endpoint and caller input."""
    return MOCK_RESPONSE_PROMPT.format(
        context=schema.context or "N/A",
        schema=json.dumps(schema.response_schema),
        input=json.dumps(input_data, default=str),
    )


class ResponseSynthesizer:
    """Generates mock endpoint responses with an LLM and a fallback."""

    def __init__(
        self,
        llm_client: OllamaClient | None = None,
        strategies: tuple[ExtractionStrategy, ...] = DEFAULT_STRATEGIES,
    ) -> None:
        """Initialize the synthesizer.

        Args:
            llm_client: Ollama client. Defaults to one configured from env vars.
            strategies: Ordered JSON extraction strategies.
        """
        self._llm = llm_client or OllamaClient()
        self._strategies = strategies

    @property
    def llm_client(self) -> OllamaClient:
        return self._llm

    def parse_llm_output(self, text: str) -> Any:
        """Extract and parse the JSON value from raw LLM text.

        Raises:
            NoJSONFoundError: If no strategy locates a candidate.
            ValueError: If the candidate is not valid JSON, including
                NaN and Infinity constants.
        """
        result = extract_json_candidate(text, self._strategies)
        if result is None:
            raise NoJSONFoundError("No valid JSON found in response")
        return json.loads(result.candidate, parse_constant=_reject_constant)

    async def generate(self, schema: EndpointSchema, input_data: Any = None) -> Any:
        """Produce a response body for one request to a mock endpoint.

        Args:
            schema: The endpoint being called
            input_data: Query parameters or request body sent by the caller

        Returns:
            Parsed LLM output, or a placeholder built from the schema
        """
        if input_data is None:
            input_data = {}
        raw: str | None = None
        try:
            prompt = build_prompt(schema, input_data)
            raw = (await self._llm.generate(prompt)).strip()
            logger.debug("Raw LLM response for %s: %s", schema.key, raw)
            return self.parse_llm_output(raw)
        except (GenerationError, ValueError) as e:
            logger.error("LLM generation error for %s: %s", schema.key, e)
            logger.error("Raw response: %s", raw if raw is not None else "No response available")
        except Exception:
            logger.exception("Unexpected error generating response for %s", schema.key)

        return build_fallback(schema.response_schema)

    async def aclose(self) -> None:
        await self._llm.aclose()
