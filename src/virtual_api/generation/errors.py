"""Exceptions raised inside the response generation pipeline."""

from __future__ import annotations


class GenerationError(Exception):
    """LLM-backed generation did not produce a usable JSON value."""

    pass


class LLMRequestError(GenerationError):
    """Request to the LLM service failed or returned an unusable body."""

    pass


class NoJSONFoundError(GenerationError):
    """No JSON-shaped substring was found in the LLM output."""

    pass
