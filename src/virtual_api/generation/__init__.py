"""Mock response generation: LLM call, JSON extraction and fallback."""

from virtual_api.generation.errors import GenerationError, LLMRequestError, NoJSONFoundError
from virtual_api.generation.fallback import build_fallback
from virtual_api.generation.ollama_client import OllamaClient
from virtual_api.generation.synthesizer import ResponseSynthesizer

__all__ = [
    "GenerationError",
    "LLMRequestError",
    "NoJSONFoundError",
    "OllamaClient",
    "ResponseSynthesizer",
    "build_fallback",
]
