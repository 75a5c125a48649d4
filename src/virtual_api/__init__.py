"""Virtual API - Mock REST endpoints with LLM-generated responses."""

from virtual_api.generation.synthesizer import ResponseSynthesizer
from virtual_api.models import EndpointSchema

__all__ = ["EndpointSchema", "ResponseSynthesizer"]
