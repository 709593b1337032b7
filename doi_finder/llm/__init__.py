"""LLM clients used to resolve citations."""

from .base_client import ResolutionClient
from .gemini_client import GeminiClient, GroundedResponse, extract_grounding_sources

__all__ = ["GeminiClient", "GroundedResponse", "ResolutionClient", "extract_grounding_sources"]
