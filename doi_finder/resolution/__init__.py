"""
Citation resolution: error taxonomy, prompt and answer parsing.

GeminiDoiResolver lives in doi_finder.resolution.gemini_resolver and is not
re-exported here, so the LLM client can import the error types without a cycle.
"""

from .errors import (
    MalformedResponseError,
    ResolutionConfigError,
    ResolutionError,
    ResolutionNetworkError,
    ResolutionQuotaError,
    ResolutionTimeoutError,
    ResolutionUpstreamError,
)
from .parsing import find_doi_in_text, normalize_doi, parse_resolution_text, parse_title
from .prompts import NOT_FOUND_MARKER, build_resolution_prompt

__all__ = [
    "MalformedResponseError",
    "NOT_FOUND_MARKER",
    "ResolutionConfigError",
    "ResolutionError",
    "ResolutionNetworkError",
    "ResolutionQuotaError",
    "ResolutionTimeoutError",
    "ResolutionUpstreamError",
    "build_resolution_prompt",
    "find_doi_in_text",
    "normalize_doi",
    "parse_resolution_text",
    "parse_title",
]
