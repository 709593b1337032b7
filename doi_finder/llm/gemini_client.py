"""Gemini generateContent client with Google Search grounding."""

from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from typing import Any, List

import aiohttp

from doi_finder.models import GroundingSource
from doi_finder.resolution.errors import (
    MalformedResponseError,
    ResolutionConfigError,
    ResolutionNetworkError,
    ResolutionQuotaError,
    ResolutionTimeoutError,
    ResolutionUpstreamError,
)

_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"


@dataclass
class GroundedResponse:
    text: str
    sources: List[GroundingSource] = field(default_factory=list)


def extract_grounding_sources(candidate: dict[str, Any]) -> List[GroundingSource]:
    """Return web grounding chunks of a candidate in the order Gemini listed them."""
    metadata = candidate.get("groundingMetadata") or {}
    sources: List[GroundingSource] = []
    for chunk in metadata.get("groundingChunks") or []:
        web = chunk.get("web") or {}
        uri = str(web.get("uri") or "").strip()
        if not uri:
            continue
        title = str(web.get("title") or "").strip() or uri
        sources.append(GroundingSource(title=title, uri=uri))
    return sources


class GeminiClient:
    """Calls Gemini generateContent once per request.

    Failures are raised as ResolutionError subclasses. There is no retry here:
    a 429 surfaces as ResolutionQuotaError and the user decides whether to
    submit again.
    """

    def __init__(
        self,
        *,
        base_url: str = _DEFAULT_BASE_URL,
        timeout_seconds: float = 120.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds

    async def generate_grounded(
        self,
        prompt: str,
        *,
        model: str,
        temperature: float = 0.1,
        use_search: bool = True,
    ) -> GroundedResponse:
        """Return the response text and the grounding sources attached to it."""
        api_key = os.getenv("GEMINI_API_KEY")
        if not api_key:
            raise ResolutionConfigError("GEMINI_API_KEY not set; cannot call Gemini.")
        model_name = model.split(":", 1)[-1]
        url = f"{self._base_url}/{model_name}:generateContent"
        payload: dict[str, Any] = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": temperature},
        }
        if use_search:
            payload["tools"] = [{"google_search": {}}]
        params = {"key": api_key}

        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout)
            ) as session:
                async with session.post(url, params=params, json=payload) as resp:
                    if resp.status == 429:
                        body = await resp.text()
                        raise ResolutionQuotaError(
                            f"Gemini quota exhausted (429): {body[:300]}"
                        )
                    if resp.status != 200:
                        body = await resp.text()
                        if "RESOURCE_EXHAUSTED" in body:
                            raise ResolutionQuotaError(
                                f"Gemini quota exhausted ({resp.status}): {body[:300]}"
                            )
                        raise ResolutionUpstreamError(
                            f"Gemini API error {resp.status}: {body[:300]}",
                            status=resp.status,
                        )
                    try:
                        data = await resp.json()
                    except (aiohttp.ContentTypeError, ValueError) as exc:
                        raise MalformedResponseError(
                            f"Gemini returned a non-JSON body: {exc}"
                        ) from exc
        except asyncio.TimeoutError as exc:
            raise ResolutionTimeoutError(
                f"Gemini did not answer within {self._timeout:.0f}s."
            ) from exc
        except aiohttp.ClientError as exc:
            raise ResolutionNetworkError(f"Network error while calling Gemini: {exc}") from exc

        if not isinstance(data, dict):
            raise MalformedResponseError("Gemini returned an unexpected payload.")
        candidates = data.get("candidates") or []
        if not candidates:
            raise MalformedResponseError("Gemini returned no candidates.")
        candidate = candidates[0]
        parts = (candidate.get("content") or {}).get("parts") or []
        text = "".join(str(p.get("text") or "") for p in parts).strip()
        if not text:
            raise MalformedResponseError("Gemini returned empty text.")
        return GroundedResponse(text=text, sources=extract_grounding_sources(candidate))
