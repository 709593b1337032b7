"""Resolution client backed by Gemini with Google Search grounding."""

from __future__ import annotations

import logging
import time
from typing import Optional

from doi_finder.llm.gemini_client import GeminiClient
from doi_finder.models import GeminiConfig, ResolutionResult
from doi_finder.resolution.parsing import parse_resolution_text
from doi_finder.resolution.prompts import build_resolution_prompt

logger = logging.getLogger(__name__)


class GeminiDoiResolver:
    """Satisfies the ResolutionClient protocol.

    One citation in, one grounded Gemini call out. Whatever GeminiClient raises
    (always a ResolutionError subclass) propagates to the caller unchanged.
    """

    def __init__(
        self,
        config: Optional[GeminiConfig] = None,
        client: Optional[GeminiClient] = None,
    ) -> None:
        self.config = config or GeminiConfig()
        self.client = client or GeminiClient(
            base_url=self.config.base_url,
            timeout_seconds=self.config.timeout_seconds,
        )

    async def resolve(self, citation_text: str) -> ResolutionResult:
        prompt = build_resolution_prompt(citation_text)
        start = time.monotonic()
        response = await self.client.generate_grounded(
            prompt,
            model=self.config.model,
            temperature=self.config.temperature,
            use_search=self.config.use_search_grounding,
        )
        doi, title = parse_resolution_text(response.text)
        logger.debug(
            "Gemini answered in %.2fs: doi=%s, %d sources",
            time.monotonic() - start,
            doi,
            len(response.sources),
        )
        return ResolutionResult(
            doi=doi,
            title=title,
            raw_text=response.text,
            sources=tuple(response.sources),
        )
