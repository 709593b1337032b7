"""Abstract resolution client protocol for provider-agnostic citation lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from doi_finder.models import ResolutionResult


@runtime_checkable
class ResolutionClient(Protocol):
    """Structural protocol satisfied by any client that can resolve a citation.

    Callers guarantee citation_text is non-empty after stripping.
    A result with doi=None is a valid "no DOI found" answer and must be returned,
    not raised. Real failures raise ResolutionError (or a subclass) with a
    human-readable message. Implementors must not retry implicitly.
    """

    async def resolve(self, citation_text: str) -> ResolutionResult:
        """Return the resolution for citation_text or raise ResolutionError."""
        ...
