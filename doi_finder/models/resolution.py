"""Resolution result and history entry models."""

from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

DOI_URL_PREFIX = "https://doi.org/"


class GroundingSource(BaseModel):
    """One piece of grounding evidence returned alongside a resolution."""

    model_config = ConfigDict(frozen=True)

    title: str
    uri: str


class ResolutionResult(BaseModel):
    """Outcome of resolving one citation.

    doi=None is a successful "no DOI found" answer, not a failure. sources keep
    the order the service returned them in (most relevant first).
    """

    model_config = ConfigDict(frozen=True)

    doi: Optional[str] = None
    title: Optional[str] = None
    raw_text: str
    sources: Tuple[GroundingSource, ...] = ()

    @property
    def found(self) -> bool:
        return self.doi is not None

    @property
    def doi_url(self) -> Optional[str]:
        if self.doi is None:
            return None
        return f"{DOI_URL_PREFIX}{self.doi}"


class HistoryEntry(BaseModel):
    """Record of one past successful resolution."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    reference: str
    doi: Optional[str] = None
    timestamp: int = Field(ge=0, description="Completion time in epoch milliseconds.")
