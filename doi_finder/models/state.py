"""Orchestrator state model.

Exactly one of Idle, Loading(query), Succeeded(result) or Failed(error). The
payload fields that do not belong to the current status must be unset.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

from doi_finder.models.enums import ResolutionStatus
from doi_finder.models.resolution import ResolutionResult

_PAYLOAD_FOR_STATUS = {
    ResolutionStatus.IDLE: None,
    ResolutionStatus.LOADING: "query",
    ResolutionStatus.SUCCEEDED: "result",
    ResolutionStatus.FAILED: "error",
}


class OrchestratorState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: ResolutionStatus
    query: Optional[str] = None
    result: Optional[ResolutionResult] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _check_payload(self) -> "OrchestratorState":
        expected = _PAYLOAD_FOR_STATUS[self.status]
        for name in ("query", "result", "error"):
            present = getattr(self, name) is not None
            if name == expected and not present:
                raise ValueError(f"{self.status.value} state requires '{name}'")
            if name != expected and present:
                raise ValueError(f"{self.status.value} state must not carry '{name}'")
        return self

    @classmethod
    def idle(cls) -> "OrchestratorState":
        return cls(status=ResolutionStatus.IDLE)

    @classmethod
    def loading(cls, query: str) -> "OrchestratorState":
        return cls(status=ResolutionStatus.LOADING, query=query)

    @classmethod
    def succeeded(cls, result: ResolutionResult) -> "OrchestratorState":
        return cls(status=ResolutionStatus.SUCCEEDED, result=result)

    @classmethod
    def failed(cls, error: str) -> "OrchestratorState":
        return cls(status=ResolutionStatus.FAILED, error=error)

    @property
    def is_loading(self) -> bool:
        return self.status is ResolutionStatus.LOADING

    @property
    def is_terminal(self) -> bool:
        return self.status in (ResolutionStatus.SUCCEEDED, ResolutionStatus.FAILED)
