"""Read-only projection of orchestrator state for display."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from doi_finder.models import OrchestratorState, ResolutionResult, ResolutionStatus, SurfaceKind

_KIND_FOR_STATUS = {
    ResolutionStatus.IDLE: SurfaceKind.EMPTY,
    ResolutionStatus.LOADING: SurfaceKind.LOADING,
    ResolutionStatus.SUCCEEDED: SurfaceKind.RESULT,
    ResolutionStatus.FAILED: SurfaceKind.ERROR,
}


@dataclass(frozen=True)
class SurfaceView:
    kind: SurfaceKind
    result: Optional[ResolutionResult] = None
    error: Optional[str] = None
    query: Optional[str] = None


def project(state: OrchestratorState) -> SurfaceView:
    """Map a state to exactly one thing to show.

    Only the payload of the current state is carried over, so a Loading view
    never shows the previous result or error.
    """
    kind = _KIND_FOR_STATUS[state.status]
    if kind is SurfaceKind.LOADING:
        return SurfaceView(kind=kind, query=state.query)
    if kind is SurfaceKind.RESULT:
        return SurfaceView(kind=kind, result=state.result)
    if kind is SurfaceKind.ERROR:
        return SurfaceView(kind=kind, error=state.error)
    return SurfaceView(kind=kind)
