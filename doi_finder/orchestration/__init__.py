"""
Resolution lifecycle: orchestrator state machine, history store and display projection.
"""

from .history import HistoryStore
from .orchestrator import ResolutionOrchestrator, is_submittable, now_ms
from .surface import SurfaceView, project

__all__ = [
    "HistoryStore",
    "ResolutionOrchestrator",
    "SurfaceView",
    "is_submittable",
    "now_ms",
    "project",
]
