"""Model exports for the resolution core."""

from doi_finder.models.config import (
    GeminiConfig,
    HistoryConfig,
    LoggingConfig,
    MessagesConfig,
    SettingsConfig,
)
from doi_finder.models.enums import ResolutionStatus, SurfaceKind
from doi_finder.models.resolution import GroundingSource, HistoryEntry, ResolutionResult
from doi_finder.models.state import OrchestratorState

__all__ = [
    "GeminiConfig",
    "GroundingSource",
    "HistoryConfig",
    "HistoryEntry",
    "LoggingConfig",
    "MessagesConfig",
    "OrchestratorState",
    "ResolutionResult",
    "ResolutionStatus",
    "SettingsConfig",
    "SurfaceKind",
]
