"""Enum definitions for resolution lifecycle boundaries."""

from enum import Enum


class ResolutionStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class SurfaceKind(str, Enum):
    EMPTY = "empty"
    LOADING = "loading"
    RESULT = "result"
    ERROR = "error"
