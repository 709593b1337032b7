"""Configuration models loaded from YAML."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_FALLBACK_ERROR = "An error occurred while searching. Please try again."


class GeminiConfig(BaseModel):
    model: str = "gemini-2.5-flash"
    temperature: float = Field(ge=0.0, le=1.0, default=0.1)
    timeout_seconds: float = Field(gt=0.0, default=120.0)
    use_search_grounding: bool = Field(
        default=True,
        description="Attach the google_search tool so answers come with grounding sources.",
    )
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/models"


class HistoryConfig(BaseModel):
    id_length: int = Field(ge=6, le=32, default=10)


class MessagesConfig(BaseModel):
    fallback_error: str = Field(default=DEFAULT_FALLBACK_ERROR, min_length=1)


class LoggingConfig(BaseModel):
    level: str = Field(default="normal", pattern="^(minimal|normal|detailed|full)$")
    log_to_file: bool = False
    log_file: str = "logs/doi_finder.log"
    jsonl_dir: Optional[str] = Field(
        default=None,
        description="Directory for the structlog session.jsonl audit trail; omit to disable.",
    )


class SettingsConfig(BaseModel):
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    messages: MessagesConfig = Field(default_factory=MessagesConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
