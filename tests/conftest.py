"""
Pytest configuration and fixtures.
"""

import asyncio
import logging
import random
import sys
from pathlib import Path
from typing import List, Optional, Union

import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from doi_finder.models import GroundingSource, ResolutionResult
from doi_finder.orchestration import ResolutionOrchestrator
from doi_finder.utils.ids import IdGenerator

SMITH_CITATION = "Smith, J. (2020). Title. Journal, 1(1), 1-10."

Outcome = Union[ResolutionResult, BaseException]


class FakeResolutionClient:
    """Scripted resolution client.

    Pops one outcome per call: a ResolutionResult is returned, an exception is
    raised. When gate is set to an asyncio.Event, resolve() blocks on it so
    tests can observe the Loading state.
    """

    def __init__(self, outcomes: Optional[List[Outcome]] = None):
        self.outcomes: List[Outcome] = list(outcomes or [])
        self.calls: List[str] = []
        self.gate: Optional[asyncio.Event] = None

    async def resolve(self, citation_text: str) -> ResolutionResult:
        self.calls.append(citation_text)
        if self.gate is not None:
            await self.gate.wait()
        if self.outcomes:
            outcome = self.outcomes.pop(0)
        else:
            outcome = ResolutionResult(raw_text="No DOI found")
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome


class FakeClock:
    """Epoch-ms clock that advances by one second per reading."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1000
        return self.now


@pytest.fixture
def found_result() -> ResolutionResult:
    return ResolutionResult(
        doi="10.1000/xyz",
        title="Title",
        raw_text="DOI: 10.1000/xyz\nTITLE: Title",
        sources=(GroundingSource(title="Journal Page", uri="https://doi.org/10.1000/xyz"),),
    )


@pytest.fixture
def not_found_result() -> ResolutionResult:
    return ResolutionResult(doi=None, title=None, raw_text="No DOI found", sources=())


@pytest.fixture
def fake_client() -> FakeResolutionClient:
    return FakeResolutionClient()


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def orchestrator(fake_client, fake_clock) -> ResolutionOrchestrator:
    return ResolutionOrchestrator(
        fake_client,
        id_generator=IdGenerator(rng=random.Random(1234)),
        clock=fake_clock,
        fallback_error_message="Search failed. Please try again.",
    )


@pytest.fixture
def gemini_payload():
    """Factory for generateContent response bodies."""

    def _payload(text: str, chunks: Optional[list] = None) -> dict:
        candidate = {"content": {"parts": [{"text": text}], "role": "model"}}
        if chunks is not None:
            candidate["groundingMetadata"] = {"groundingChunks": chunks}
        return {"candidates": [candidate]}

    return _payload


@pytest.fixture
def setup_test_env(monkeypatch):
    """Provide a dummy Gemini key so clients do not refuse to run."""
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")


@pytest.fixture(autouse=True)
def _restore_package_logger():
    """Undo handlers that setup_logging() attaches during a test."""
    logger = logging.getLogger("doi_finder")
    handlers, level = list(logger.handlers), logger.level
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
