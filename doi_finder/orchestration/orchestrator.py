"""Request orchestrator: the single owner of resolution state for a session.

State machine::

    Idle -> Loading -> Succeeded | Failed
    Succeeded | Failed -> Loading   (new submission)

At most one resolution is in flight. A submission while Loading, or with a
blank citation, is dropped without changing state. The client call is the only
suspension point; the success path prepends the history entry and sets
Succeeded without awaiting in between, so no reader can observe one without
the other.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional

from pydantic import ValidationError

from doi_finder.llm.base_client import ResolutionClient
from doi_finder.models import HistoryEntry, OrchestratorState, ResolutionResult, SettingsConfig
from doi_finder.models.config import DEFAULT_FALLBACK_ERROR
from doi_finder.orchestration.history import HistoryStore
from doi_finder.resolution.errors import ResolutionError
from doi_finder.utils import structured_log
from doi_finder.utils.ids import IdGenerator

logger = logging.getLogger(__name__)

StateListener = Callable[[OrchestratorState], None]


def is_submittable(text: Optional[str]) -> bool:
    """A citation may be submitted only if it has non-whitespace content."""
    return bool(text and text.strip())


def now_ms() -> int:
    return int(time.time() * 1000)


class ResolutionOrchestrator:
    """Owns the state slot, the history store and the pending input.

    submit(), set_input() and select_history() are the only mutators.
    """

    def __init__(
        self,
        client: ResolutionClient,
        *,
        id_generator: Optional[IdGenerator] = None,
        clock: Callable[[], int] = now_ms,
        fallback_error_message: str = DEFAULT_FALLBACK_ERROR,
    ) -> None:
        self._client = client
        self._ids = id_generator or IdGenerator()
        self._clock = clock
        self._fallback_error_message = fallback_error_message
        self._state = OrchestratorState.idle()
        self._history = HistoryStore()
        self._pending_input = ""
        self._task: Optional[asyncio.Task[OrchestratorState]] = None
        self._listeners: List[StateListener] = []

    @classmethod
    def from_settings(
        cls,
        settings: SettingsConfig,
        client: Optional[ResolutionClient] = None,
    ) -> "ResolutionOrchestrator":
        if client is None:
            from doi_finder.resolution.gemini_resolver import GeminiDoiResolver

            client = GeminiDoiResolver(settings.gemini)
        return cls(
            client,
            id_generator=IdGenerator(length=settings.history.id_length),
            fallback_error_message=settings.messages.fallback_error,
        )

    # ------------------------------------------------------------------
    # Read access for the display layer
    # ------------------------------------------------------------------

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def history(self) -> HistoryStore:
        return self._history

    @property
    def pending_input(self) -> str:
        return self._pending_input

    @property
    def can_submit(self) -> bool:
        """Whether submitting the pending input would be accepted right now."""
        return not self._state.is_loading and is_submittable(self._pending_input)

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register a callback invoked with the new state after every transition.

        Returns a function that unregisters the listener.
        """
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    # ------------------------------------------------------------------
    # Mutators
    # ------------------------------------------------------------------

    def set_input(self, text: str) -> None:
        self._pending_input = text

    def select_history(self, entry: HistoryEntry) -> None:
        """Copy a past reference into the pending input. Does not submit."""
        self._pending_input = entry.reference

    def submit(self, text: str) -> Optional[asyncio.Task[OrchestratorState]]:
        """Start resolving text, unless it is blank or a resolution is in flight.

        Must be called from a running event loop. Returns the task that settles
        the resolution, or None when the submission was dropped.
        """
        if not is_submittable(text):
            logger.debug("Ignoring blank citation submission")
            structured_log.log_submission("rejected", reason="blank")
            return None
        if self._state.is_loading:
            logger.debug("Ignoring submission while a resolution is in flight")
            structured_log.log_submission("rejected", reason="in_flight")
            return None

        loop = asyncio.get_running_loop()
        logger.info("Resolving citation (%d chars)", len(text))
        structured_log.log_submission("accepted", query_chars=len(text))
        self._set_state(OrchestratorState.loading(text))
        self._task = loop.create_task(self._resolve(text))
        return self._task

    def submit_pending(self) -> Optional[asyncio.Task[OrchestratorState]]:
        return self.submit(self._pending_input)

    async def wait_until_settled(self) -> OrchestratorState:
        """Await the in-flight resolution, if any, and return the current state."""
        if self._task is not None:
            await self._task
        return self._state

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _resolve(self, query: str) -> OrchestratorState:
        start = time.monotonic()
        try:
            raw = await self._client.resolve(query)
            result = raw if isinstance(raw, ResolutionResult) else ResolutionResult.model_validate(raw)
        except ResolutionError as exc:
            logger.warning("Resolution failed: %s", str(exc) or type(exc).__name__)
            return self._fail(exc, start)
        except ValidationError as exc:
            logger.warning("Resolution client returned an invalid result: %s", exc)
            return self._fail(exc, start, message=self._fallback_error_message)
        except Exception as exc:
            logger.exception("Unexpected error from resolution client")
            return self._fail(exc, start)

        entry = HistoryEntry(
            id=self._next_id(),
            reference=query,
            doi=result.doi,
            timestamp=self._clock(),
        )
        self._history.prepend(entry)
        self._set_state(OrchestratorState.succeeded(result))

        if result.found:
            logger.info("Resolved DOI %s (%d sources)", result.doi, len(result.sources))
        else:
            logger.info("No DOI found for citation")
        structured_log.log_resolution(
            "succeeded",
            latency_ms=int((time.monotonic() - start) * 1000),
            doi=result.doi,
            sources=len(result.sources),
            history_id=entry.id,
        )
        return self._state

    def _fail(self, exc: Exception, start: float, message: Optional[str] = None) -> OrchestratorState:
        if message is None:
            message = str(exc).strip() or self._fallback_error_message
        self._set_state(OrchestratorState.failed(message))
        structured_log.log_resolution(
            "failed",
            latency_ms=int((time.monotonic() - start) * 1000),
            error=message,
            error_type=type(exc).__name__,
        )
        return self._state

    def _next_id(self) -> str:
        entry_id = self._ids.new_id()
        while self._history.contains_id(entry_id):
            entry_id = self._ids.new_id()
        return entry_id

    def _set_state(self, state: OrchestratorState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("State listener %r failed", listener)
