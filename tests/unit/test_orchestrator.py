"""Unit tests for the resolution orchestrator state machine."""

from __future__ import annotations

import asyncio

import pytest

from doi_finder.models import HistoryEntry, OrchestratorState, ResolutionResult, ResolutionStatus
from doi_finder.orchestration import ResolutionOrchestrator, is_submittable
from doi_finder.resolution.errors import ResolutionError, ResolutionNetworkError

SMITH = "Smith, J. (2020). Title. Journal, 1(1), 1-10."


class TestIsSubmittable:
    @pytest.mark.parametrize("text", ["", "   ", "\n\t ", None])
    def test_blank_text_is_not_submittable(self, text) -> None:
        assert is_submittable(text) is False

    def test_text_with_content_is_submittable(self) -> None:
        assert is_submittable("  Smith 2020  ") is True


class TestSubmitPreconditions:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   "])
    async def test_blank_submission_never_changes_state(self, orchestrator, fake_client, text) -> None:
        before = orchestrator.state

        assert orchestrator.submit(text) is None

        assert orchestrator.state is before
        assert orchestrator.state.status is ResolutionStatus.IDLE
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_blank_submission_after_failure_keeps_failed_state(self, orchestrator, fake_client) -> None:
        fake_client.outcomes = [ResolutionNetworkError("connection reset")]
        await orchestrator.submit(SMITH)
        failed = orchestrator.state

        assert orchestrator.submit("  ") is None
        assert orchestrator.state is failed

    @pytest.mark.asyncio
    async def test_second_submission_while_loading_is_dropped(
        self, orchestrator, fake_client, found_result
    ) -> None:
        fake_client.gate = asyncio.Event()
        fake_client.outcomes = [found_result]

        task = orchestrator.submit("a")
        assert task is not None
        assert orchestrator.state == OrchestratorState.loading("a")

        assert orchestrator.submit("b") is None
        assert orchestrator.state == OrchestratorState.loading("a")

        fake_client.gate.set()
        final = await task

        assert fake_client.calls == ["a"]
        assert final.status is ResolutionStatus.SUCCEEDED
        assert [e.reference for e in orchestrator.history] == ["a"]

    @pytest.mark.asyncio
    async def test_each_accepted_submission_transitions_once_to_loading(
        self, orchestrator, fake_client, found_result
    ) -> None:
        seen = []
        orchestrator.add_listener(lambda state: seen.append(state.status))
        fake_client.gate = asyncio.Event()
        fake_client.outcomes = [found_result]

        task = orchestrator.submit("a")
        orchestrator.submit("b")
        orchestrator.submit("c")
        fake_client.gate.set()
        await task

        assert seen == [ResolutionStatus.LOADING, ResolutionStatus.SUCCEEDED]


class TestSuccessPath:
    @pytest.mark.asyncio
    async def test_doi_found_scenario(self, orchestrator, fake_client, found_result, fake_clock) -> None:
        fake_client.outcomes = [found_result]

        state = await orchestrator.submit(SMITH)

        assert state.status is ResolutionStatus.SUCCEEDED
        assert state.result == found_result
        assert len(orchestrator.history) == 1
        entry = orchestrator.history.latest()
        assert entry.reference == SMITH
        assert entry.doi == "10.1000/xyz"
        assert entry.timestamp == fake_clock.now
        assert entry.id

    @pytest.mark.asyncio
    async def test_no_doi_found_is_success_not_failure(
        self, orchestrator, fake_client, not_found_result
    ) -> None:
        fake_client.outcomes = [not_found_result]

        state = await orchestrator.submit("Some obscure conference talk, 1987")

        assert state.status is ResolutionStatus.SUCCEEDED
        assert state.error is None
        assert state.result.doi is None
        assert state.result.found is False
        assert orchestrator.history.latest().doi is None

    @pytest.mark.asyncio
    async def test_history_head_matches_success_state_when_listener_runs(
        self, orchestrator, fake_client, found_result
    ) -> None:
        observed = []

        def _check(state: OrchestratorState) -> None:
            if state.status is ResolutionStatus.SUCCEEDED:
                head = orchestrator.history.latest()
                observed.append((head.reference, head.doi, state.result.doi))

        orchestrator.add_listener(_check)
        fake_client.outcomes = [found_result]
        await orchestrator.submit(SMITH)

        assert observed == [(SMITH, "10.1000/xyz", "10.1000/xyz")]

    @pytest.mark.asyncio
    async def test_history_is_newest_first(self, orchestrator, fake_client) -> None:
        fake_client.outcomes = [
            ResolutionResult(doi="10.1/one", raw_text="one"),
            ResolutionResult(doi="10.1/two", raw_text="two"),
            ResolutionResult(doi="10.1/three", raw_text="three"),
        ]

        for query in ("q1", "q2", "q3"):
            await orchestrator.submit(query)

        assert [e.reference for e in orchestrator.history] == ["q3", "q2", "q1"]
        assert [e.doi for e in orchestrator.history] == ["10.1/three", "10.1/two", "10.1/one"]
        timestamps = [e.timestamp for e in orchestrator.history]
        assert timestamps == sorted(timestamps, reverse=True)
        assert len({e.id for e in orchestrator.history}) == 3

    @pytest.mark.asyncio
    async def test_new_submission_clears_previous_result(
        self, orchestrator, fake_client, found_result
    ) -> None:
        fake_client.outcomes = [found_result]
        await orchestrator.submit(SMITH)
        fake_client.gate = asyncio.Event()

        task = orchestrator.submit("another citation")

        assert orchestrator.state.result is None
        assert orchestrator.state.error is None
        fake_client.gate.set()
        await task

    @pytest.mark.asyncio
    async def test_dict_result_from_client_is_validated(self, orchestrator, fake_client) -> None:
        class DictClient:
            async def resolve(self, citation_text):
                return {"doi": "10.5/abc", "title": None, "raw_text": "DOI: 10.5/abc", "sources": []}

        orchestrator._client = DictClient()

        state = await orchestrator.submit(SMITH)

        assert state.status is ResolutionStatus.SUCCEEDED
        assert state.result.doi == "10.5/abc"


class TestFailurePath:
    @pytest.mark.asyncio
    async def test_network_failure_then_resubmission(self, orchestrator, fake_client, found_result) -> None:
        fake_client.outcomes = [ResolutionNetworkError("Network error while calling Gemini"), found_result]

        state = await orchestrator.submit(SMITH)

        assert state.status is ResolutionStatus.FAILED
        assert state.error == "Network error while calling Gemini"
        assert len(orchestrator.history) == 0

        fake_client.gate = asyncio.Event()
        task = orchestrator.submit(SMITH)
        assert task is not None
        assert orchestrator.state == OrchestratorState.loading(SMITH)
        fake_client.gate.set()
        state = await task

        assert state.status is ResolutionStatus.SUCCEEDED
        assert len(orchestrator.history) == 1

    @pytest.mark.asyncio
    async def test_failure_leaves_history_length_unchanged(
        self, orchestrator, fake_client, found_result
    ) -> None:
        fake_client.outcomes = [found_result, ResolutionError("quota exceeded")]
        await orchestrator.submit("first")

        await orchestrator.submit("second")

        assert len(orchestrator.history) == 1
        assert orchestrator.history.latest().reference == "first"

    @pytest.mark.asyncio
    async def test_error_without_message_uses_fallback(self, orchestrator, fake_client) -> None:
        fake_client.outcomes = [ResolutionError()]

        state = await orchestrator.submit(SMITH)

        assert state.error == "Search failed. Please try again."

    @pytest.mark.asyncio
    async def test_unexpected_exception_is_contained(self, orchestrator, fake_client) -> None:
        fake_client.outcomes = [RuntimeError("boom")]

        state = await orchestrator.submit(SMITH)

        assert state.status is ResolutionStatus.FAILED
        assert state.error == "boom"

    @pytest.mark.asyncio
    async def test_invalid_client_payload_fails_with_fallback(self, orchestrator) -> None:
        class BrokenClient:
            async def resolve(self, citation_text):
                return {"doi": "10.1/x"}

        orchestrator._client = BrokenClient()

        state = await orchestrator.submit(SMITH)

        assert state.status is ResolutionStatus.FAILED
        assert state.error == "Search failed. Please try again."
        assert len(orchestrator.history) == 0


class TestSelectHistory:
    @pytest.mark.asyncio
    async def test_select_history_only_sets_pending_input(
        self, orchestrator, fake_client, found_result
    ) -> None:
        fake_client.outcomes = [found_result]
        await orchestrator.submit(SMITH)
        orchestrator.set_input("something else")
        state_before = orchestrator.state
        history_before = orchestrator.history.entries()
        entry = orchestrator.history.latest()

        orchestrator.select_history(entry)

        assert orchestrator.pending_input == SMITH
        assert orchestrator.state is state_before
        assert orchestrator.history.entries() == history_before
        assert fake_client.calls == [SMITH]

    def test_select_history_works_without_event_loop(self, orchestrator) -> None:
        entry = HistoryEntry(id="abc1234567", reference="Doe 2019", doi=None, timestamp=0)

        orchestrator.select_history(entry)

        assert orchestrator.pending_input == "Doe 2019"
        assert orchestrator.state.status is ResolutionStatus.IDLE


class TestPendingInput:
    @pytest.mark.asyncio
    async def test_can_submit_tracks_input_and_loading(self, orchestrator, fake_client) -> None:
        assert orchestrator.can_submit is False
        orchestrator.set_input("Doe 2019")
        assert orchestrator.can_submit is True

        fake_client.gate = asyncio.Event()
        task = orchestrator.submit_pending()
        assert orchestrator.can_submit is False

        fake_client.gate.set()
        await task
        assert orchestrator.can_submit is True

    @pytest.mark.asyncio
    async def test_wait_until_settled_without_submission_returns_idle(self, orchestrator) -> None:
        state = await orchestrator.wait_until_settled()

        assert state.status is ResolutionStatus.IDLE


class TestListeners:
    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_resolution(
        self, orchestrator, fake_client, found_result
    ) -> None:
        def _explode(state):
            raise ValueError("display crashed")

        seen = []
        orchestrator.add_listener(_explode)
        orchestrator.add_listener(lambda state: seen.append(state.status))
        fake_client.outcomes = [found_result]

        state = await orchestrator.submit(SMITH)

        assert state.status is ResolutionStatus.SUCCEEDED
        assert seen == [ResolutionStatus.LOADING, ResolutionStatus.SUCCEEDED]

    @pytest.mark.asyncio
    async def test_removed_listener_is_not_called(self, orchestrator, fake_client) -> None:
        seen = []
        remove = orchestrator.add_listener(lambda state: seen.append(state))
        remove()

        await orchestrator.submit(SMITH)

        assert seen == []


class TestFromSettings:
    def test_from_settings_uses_configured_values(self, fake_client) -> None:
        from doi_finder.models import SettingsConfig

        settings = SettingsConfig.model_validate(
            {"history": {"id_length": 12}, "messages": {"fallback_error": "Try again later."}}
        )

        orch = ResolutionOrchestrator.from_settings(settings, client=fake_client)

        assert orch._ids.length == 12
        assert orch._fallback_error_message == "Try again later."

    def test_from_settings_builds_gemini_resolver_by_default(self) -> None:
        from doi_finder.models import SettingsConfig
        from doi_finder.resolution.gemini_resolver import GeminiDoiResolver

        orch = ResolutionOrchestrator.from_settings(SettingsConfig())

        assert isinstance(orch._client, GeminiDoiResolver)
