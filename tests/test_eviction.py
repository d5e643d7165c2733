"""Tests for the interactive repository eviction controller."""

from unittest.mock import MagicMock

import pytest

from harborrp.domain import RepoCandidate
from harborrp.exit_codes import NetworkError, ValidationError
from harborrp.services.eviction import (
    CONFIRM_PROMPT,
    MAX_BATCH,
    NUMBER_PROMPT,
    RETRY_NUMBER_PROMPT,
    EvictionController,
    Selection,
    SelectionState,
    transition,
    validate_batch_size,
)
from harborrp.services.ranking import RankingHeap


def scripted(lines):
    """read_line that replays ``lines`` then reports end of input."""
    remaining = list(lines)
    prompts = []

    def read_line(prompt):
        prompts.append(prompt)
        return remaining.pop(0) if remaining else None

    read_line.prompts = prompts
    return read_line


def heap_of(n):
    return RankingHeap(
        RepoCandidate(id=i, name=f"p/r{i}").with_score(float(i)) for i in range(1, n + 1)
    )


class TestTransition:
    """Tests for the selection state machine transitions."""

    def test_number_moves_to_confirmation(self):
        nxt = transition(Selection(), "3")
        assert nxt.state is SelectionState.AWAITING_CONFIRMATION
        assert nxt.number == 3
        assert nxt.prompt == CONFIRM_PROMPT

    def test_garbage_stays_awaiting_number(self):
        nxt = transition(Selection(), "three")
        assert nxt.state is SelectionState.AWAITING_NUMBER
        assert nxt.prompt == RETRY_NUMBER_PROMPT

    @pytest.mark.parametrize("answer", ["y", "Y", " y "])
    def test_yes_validates(self, answer):
        nxt = transition(Selection(SelectionState.AWAITING_CONFIRMATION, 4), answer)
        assert nxt.state is SelectionState.VALIDATED
        assert nxt.number == 4

    @pytest.mark.parametrize("answer", ["n", "yes", "", "N"])
    def test_anything_else_goes_back(self, answer):
        nxt = transition(Selection(SelectionState.AWAITING_CONFIRMATION, 4), answer)
        assert nxt.state is SelectionState.AWAITING_NUMBER
        assert nxt.number is None

    @pytest.mark.parametrize("state", [SelectionState.AWAITING_NUMBER, SelectionState.AWAITING_CONFIRMATION])
    def test_end_of_input_cancels(self, state):
        nxt = transition(Selection(state, 2), None)
        assert nxt.state is SelectionState.CANCELLED
        assert nxt.done

    def test_terminal_state_is_sticky(self):
        done = Selection(SelectionState.VALIDATED, 5)
        assert transition(done, "7") is done


class TestValidateBatchSize:
    """Tests for the (0, 50] bound."""

    @pytest.mark.parametrize("n", [1, 2, 25, 49, 50])
    def test_accepts_in_range(self, n):
        assert validate_batch_size(n) == n

    @pytest.mark.parametrize("n", [-5, 0, 51, 1000])
    def test_rejects_out_of_range(self, n):
        with pytest.raises(ValidationError) as exc_info:
            validate_batch_size(n)
        assert exc_info.value.value == n
        assert exc_info.value.exit_code == 1

    def test_limit_constant(self):
        assert MAX_BATCH == 50


class TestSelect:
    """Tests for EvictionController.select()."""

    def test_number_then_confirm(self):
        read_line = scripted(["3", "y"])
        echoed = []

        count = EvictionController(read_line, echoed.append).select()

        assert count == 3
        assert read_line.prompts == [NUMBER_PROMPT, CONFIRM_PROMPT]
        assert echoed == ["The number you input: 3"]

    def test_retries_until_valid_number(self):
        read_line = scripted(["abc", "", "2.5", "2", "Y"])
        assert EvictionController(read_line).select() == 2
        assert read_line.prompts.count(RETRY_NUMBER_PROMPT) == 3

    def test_declined_confirmation_restarts(self):
        read_line = scripted(["10", "n", "4", "y"])
        assert EvictionController(read_line).select() == 4

    def test_end_of_input_selects_nothing(self):
        assert EvictionController(scripted(["5"])).select() is None
        assert EvictionController(scripted([])).select() is None

    def test_range_checked_after_confirmation(self):
        read_line = scripted(["0", "y", "3", "y"])
        with pytest.raises(ValidationError):
            EvictionController(read_line).select()
        # Fatal on first confirmation: the remaining lines are never read
        assert len(read_line.prompts) == 2

    def test_too_large_is_fatal(self):
        with pytest.raises(ValidationError):
            EvictionController(scripted(["51", "y"])).select()


class TestExecute:
    """Tests for EvictionController.execute()."""

    def test_deletes_lowest_first(self):
        delete = MagicMock()
        result = EvictionController(scripted([])).execute(heap_of(5), 2, delete)

        assert [c.id for c in result.deleted] == [1, 2]
        assert [call.args[0] for call in delete.call_args_list] == ["p/r1", "p/r2"]

    def test_stops_when_heap_exhausted(self):
        heap = heap_of(2)
        delete = MagicMock()

        result = EvictionController(scripted([])).execute(heap, 10, delete)

        assert result.requested == 10
        assert result.attempted == 2
        assert delete.call_count == 2
        assert len(heap) == 0

    def test_failed_delete_does_not_stop_batch(self):
        delete = MagicMock(side_effect=[None, NetworkError("HTTP 500", status_code=500), None])

        result = EvictionController(scripted([])).execute(heap_of(5), 3, delete)

        assert [c.id for c in result.deleted] == [1, 3]
        assert [c.id for c, _ in result.failed] == [2]
        assert "HTTP 500" in result.failed[0][1]
        assert delete.call_count == 3

    def test_leaves_rest_of_heap(self):
        heap = heap_of(5)
        EvictionController(scripted([])).execute(heap, 2, MagicMock())
        assert heap.pop().id == 3
