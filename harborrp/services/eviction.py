"""
Interactive repository eviction for harborrp.

The operator chooses how many of the lowest-ranked repositories to delete.
Selection is a small state machine:

    AWAITING_NUMBER --int--> AWAITING_CONFIRMATION --"y"--> VALIDATED
          ^   |                       |
          |   +--not an int (re-prompt)
          +---------anything else-----+

End of input in either waiting state moves to CANCELLED (nothing selected).
The batch size is range-checked once, after confirmation.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from ..domain import RepoCandidate
from ..exit_codes import NetworkError, ValidationError
from .ranking import RankingHeap

logger = logging.getLogger(__name__)

MAX_BATCH = 50

NUMBER_PROMPT = "Please input the number of repo you wish to delete: "
RETRY_NUMBER_PROMPT = "Invalid number, please input again: "
AGAIN_NUMBER_PROMPT = "Please input the number of repo you wish to delete again: "
CONFIRM_PROMPT = "Confirm [y/n]: "


class SelectionState(Enum):
    """States of the interactive selection."""
    AWAITING_NUMBER = "awaiting_number"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    VALIDATED = "validated"
    CANCELLED = "cancelled"


TERMINAL_STATES = (SelectionState.VALIDATED, SelectionState.CANCELLED)


@dataclass
class Selection:
    """Current position of the selection state machine."""
    state: SelectionState = SelectionState.AWAITING_NUMBER
    number: Optional[int] = None
    prompt: str = NUMBER_PROMPT
    message: Optional[str] = None

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES


def transition(selection: Selection, line: Optional[str]) -> Selection:
    """
    Advance the selection by one input line.

    Args:
        selection: Current selection (must not be terminal)
        line: The line read, or None at end of input

    Returns:
        The next selection
    """
    if selection.done:
        return selection

    if line is None:
        return Selection(SelectionState.CANCELLED, None, prompt='')

    if selection.state is SelectionState.AWAITING_NUMBER:
        try:
            number = int(line.strip())
        except ValueError:
            return Selection(SelectionState.AWAITING_NUMBER, None, prompt=RETRY_NUMBER_PROMPT)
        return Selection(
            SelectionState.AWAITING_CONFIRMATION,
            number,
            prompt=CONFIRM_PROMPT,
            message=f"The number you input: {number}",
        )

    # AWAITING_CONFIRMATION
    if line.strip().lower() == 'y':
        return Selection(SelectionState.VALIDATED, selection.number, prompt='')
    return Selection(SelectionState.AWAITING_NUMBER, None, prompt=AGAIN_NUMBER_PROMPT)


def validate_batch_size(number: int, limit: int = MAX_BATCH) -> int:
    """
    Check a confirmed batch size.

    Raises:
        ValidationError: Unless ``0 < number <= limit``
    """
    if number <= 0 or number > limit:
        raise ValidationError(
            f"The number is out of range: {number} (valid range is (0, {limit}])",
            value=number,
        )
    return number


@dataclass
class EvictionResult:
    """Outcome of one deletion batch."""
    requested: int = 0
    deleted: List[RepoCandidate] = field(default_factory=list)
    failed: List[Tuple[RepoCandidate, str]] = field(default_factory=list)

    @property
    def attempted(self) -> int:
        return len(self.deleted) + len(self.failed)


class EvictionController:
    """
    Turns a ranking into a bounded deletion batch.

    I/O is injected so the controller runs the same under a terminal,
    a CliRunner or a plain list of lines.

    Example:
        controller = EvictionController(read_line, echo)
        count = controller.select()
        if count is not None:
            result = controller.execute(ranking.heap, count, client.delete_repository)
    """

    def __init__(
        self,
        read_line: Callable[[str], Optional[str]],
        echo: Optional[Callable[[str], None]] = None,
        limit: int = MAX_BATCH,
    ):
        """
        Initialize EvictionController.

        Args:
            read_line: Shows a prompt and returns the next line, or None at end of input
            echo: Prints an informational line
            limit: Largest batch that can be confirmed
        """
        self.read_line = read_line
        self.echo = echo or (lambda message: None)
        self.limit = limit

    def select(self) -> Optional[int]:
        """
        Run the selection state machine.

        Returns:
            The confirmed batch size, or None when input ended first

        Raises:
            ValidationError: If the confirmed size is outside ``(0, limit]``
        """
        selection = Selection()
        while not selection.done:
            selection = transition(selection, self.read_line(selection.prompt))
            if selection.message:
                self.echo(selection.message)

        if selection.state is SelectionState.CANCELLED:
            logger.info("Input ended before confirmation, nothing selected")
            return None

        return validate_batch_size(selection.number, self.limit)

    def execute(
        self,
        heap: RankingHeap,
        count: int,
        delete: Callable[[str], Any],
    ) -> EvictionResult:
        """
        Delete up to ``count`` of the lowest-ranked repositories.

        Stops early when the heap runs out. A failed deletion is logged and
        recorded; the batch carries on with the next repository.

        Args:
            heap: Consumption heap (popped destructively)
            count: Confirmed batch size
            delete: Called with each repository name
        """
        result = EvictionResult(requested=count)
        while count > 0 and heap:
            candidate = heap.pop()
            try:
                delete(candidate.name)
            except NetworkError as e:
                logger.error(f"Failed to delete {candidate.name}: {e}")
                result.failed.append((candidate, str(e)))
            else:
                result.deleted.append(candidate)
            count -= 1
        return result
