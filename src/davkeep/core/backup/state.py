"""State tracking for backup and restore operations."""

from davkeep.domain.types import PipelineState
from davkeep.exceptions import StateTransitionError
from davkeep.logger import get_logger

logger = get_logger(__name__)

_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.PREPARING}),
    PipelineState.PREPARING: frozenset(
        {
            PipelineState.TRANSFERRING,
            PipelineState.RESTORING,
            PipelineState.COMPLETE,
        }
    ),
    PipelineState.TRANSFERRING: frozenset(
        {PipelineState.PREVIEWED, PipelineState.COMPLETE}
    ),
    PipelineState.PREVIEWED: frozenset({PipelineState.RESTORING}),
    PipelineState.RESTORING: frozenset({PipelineState.COMPLETE}),
    PipelineState.COMPLETE: frozenset(),
    PipelineState.FAILED: frozenset(),
}


class OperationState:
    """Tracks one operation through the pipeline state machine.

    Idle -> Preparing -> Transferring -> Previewed -> Restoring -> Complete.
    Uploads and exports complete without a preview, and local imports go
    from Preparing straight to Restoring. Failed is reachable from every
    non-terminal state.
    """

    def __init__(
        self,
        operation: str,
        initial: PipelineState = PipelineState.IDLE,
    ) -> None:
        """Initialize tracker for a named operation.

        Args:
            operation: Operation name used in logs
            initial: Starting state (Previewed when applying a preview)

        """
        self.operation = operation
        self.current = initial
        self.error: Exception | None = None

    def advance(self, new_state: PipelineState) -> None:
        """Move to new_state.

        Raises:
            StateTransitionError: If the transition is not allowed

        """
        if new_state is PipelineState.FAILED:
            self.fail()
            return
        if new_state not in _TRANSITIONS[self.current]:
            msg = f"cannot go from {self.current.value} to {new_state.value}"
            raise StateTransitionError(msg, target=self.operation)
        logger.debug(
            "%s: %s -> %s",
            self.operation,
            self.current.value,
            new_state.value,
        )
        self.current = new_state

    def fail(self, error: Exception | None = None) -> None:
        """Mark the operation as failed.

        Raises:
            StateTransitionError: If the operation already finished

        """
        if self.current.is_terminal:
            msg = f"cannot fail from {self.current.value}"
            raise StateTransitionError(msg, target=self.operation)
        logger.debug("%s: %s -> failed", self.operation, self.current.value)
        self.current = PipelineState.FAILED
        self.error = error

    @property
    def is_finished(self) -> bool:
        """Whether the operation reached Complete or Failed."""
        return self.current.is_terminal
