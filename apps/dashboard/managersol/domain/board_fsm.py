"""Assignment board state transition rules."""

from managersol.errors import ApiError
from managersol.schemas.board import BoardState

_ALLOWED_TRANSITIONS: dict[BoardState, set[BoardState]] = {
    BoardState.IDLE: {BoardState.LOADED},
    BoardState.LOADED: {BoardState.IDLE, BoardState.LOADED, BoardState.DRAGGING, BoardState.COMMITTING},
    BoardState.DRAGGING: {BoardState.DRAGGING, BoardState.LOADED, BoardState.COMMITTING},
    BoardState.COMMITTING: {BoardState.LOADED},
}


def allowed_next_states(state: BoardState) -> list[BoardState]:
    """Return deterministically ordered allowed successors for a state."""
    return sorted(_ALLOWED_TRANSITIONS.get(state, set()), key=lambda s: s.value)


def ensure_transition(old_state: BoardState, new_state: BoardState) -> None:
    """Validate a board transition; interactions are rejected while a commit is in flight."""
    if new_state not in _ALLOWED_TRANSITIONS.get(old_state, set()):
        raise ApiError(
            status_code=409,
            code="BOARD_TRANSITION_INVALID",
            message="Invalid board state transition",
            details={
                "current_state": old_state,
                "attempted_state": new_state,
                "allowed_next_states": allowed_next_states(old_state),
            },
        )


def ensure_state(state: BoardState, expected: BoardState | set[BoardState], attempted: BoardState) -> None:
    """Require ``state`` to be ``expected`` (or one of them) before attempting ``attempted``."""
    accepted = expected if isinstance(expected, set) else {expected}
    if state not in accepted:
        raise ApiError(
            status_code=409,
            code="BOARD_TRANSITION_INVALID",
            message="Invalid board state transition",
            details={
                "current_state": state,
                "attempted_state": attempted,
                "allowed_next_states": allowed_next_states(state),
            },
        )
