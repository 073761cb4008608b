"""API error response schemas."""

from typing import Any
from typing import Literal

from pydantic import BaseModel

from managersol.schemas.board import BoardState


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class BoardTransitionErrorDetails(BaseModel):
    current_state: BoardState
    attempted_state: BoardState
    allowed_next_states: list[BoardState]


class BoardTransitionError(BaseModel):
    code: Literal["BOARD_TRANSITION_INVALID"]
    message: str
    details: BoardTransitionErrorDetails


class ReorderCommitErrorDetails(BaseModel):
    skipped: int


class ReorderCommitError(BaseModel):
    code: Literal["REORDER_COMMIT_FAILED"]
    message: str
    details: ReorderCommitErrorDetails
