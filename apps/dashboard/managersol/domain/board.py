"""In-memory state of one operator's assignment board."""

from __future__ import annotations

from dataclasses import dataclass, field

from managersol.domain.board_fsm import ensure_state, ensure_transition
from managersol.domain.reorder import move_item
from managersol.errors import ApiError
from managersol.schemas.board import BoardSnapshot, BoardState, GroupMembershipItem

_SELECTABLE_STATES = {BoardState.IDLE, BoardState.LOADED}


@dataclass(slots=True)
class AssignmentBoard:
    """Local editable order for the active group.

    ``generation`` increases on every selection change; fetch results carry the
    generation they were issued under and are dropped when it no longer matches.
    """

    state: BoardState = BoardState.IDLE
    active_group_id: str | None = None
    items: list[GroupMembershipItem] = field(default_factory=list)
    dragging_item_id: str | None = None
    generation: int = 0
    _pre_drag_items: list[GroupMembershipItem] | None = None

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            state=self.state,
            active_group_id=self.active_group_id,
            dragging_item_id=self.dragging_item_id,
            items=list(self.items),
        )

    def is_active(self, group_id: str) -> bool:
        return self.active_group_id is not None and self.active_group_id == group_id

    def activate(self, group_id: str) -> int:
        ensure_state(self.state, _SELECTABLE_STATES, BoardState.LOADED)
        self.generation += 1
        self.active_group_id = group_id
        self.items = []
        self.state = BoardState.LOADED
        return self.generation

    def deactivate(self) -> None:
        ensure_state(self.state, _SELECTABLE_STATES, BoardState.IDLE)
        self.generation += 1
        self.active_group_id = None
        self.items = []
        self.state = BoardState.IDLE

    def apply_fetch(self, generation: int, rows: list[GroupMembershipItem]) -> bool:
        """Replace local items with server rows unless the selection moved on."""
        if generation != self.generation:
            return False
        self.items = list(rows)
        return True

    def begin_drag(self, item_id: str) -> None:
        ensure_state(self.state, BoardState.LOADED, BoardState.DRAGGING)
        if not any(item.id == item_id for item in self.items):
            raise ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message="Resource not found")
        self._pre_drag_items = list(self.items)
        self.dragging_item_id = item_id
        self.state = BoardState.DRAGGING

    def drag_over(self, item_id: str) -> None:
        ensure_state(self.state, BoardState.DRAGGING, BoardState.DRAGGING)
        if self.dragging_item_id is None or item_id == self.dragging_item_id:
            return
        self.items = move_item(self.items, self.dragging_item_id, item_id)

    def cancel_drag(self) -> None:
        """End a drag without a drop, restoring the order from before it started."""
        ensure_state(self.state, BoardState.DRAGGING, BoardState.LOADED)
        if self._pre_drag_items is not None:
            self.items = self._pre_drag_items
        self._end_drag()
        self.state = BoardState.LOADED

    def begin_commit(self) -> None:
        ensure_transition(self.state, BoardState.COMMITTING)
        self._end_drag()
        self.state = BoardState.COMMITTING

    def finish_commit(self) -> None:
        ensure_transition(self.state, BoardState.LOADED)
        self.state = BoardState.LOADED

    def find_item(self, item_id: str) -> GroupMembershipItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def _end_drag(self) -> None:
        self.dragging_item_id = None
        self._pre_drag_items = None
