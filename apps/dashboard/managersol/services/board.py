"""Assignment board service layer."""

from __future__ import annotations

import logging

from managersol.adapters.backend import BackendClient, BackendError, BackendUnauthorizedError
from managersol.core.logging_safety import safe_log_identifier
from managersol.domain.board import AssignmentBoard
from managersol.domain.board_fsm import ensure_state
from managersol.domain.reorder import build_reorder_payload, filter_by_text
from managersol.errors import ApiError
from managersol.repositories.boards import BoardRegistry
from managersol.schemas.board import (
    BoardSnapshot,
    BoardState,
    CreateGroupElementPayload,
    GroupMembershipItem,
    Notification,
    TaskElement,
    TaskGroupModel,
)

logger = logging.getLogger(__name__)

_NEW_ITEM_COLUMN = 1


class BoardService:
    def __init__(self, registry: BoardRegistry, backend: BackendClient, *, principal_id: str) -> None:
        self._registry = registry
        self._backend = backend
        self._principal_id = principal_id
        self._board = registry.board_for(principal_id)

    @property
    def board(self) -> AssignmentBoard:
        return self._board

    def snapshot(self) -> BoardSnapshot:
        return self._board.snapshot()

    async def list_groups(self, *, search: str | None = None) -> list[TaskGroupModel]:
        return filter_by_text(await self._backend.list_task_group_models(), search)

    async def list_elements(self, *, search: str | None = None) -> list[TaskElement]:
        return filter_by_text(await self._backend.list_task_elements(), search)

    async def select_group(self, group_id: str) -> BoardSnapshot:
        """Load ``group_id``; selecting the active group again returns the board to idle."""
        board = self._board
        if board.is_active(group_id):
            board.deactivate()
            return board.snapshot()

        generation = board.activate(group_id)
        rows = await self._backend.list_group_elements(group_id)
        board.apply_fetch(generation, rows)
        return board.snapshot()

    def begin_drag(self, item_id: str) -> BoardSnapshot:
        self._board.begin_drag(item_id)
        return self._board.snapshot()

    def drag_over(self, item_id: str) -> BoardSnapshot:
        self._board.drag_over(item_id)
        return self._board.snapshot()

    async def end_drag(self, *, dropped: bool) -> Notification | None:
        """A drop commits the previewed order; any other drag end discards it."""
        if not dropped:
            self._board.cancel_drag()
            return None
        return await self.commit()

    async def commit(self) -> Notification:
        """Persist the current on-screen order, then re-read the canonical order.

        Commits for the same group are serialized; on failure the local order is
        kept as it was and an ``ApiError`` carries the message to the operator.
        """
        board = self._board
        group_id = board.active_group_id
        if group_id is None:
            raise ApiError(
                status_code=409,
                code="NO_GROUP_SELECTED",
                message="Please select a task group first.",
            )

        safe_group_id = safe_log_identifier(group_id, prefix="gid")
        async with self._registry.commit_lock(self._principal_id, group_id):
            if board.active_group_id != group_id:
                raise ApiError(
                    status_code=409,
                    code="NO_GROUP_SELECTED",
                    message="Please select a task group first.",
                )
            board.begin_commit()
            generation = board.generation
            entries, skipped = build_reorder_payload(board.items)
            try:
                await self._backend.reorder_group_elements(entries)
                rows = await self._backend.list_group_elements(group_id)
            except BackendUnauthorizedError:
                raise
            except BackendError as exc:
                logger.warning(
                    "board.commit_failed group_id=%s items=%s skipped=%s error=%s",
                    safe_group_id,
                    len(entries),
                    skipped,
                    exc,
                )
                raise ApiError(
                    status_code=502,
                    code="REORDER_COMMIT_FAILED",
                    message=str(exc) or "Failed to save order",
                    details={"skipped": skipped},
                ) from exc
            finally:
                board.finish_commit()

            board.apply_fetch(generation, rows)

        logger.info("board.committed group_id=%s items=%s skipped=%s", safe_group_id, len(entries), skipped)
        return Notification(
            title="Order saved",
            description=f"{skipped} older item(s) skipped." if skipped > 0 else None,
        )

    async def add_item_to_group(
        self,
        *,
        element_id: str,
        title: str | None,
        description: str | None,
        mandatory: bool,
    ) -> Notification:
        """Assign an element to the active group; the new row appears only via re-fetch."""
        board = self._board
        group_id = board.active_group_id
        if group_id is None:
            raise ApiError(
                status_code=409,
                code="NO_GROUP_SELECTED",
                message="Please select a task group first.",
            )
        ensure_state(board.state, BoardState.LOADED, BoardState.LOADED)

        generation = board.generation
        payload = CreateGroupElementPayload(
            task_group_model_id=group_id,
            task_element_id=element_id,
            title=title or None,
            description=description or None,
            mandatory=mandatory,
            column_number=_NEW_ITEM_COLUMN,
        )
        try:
            await self._backend.create_group_element(payload)
            rows = await self._backend.list_group_elements(group_id)
        except BackendUnauthorizedError:
            raise
        except BackendError as exc:
            raise ApiError(
                status_code=502,
                code="ASSIGN_FAILED",
                message=str(exc) or "Failed to assign",
            ) from exc

        board.apply_fetch(generation, rows)
        return Notification(title="Added", description="Task element assigned to the group.")

    def view_details(self, item_id: str) -> GroupMembershipItem | None:
        """Return the item, or ``None`` while a drag is in progress."""
        if self._board.state is BoardState.DRAGGING:
            return None
        item = self._board.find_item(item_id)
        if item is None:
            raise ApiError(status_code=404, code="RESOURCE_NOT_FOUND", message="Resource not found")
        return item
