"""Per-principal board state held by the dashboard process."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from managersol.domain.board import AssignmentBoard


@dataclass(slots=True)
class BoardRegistry:
    boards: dict[str, AssignmentBoard] = field(default_factory=dict)
    commit_locks: dict[tuple[str, str], asyncio.Lock] = field(default_factory=dict)

    def board_for(self, principal_id: str) -> AssignmentBoard:
        board = self.boards.get(principal_id)
        if board is None:
            board = AssignmentBoard()
            self.boards[principal_id] = board
        return board

    def commit_lock(self, principal_id: str, group_id: str) -> asyncio.Lock:
        """One lock per (principal, group): commits for a group never interleave."""
        key = (principal_id, group_id)
        lock = self.commit_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self.commit_locks[key] = lock
        return lock

    def discard(self, principal_id: str) -> None:
        self.boards.pop(principal_id, None)
        for key, lock in list(self.commit_locks.items()):
            if key[0] == principal_id and not lock.locked():
                self.commit_locks.pop(key, None)
