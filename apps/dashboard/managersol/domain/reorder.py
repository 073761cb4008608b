"""Pure helpers for the drag-and-drop reorder protocol."""

from __future__ import annotations

from managersol.schemas.board import GroupMembershipItem, ReorderEntry


def move_item(items: list[GroupMembershipItem], drag_id: str, over_id: str) -> list[GroupMembershipItem]:
    """Relocate ``drag_id`` to the current index of ``over_id``.

    This is a remove-then-insert, not a swap: ``[A, B, C, D]`` with A dragged
    over C becomes ``[B, C, A, D]``. Unknown ids leave the order unchanged.
    """
    updated = list(items)
    if drag_id == over_id:
        return updated

    from_index = _index_of(updated, drag_id)
    to_index = _index_of(updated, over_id)
    if from_index < 0 or to_index < 0:
        return updated

    moved = updated.pop(from_index)
    updated.insert(to_index, moved)
    return updated


def build_reorder_payload(items: list[GroupMembershipItem]) -> tuple[list[ReorderEntry], int]:
    """Number the items with a usable id ``1..M`` in their current order.

    Returns the batch entries and the count of rows skipped for lacking an id.
    ``column_number`` is passed through untouched.
    """
    valid_items = [item for item in items if item.id]
    skipped = len(items) - len(valid_items)
    entries = [
        ReorderEntry(id=item.id, sort_order=index + 1, column_number=item.column_number)
        for index, item in enumerate(valid_items)
    ]
    return entries, skipped


def filter_by_text(records: list, query: str | None) -> list:
    """Case-insensitive substring match on ``title`` or ``description``."""
    needle = (query or "").lower()
    if not needle:
        return list(records)
    return [
        record
        for record in records
        if needle in (record.title or "").lower() or needle in (record.description or "").lower()
    ]


def _index_of(items: list[GroupMembershipItem], item_id: str) -> int:
    for index, item in enumerate(items):
        if item.id == item_id:
            return index
    return -1
