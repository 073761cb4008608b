import asyncio

import pytest

from managersol.adapters.backend import InMemoryBackendClient
from managersol.domain.reorder import build_reorder_payload, move_item
from managersol.repositories.boards import BoardRegistry
from managersol.repositories.memory import InMemoryStore
from managersol.schemas.board import BoardState, GroupMembershipItem
from managersol.services.board import BoardService


def _seeded_service(sort_orders):
    store = InMemoryStore()
    user = store.create_user(email="admin@example.com", password="pw", role="admin")
    backend = InMemoryBackendClient(store, token=store.issue_token(user.id))
    group = store.create_task_group_model("Onboarding")
    for index, sort_order in enumerate(sort_orders):
        element = store.create_task_element(f"E{index}")
        record = store.create_group_element(
            task_group_model_id=group.id,
            task_element_id=element.id,
            title=element.title,
            description=None,
            mandatory=False,
            column_number=1 + index % 2,
        )
        record.sort_order = sort_order
    return backend, group, BoardService(BoardRegistry(), backend, principal_id=user.id)


@pytest.mark.p0
@pytest.mark.test_id("BRD_001")
def test_brd_001():
    """Given items with and without ids, when the reorder payload is built, then sort orders are 1..M in visual order and columns are unchanged."""
    items = [
        GroupMembershipItem(id="a", column_number=1),
        GroupMembershipItem(id="", column_number=1),
        GroupMembershipItem(id="c", column_number=2),
    ]

    entries, skipped = build_reorder_payload(items)

    assert [entry.model_dump() for entry in entries] == [
        {"id": "a", "sort_order": 1, "column_number": 1},
        {"id": "c", "sort_order": 2, "column_number": 2},
    ]
    assert skipped == 1


@pytest.mark.p0
@pytest.mark.test_id("BRD_002")
def test_brd_002():
    """Given [A, B, C, D], when A is dragged over C, then the order is [B, C, A, D]."""
    items = [GroupMembershipItem(id=item_id) for item_id in "ABCD"]

    assert [item.id for item in move_item(items, "A", "C")] == ["B", "C", "A", "D"]


@pytest.mark.p0
@pytest.mark.test_id("BRD_003")
def test_brd_003():
    """Given a local order that diverges from the server, when a commit succeeds, then the board shows the server's fresh rows."""
    backend, group, service = _seeded_service([3, 3, 7, 1])

    async def scenario():
        await service.select_group(group.id)
        service.board.items.reverse()
        await service.commit()

    asyncio.run(scenario())

    fresh = asyncio.run(backend.list_group_elements(group.id))
    assert service.board.items == fresh
    assert [item.sort_order for item in service.board.items] == [1, 2, 3, 4]
    assert len({item.sort_order for item in service.board.items}) == len(service.board.items)


@pytest.mark.p0
@pytest.mark.test_id("BRD_004")
def test_brd_004():
    """Given a loaded group, when it is selected again, then the board is idle with no group and no items."""
    _, group, service = _seeded_service([1, 2])

    async def scenario():
        await service.select_group(group.id)
        return await service.select_group(group.id)

    snapshot = asyncio.run(scenario())

    assert snapshot.state == BoardState.IDLE
    assert snapshot.active_group_id is None
    assert snapshot.items == []
