"""Task group element board routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Response, status

from managersol.domain.access import BOARD_ROUTE
from managersol.routes.dependencies import get_board_service, require_route, require_shell_principal
from managersol.schemas.board import (
    AddItemRequest,
    BoardActionResponse,
    BoardSnapshot,
    DragEndRequest,
    DragItemRequest,
    GroupMembershipItem,
    TaskElement,
    TaskGroupModel,
)
from managersol.schemas.error import BoardTransitionError, ErrorResponse, ReorderCommitError
from managersol.services.board import BoardService

router = APIRouter(
    prefix=BOARD_ROUTE,
    tags=["Board"],
    dependencies=[Depends(require_shell_principal), Depends(require_route(BOARD_ROUTE))],
)


@router.get("", response_model=BoardSnapshot)
async def get_board(
    service: Annotated[BoardService, Depends(get_board_service)],
) -> BoardSnapshot:
    return service.snapshot()


@router.get("/groups", response_model=list[TaskGroupModel])
async def list_groups(
    service: Annotated[BoardService, Depends(get_board_service)],
    search: Annotated[str | None, Query()] = None,
) -> list[TaskGroupModel]:
    return await service.list_groups(search=search)


@router.get("/elements", response_model=list[TaskElement])
async def list_elements(
    service: Annotated[BoardService, Depends(get_board_service)],
    search: Annotated[str | None, Query()] = None,
) -> list[TaskElement]:
    return await service.list_elements(search=search)


@router.post(
    "/groups/{groupId}/select",
    response_model=BoardSnapshot,
    responses={409: {"model": BoardTransitionError}},
)
async def select_group(
    group_id: Annotated[str, Path(alias="groupId")],
    service: Annotated[BoardService, Depends(get_board_service)],
) -> BoardSnapshot:
    return await service.select_group(group_id)


@router.post(
    "/drag/start",
    response_model=BoardSnapshot,
    responses={404: {"model": ErrorResponse}, 409: {"model": BoardTransitionError}},
)
async def start_drag(
    payload: DragItemRequest,
    service: Annotated[BoardService, Depends(get_board_service)],
) -> BoardSnapshot:
    return service.begin_drag(payload.item_id)


@router.post("/drag/over", response_model=BoardSnapshot, responses={409: {"model": BoardTransitionError}})
async def drag_over(
    payload: DragItemRequest,
    service: Annotated[BoardService, Depends(get_board_service)],
) -> BoardSnapshot:
    return service.drag_over(payload.item_id)


@router.post(
    "/drag/end",
    response_model=BoardActionResponse,
    responses={409: {"model": BoardTransitionError | ErrorResponse}, 502: {"model": ReorderCommitError}},
)
async def end_drag(
    payload: DragEndRequest,
    service: Annotated[BoardService, Depends(get_board_service)],
) -> BoardActionResponse:
    notification = await service.end_drag(dropped=payload.dropped)
    return BoardActionResponse(board=service.snapshot(), notification=notification)


@router.post(
    "/commit",
    response_model=BoardActionResponse,
    responses={409: {"model": BoardTransitionError | ErrorResponse}, 502: {"model": ReorderCommitError}},
)
async def commit_order(
    service: Annotated[BoardService, Depends(get_board_service)],
) -> BoardActionResponse:
    notification = await service.commit()
    return BoardActionResponse(board=service.snapshot(), notification=notification)


@router.post(
    "/items",
    response_model=BoardActionResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def add_item(
    payload: AddItemRequest,
    service: Annotated[BoardService, Depends(get_board_service)],
) -> BoardActionResponse:
    notification = await service.add_item_to_group(
        element_id=payload.element_id,
        title=payload.title,
        description=payload.description,
        mandatory=payload.mandatory,
    )
    return BoardActionResponse(board=service.snapshot(), notification=notification)


@router.get(
    "/items/{itemId}",
    response_model=GroupMembershipItem,
    responses={204: {"description": "Drag in progress"}, 404: {"model": ErrorResponse}},
)
async def view_item(
    item_id: Annotated[str, Path(alias="itemId")],
    service: Annotated[BoardService, Depends(get_board_service)],
):
    item = service.view_details(item_id)
    if item is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return item
