"""Assignment board schemas."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from managersol.schemas.auth import coerce_identifier


class BoardState(str, Enum):
    IDLE = "IDLE"
    LOADED = "LOADED"
    DRAGGING = "DRAGGING"
    COMMITTING = "COMMITTING"


def _identifier_or_empty(value: Any) -> Any:
    if value is None:
        return ""
    return coerce_identifier(value)


class TaskGroupModel(BaseModel):
    id: str
    title: str
    description: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        return _identifier_or_empty(value)


class TaskElement(BaseModel):
    id: str
    title: str
    description: str | None = None
    type: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        return _identifier_or_empty(value)


class GroupMembershipItem(BaseModel):
    """One task element assigned to a task group model, with its own rank."""

    id: str = ""
    group_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("task_group_model_id", "group_id"),
    )
    task_element_id: str | None = None
    sort_order: int = 0
    column_number: int = 1
    mandatory: bool = False
    bloc: int | None = None
    title: str | None = None
    description: str | None = None
    element_title: str | None = None
    element_type: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> Any:
        return _identifier_or_empty(value)

    @field_validator("group_id", "task_element_id", mode="before")
    @classmethod
    def _normalize_foreign_keys(cls, value: Any) -> Any:
        return coerce_identifier(value)

    @field_validator("column_number", mode="before")
    @classmethod
    def _default_column(cls, value: Any) -> Any:
        return 1 if value is None else value


class ReorderEntry(BaseModel):
    id: str
    sort_order: int = Field(ge=1)
    column_number: int


class ReorderRequest(BaseModel):
    items: list[ReorderEntry]


class CreateGroupElementPayload(BaseModel):
    """Backend body of ``POST /task-group-elements``."""

    task_group_model_id: str
    task_element_id: str
    title: str | None = None
    description: str | None = None
    mandatory: bool = False
    column_number: int = 1


class AddItemRequest(BaseModel):
    element_id: str = Field(min_length=1)
    title: str | None = None
    description: str | None = None
    mandatory: bool = False


class DragItemRequest(BaseModel):
    item_id: str


class DragEndRequest(BaseModel):
    dropped: bool


class Notification(BaseModel):
    title: str
    description: str | None = None


class BoardSnapshot(BaseModel):
    state: BoardState
    active_group_id: str | None = None
    dragging_item_id: str | None = None
    items: list[GroupMembershipItem]


class BoardActionResponse(BaseModel):
    board: BoardSnapshot
    notification: Notification | None = None
