"""In-memory backend records used by the memory backend provider and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from secrets import compare_digest, token_urlsafe
from uuid import uuid4


@dataclass(slots=True)
class UserRecord:
    id: str
    email: str
    password: str
    role: str
    firstname: str | None = None
    lastname: str | None = None
    company_id: str | None = None


@dataclass(slots=True)
class TaskGroupModelRecord:
    id: str
    title: str
    description: str | None = None


@dataclass(slots=True)
class TaskElementRecord:
    id: str
    title: str
    description: str | None = None
    type: str | None = None


@dataclass(slots=True)
class GroupElementRecord:
    id: str
    task_group_model_id: str
    task_element_id: str
    sort_order: int
    column_number: int
    mandatory: bool
    title: str | None
    description: str | None
    created_at: datetime


@dataclass(slots=True)
class InMemoryStore:
    """Simple, deterministic stand-in for the REST backend's persistence."""

    users: dict[str, UserRecord] = field(default_factory=dict)
    sessions: dict[str, str] = field(default_factory=dict)
    task_group_models: dict[str, TaskGroupModelRecord] = field(default_factory=dict)
    task_elements: dict[str, TaskElementRecord] = field(default_factory=dict)
    group_elements: dict[str, GroupElementRecord] = field(default_factory=dict)
    reorder_request_count: int = 0
    reorder_failure_message: str | None = None
    create_failure_message: str | None = None

    def create_user(
        self,
        *,
        email: str,
        password: str,
        role: str,
        firstname: str | None = None,
        lastname: str | None = None,
        company_id: str | None = None,
    ) -> UserRecord:
        user = UserRecord(
            id=str(uuid4()),
            email=email,
            password=password,
            role=role,
            firstname=firstname,
            lastname=lastname,
            company_id=company_id,
        )
        self.users[user.id] = user
        return user

    def authenticate(self, email: str, password: str) -> UserRecord | None:
        for user in self.users.values():
            if user.email == email and compare_digest(user.password, password):
                return user
        return None

    def issue_token(self, user_id: str) -> str:
        token = token_urlsafe(24)
        self.sessions[token] = user_id
        return token

    def revoke_token(self, token: str) -> None:
        self.sessions.pop(token, None)

    def user_for_token(self, token: str | None) -> UserRecord | None:
        if not token:
            return None
        user_id = self.sessions.get(token)
        return self.users.get(user_id) if user_id else None

    def create_task_group_model(self, title: str, description: str | None = None) -> TaskGroupModelRecord:
        record = TaskGroupModelRecord(id=str(uuid4()), title=title, description=description)
        self.task_group_models[record.id] = record
        return record

    def create_task_element(
        self,
        title: str,
        description: str | None = None,
        element_type: str | None = None,
    ) -> TaskElementRecord:
        record = TaskElementRecord(id=str(uuid4()), title=title, description=description, type=element_type)
        self.task_elements[record.id] = record
        return record

    def list_group_elements(self, group_id: str) -> list[GroupElementRecord]:
        records = [record for record in self.group_elements.values() if record.task_group_model_id == group_id]
        records.sort(key=lambda record: (record.sort_order, record.created_at))
        return records

    def create_group_element(
        self,
        *,
        task_group_model_id: str,
        task_element_id: str,
        title: str | None,
        description: str | None,
        mandatory: bool,
        column_number: int,
    ) -> GroupElementRecord:
        """Append a membership at the end of its group."""
        existing = self.list_group_elements(task_group_model_id)
        next_order = max((record.sort_order for record in existing), default=0) + 1
        record = GroupElementRecord(
            id=str(uuid4()),
            task_group_model_id=task_group_model_id,
            task_element_id=task_element_id,
            sort_order=next_order,
            column_number=column_number,
            mandatory=mandatory,
            title=title,
            description=description,
            created_at=datetime.now(UTC),
        )
        self.group_elements[record.id] = record
        return record

    def reorder_group_elements(self, entries: list[tuple[str, int, int]]) -> None:
        """Apply ``(id, sort_order, column_number)`` triples; unknown ids are ignored."""
        for element_id, sort_order, column_number in entries:
            record = self.group_elements.get(element_id)
            if record is None:
                continue
            record.sort_order = sort_order
            record.column_number = column_number
