"""Seed data and small read helpers shared by the test modules."""

from datetime import datetime
from typing import Iterable

from sqlalchemy import insert, select

from assignees_api.models.orm.task_assignee import TaskAssigneeORM
from assignees_api.models.orm.task_list import TaskListORM

LIST_UPDATED_AT = datetime(2020, 1, 1, 12, 0)

OWNER_ID = 30
WRITER_ID = 31
READER_ID = 32
OUTSIDER_ID = 20

# id -> username; every one of these can read list 1 except the outsider
USERS = {
    1: "alice",
    2: "bob",
    3: "carol",
    7: "dave",
    9: "erin",
    12: "frank",
    OUTSIDER_ID: "outsider",
    OWNER_ID: "owner",
    WRITER_ID: "writer",
    READER_ID: "reader",
}

TOKENS = {
    "owner-token": OWNER_ID,
    "writer-token": WRITER_ID,
    "reader-token": READER_ID,
    "ghost-token": 999,
}


def auth(token: str = "owner-token") -> dict:
    return {"Authorization": f"Bearer {token}"}


def seed_assignees(db, task_id: int, user_ids: Iterable[int]) -> None:
    # Core insert keeps the seeded rows out of the session identity map
    rows = [{"task_id": task_id, "user_id": user_id} for user_id in user_ids]
    if rows:
        db.execute(insert(TaskAssigneeORM), rows)
    db.commit()


def assigned_ids(db, task_id: int) -> set[int]:
    stmt = select(TaskAssigneeORM.user_id).where(TaskAssigneeORM.task_id == task_id)
    return set(db.scalars(stmt).all())


def list_updated(db, list_id: int = 1) -> datetime:
    return db.scalar(select(TaskListORM.updated).where(TaskListORM.id == list_id))
