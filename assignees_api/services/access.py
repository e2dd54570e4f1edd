# services/access.py
from typing import Protocol

from sqlalchemy.orm import Session

from assignees_api.models.orm.task_list import ShareRight, TaskListORM
from assignees_api.models.orm.user import UserORM
from assignees_api.repositories.task_repo import TaskListRepository


class AccessGate(Protocol):
    """Decides what a user may do with a list."""

    def can_read(self, user: UserORM, task_list: TaskListORM) -> bool: ...

    def can_write(self, user: UserORM, task_list: TaskListORM) -> bool: ...

    def can_assign(self, user: UserORM, task_list: TaskListORM) -> bool: ...


class ListAccessGate:
    """
    Access based on list ownership and list shares.

    The owner can do everything. A share of any right grants read access; WRITE
    and ADMIN shares also grant write access. A user can be assigned to a task
    whenever they can read the task's list. Nothing is cached: every call asks
    the database.
    """

    def __init__(self, db: Session):
        self.list_repo = TaskListRepository(db)

    def can_read(self, user: UserORM, task_list: TaskListORM) -> bool:
        if task_list.owner_id == user.id:
            return True
        return self.list_repo.get_share(task_list.id, user.id) is not None

    def can_write(self, user: UserORM, task_list: TaskListORM) -> bool:
        if task_list.owner_id == user.id:
            return True
        share = self.list_repo.get_share(task_list.id, user.id)
        return share is not None and share.right >= ShareRight.WRITE

    def can_assign(self, user: UserORM, task_list: TaskListORM) -> bool:
        return self.can_read(user, task_list)
