# repositories/assignee_repo.py
from datetime import datetime
from typing import Iterable, Set, Tuple

from sqlalchemy import Select, delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from assignees_api.core.app_logger import get_logger
from assignees_api.core.errors import ConflictError, PersistenceError
from assignees_api.models.orm.task_assignee import TaskAssigneeORM
from assignees_api.models.orm.user import UserORM

logger = get_logger("repositories.assignee")


class TaskAssigneeRepository:
    """
    Storage of (task, user) assignment pairs.

    The repository never commits: every method runs inside whatever unit of
    work the caller opened on the session, so a service can group several
    mutations into one commit.
    """

    def __init__(self, db: Session):
        self.db = db

    def current_user_ids(self, task_id: int) -> Set[int]:
        """Reads the ids of everyone currently assigned to a task, straight from the table."""
        stmt = select(TaskAssigneeORM.user_id).where(TaskAssigneeORM.task_id == task_id)
        try:
            return set(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            logger.exception("Failed to load assignees for task %s", task_id)
            raise PersistenceError("Could not load the current assignees.") from e

    def get_assigned_users(self, task_id: int) -> list[UserORM]:
        """Users assigned to a task, ordered by id."""
        stmt = (
            select(UserORM)
            .join(TaskAssigneeORM, TaskAssigneeORM.user_id == UserORM.id)
            .where(TaskAssigneeORM.task_id == task_id)
            .order_by(UserORM.id)
        )
        try:
            return list(self.db.scalars(stmt).all())
        except SQLAlchemyError as e:
            logger.exception("Failed to load assigned users for task %s", task_id)
            raise PersistenceError("Could not load the assigned users.") from e

    def insert(self, task_id: int, user_id: int) -> TaskAssigneeORM:
        """
        Adds one assignment row.

        Raises ConflictError if the user is already assigned to the task; the
        unique constraint on (task_id, user_id) is what detects it.
        """
        db_assignee = TaskAssigneeORM(
            task_id=task_id,
            user_id=user_id,
            created=datetime.utcnow(),
        )
        try:
            self.db.add(db_assignee)
            self.db.flush()
        except IntegrityError as e:
            logger.warning("User %s is already assigned to task %s", user_id, task_id)
            raise ConflictError(task_id=task_id, user_id=user_id) from e
        except SQLAlchemyError as e:
            logger.exception("Failed to assign user %s to task %s", user_id, task_id)
            raise PersistenceError("Could not create the assignee.") from e

        return db_assignee

    def delete_one(self, task_id: int, user_id: int) -> int:
        """Removes one pair. Removing a pair that does not exist is not an error."""
        stmt = delete(TaskAssigneeORM).where(
            TaskAssigneeORM.task_id == task_id,
            TaskAssigneeORM.user_id == user_id,
        )
        return self._execute_delete(stmt, task_id)

    def delete_many(self, task_id: int, user_ids: Iterable[int]) -> int:
        """Removes every listed user from a task with a single DELETE statement."""
        user_ids = sorted(set(user_ids))
        if not user_ids:
            return 0

        stmt = delete(TaskAssigneeORM).where(
            TaskAssigneeORM.task_id == task_id,
            TaskAssigneeORM.user_id.in_(user_ids),
        )
        return self._execute_delete(stmt, task_id)

    def delete_all(self, task_id: int) -> int:
        """Unassigns everyone from a task with a single DELETE statement."""
        stmt = delete(TaskAssigneeORM).where(TaskAssigneeORM.task_id == task_id)
        return self._execute_delete(stmt, task_id)

    def _execute_delete(self, stmt, task_id: int) -> int:
        try:
            result = self.db.execute(stmt, execution_options={"synchronize_session": False})
        except SQLAlchemyError as e:
            logger.exception("Failed to delete assignees of task %s", task_id)
            raise PersistenceError("Could not delete the assignees.") from e
        return result.rowcount

    def list_with_principal_details(
        self,
        task_id: int,
        search: str = "",
        limit: int = 0,
        offset: int = 0,
    ) -> Tuple[list[UserORM], int]:
        """
        Returns one page of assigned users whose username contains ``search``
        (case-insensitive) together with the number of all matching users.

        A ``limit`` of 0 returns every match. The total is counted by a second,
        independent query issued after the page query: a write committed
        between the two shows up in one result and not in the other. Callers
        must tolerate that drift.
        """
        page_stmt = self._filter_assignees(select(UserORM), task_id, search).order_by(
            UserORM.id
        )
        if limit > 0:
            page_stmt = page_stmt.limit(limit).offset(offset)

        count_stmt = self._filter_assignees(
            select(func.count(UserORM.id)).select_from(UserORM), task_id, search
        )

        try:
            users = list(self.db.scalars(page_stmt).all())
            total_count = self.db.scalar(count_stmt) or 0
        except SQLAlchemyError as e:
            logger.exception("Failed to list assignees for task %s", task_id)
            raise PersistenceError("Could not list the assignees.") from e

        return users, total_count

    @staticmethod
    def _filter_assignees(stmt: Select, task_id: int, search: str) -> Select:
        stmt = stmt.join(TaskAssigneeORM, TaskAssigneeORM.user_id == UserORM.id).where(
            TaskAssigneeORM.task_id == task_id
        )
        if search:
            stmt = stmt.where(UserORM.username.icontains(search, autoescape=True))
        return stmt
