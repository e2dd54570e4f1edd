from datetime import datetime
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from assignees_api.core.app_logger import get_logger
from assignees_api.core.errors import PersistenceError
from assignees_api.models.orm.task import TaskORM
from assignees_api.models.orm.task_list import ListShareORM, TaskListORM

logger = get_logger("repositories.task")


class TaskRepository:
    def __init__(self, db: Session):
        """Initializes the repository with a database session."""
        self.db = db

    def get_task(self, task_id: int) -> Optional[TaskORM]:
        try:
            return self.db.get(TaskORM, task_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to load task %s", task_id)
            raise PersistenceError("Could not load the task.") from e


class TaskListRepository:
    def __init__(self, db: Session):
        """Initializes the repository with a database session."""
        self.db = db

    def get_list(self, list_id: int) -> Optional[TaskListORM]:
        try:
            return self.db.get(TaskListORM, list_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to load list %s", list_id)
            raise PersistenceError("Could not load the list.") from e

    def get_share(self, list_id: int, user_id: int) -> Optional[ListShareORM]:
        stmt = select(ListShareORM).where(
            ListShareORM.list_id == list_id,
            ListShareORM.user_id == user_id,
        )
        try:
            return self.db.scalars(stmt).one_or_none()
        except SQLAlchemyError as e:
            logger.exception("Failed to load share of list %s for user %s", list_id, user_id)
            raise PersistenceError("Could not load the list share.") from e

    def touch_updated(self, list_id: int) -> None:
        """Advances the list's last-modified marker. Does not commit."""
        stmt = (
            update(TaskListORM)
            .where(TaskListORM.id == list_id)
            .values(updated=datetime.utcnow())
        )
        try:
            self.db.execute(stmt, execution_options={"synchronize_session": False})
        except SQLAlchemyError as e:
            logger.exception("Failed to update list %s", list_id)
            raise PersistenceError("Could not update the list.") from e
