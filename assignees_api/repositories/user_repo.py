from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from assignees_api.core.app_logger import get_logger
from assignees_api.core.errors import PersistenceError
from assignees_api.models.orm.user import UserORM

logger = get_logger("repositories.user")


class UserRepository:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> Optional[UserORM]:
        try:
            return self.db.get(UserORM, user_id)
        except SQLAlchemyError as e:
            logger.exception("Failed to load user %s", user_id)
            raise PersistenceError("Could not load the user.") from e
