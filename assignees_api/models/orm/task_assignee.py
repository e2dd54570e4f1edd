from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import Base
from .user import UserORM


class TaskAssigneeORM(Base):
    """One user assigned to one task. Rows are inserted or deleted, never updated."""

    __tablename__ = "task_assignees"

    id = Column(Integer, primary_key=True, autoincrement=True)
    task_id = Column(
        Integer, ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("task_id", "user_id", name="task_assignee_uq"),
    )

    user = relationship(UserORM)
