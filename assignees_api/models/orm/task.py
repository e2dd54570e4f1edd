from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base
from .task_assignee import TaskAssigneeORM
from .task_list import TaskListORM


class TaskORM(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(250), nullable=False)
    description = Column(Text)
    list_id = Column(Integer, ForeignKey("lists.id"), nullable=False, index=True)

    created = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    task_list = relationship(TaskListORM, back_populates="tasks")

    # Deleting a task removes its assignment rows with it
    assignees = relationship(
        TaskAssigneeORM,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
