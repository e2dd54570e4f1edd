import enum
from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import Base
from .user import UserORM


class ShareRight(enum.IntEnum):
    READ = 0
    WRITE = 1
    ADMIN = 2


# --- List (the container a task lives in) ---
class TaskListORM(Base):
    __tablename__ = "lists"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(250), nullable=False)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created = Column(DateTime, default=datetime.utcnow, nullable=False)
    # Last-modified marker, advanced whenever the assignees of one of its tasks change
    updated = Column(DateTime, default=datetime.utcnow, nullable=False)

    owner = relationship(UserORM)
    shares = relationship(
        "ListShareORM", back_populates="task_list", cascade="all, delete-orphan"
    )
    tasks = relationship("TaskORM", back_populates="task_list")


# --- Share granting a user access to a list ---
class ListShareORM(Base):
    __tablename__ = "list_shares"

    id = Column(Integer, primary_key=True, autoincrement=True)
    list_id = Column(
        Integer, ForeignKey("lists.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    right = Column(Enum(ShareRight), default=ShareRight.READ, nullable=False)

    created = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (UniqueConstraint("list_id", "user_id", name="list_share_uq"),)

    task_list = relationship("TaskListORM", back_populates="shares")
