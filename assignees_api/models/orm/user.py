from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String

from .base import Base


class UserORM(Base):
    """A principal that can own lists and be assigned to tasks."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(250), nullable=False, unique=True, index=True)
    name = Column(String(250), nullable=True)
    email = Column(String(250), nullable=True)

    created = Column(DateTime, default=datetime.utcnow, nullable=False)
