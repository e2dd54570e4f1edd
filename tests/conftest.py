"""Shared fixtures: an in-memory SQLite database seeded with users, a list and tasks."""

import logging
import os

# The application engine is built at import time; keep it off any real server.
os.environ["DATABASE_URL"] = "sqlite://"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from assignees_api.core.app_logger import ROOT_LOGGER_NAME
from assignees_api.core.db import enable_sqlite_foreign_keys, get_db
from assignees_api.core.settings import config_settings
from assignees_api.main import app
from assignees_api.models.orm.base import Base
from assignees_api.models.orm.task import TaskORM
from assignees_api.models.orm.task_list import ListShareORM, ShareRight, TaskListORM
from assignees_api.models.orm.user import UserORM

from helpers import LIST_UPDATED_AT, OUTSIDER_ID, OWNER_ID, TOKENS, USERS, WRITER_ID


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def world(db):
    """
    List 1 (owned by OWNER_ID) holding tasks 1 and 2, list 2 (owned by the
    outsider) holding task 3. Everyone except the outsider has a share on
    list 1; WRITER_ID's share is WRITE, all others are READ.
    """
    for user_id, username in USERS.items():
        db.add(UserORM(id=user_id, username=username, name=username.capitalize()))
    db.flush()

    db.add(TaskListORM(id=1, title="Chores", owner_id=OWNER_ID, updated=LIST_UPDATED_AT))
    db.add(TaskListORM(id=2, title="Private", owner_id=OUTSIDER_ID, updated=LIST_UPDATED_AT))
    db.flush()

    for user_id in USERS:
        if user_id in (OWNER_ID, OUTSIDER_ID):
            continue
        right = ShareRight.WRITE if user_id == WRITER_ID else ShareRight.READ
        db.add(ListShareORM(list_id=1, user_id=user_id, right=right))

    db.add(TaskORM(id=1, title="Take out the trash", list_id=1))
    db.add(TaskORM(id=2, title="Water the plants", list_id=1))
    db.add(TaskORM(id=3, title="Secret plans", list_id=2))
    db.commit()
    return db


@pytest.fixture
def owner(world) -> UserORM:
    return world.get(UserORM, OWNER_ID)


@pytest.fixture
def client(session_factory, world, monkeypatch):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(config_settings, "TOKENS", dict(TOKENS))
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def app_caplog(caplog):
    """caplog wired straight onto the package logger, which does not propagate to root."""
    app_logger = logging.getLogger(ROOT_LOGGER_NAME)
    app_logger.addHandler(caplog.handler)
    caplog.set_level(logging.DEBUG, logger=ROOT_LOGGER_NAME)
    yield caplog
    app_logger.removeHandler(caplog.handler)
