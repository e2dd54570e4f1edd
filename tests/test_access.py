"""Tests for the list access gate."""

import pytest

from assignees_api.models.orm.task_list import TaskListORM
from assignees_api.models.orm.user import UserORM
from assignees_api.services.access import ListAccessGate

from helpers import OUTSIDER_ID, OWNER_ID, READER_ID, WRITER_ID


@pytest.fixture
def gate(world) -> ListAccessGate:
    return ListAccessGate(world)


@pytest.fixture
def chores(world) -> TaskListORM:
    return world.get(TaskListORM, 1)


class TestListAccessGate:
    def test_owner_can_do_everything(self, world, gate, chores) -> None:
        owner = world.get(UserORM, OWNER_ID)
        assert gate.can_read(owner, chores)
        assert gate.can_write(owner, chores)
        assert gate.can_assign(owner, chores)

    def test_read_share_allows_reading_and_assignment(self, world, gate, chores) -> None:
        reader = world.get(UserORM, READER_ID)
        assert gate.can_read(reader, chores)
        assert gate.can_assign(reader, chores)
        assert not gate.can_write(reader, chores)

    def test_write_share_allows_writing(self, world, gate, chores) -> None:
        writer = world.get(UserORM, WRITER_ID)
        assert gate.can_write(writer, chores)

    def test_outsider_has_no_access(self, world, gate, chores) -> None:
        outsider = world.get(UserORM, OUTSIDER_ID)
        assert not gate.can_read(outsider, chores)
        assert not gate.can_write(outsider, chores)
        assert not gate.can_assign(outsider, chores)

    def test_access_is_not_cached(self, world, gate, chores) -> None:
        reader = world.get(UserORM, READER_ID)
        assert gate.can_assign(reader, chores)

        share = gate.list_repo.get_share(chores.id, READER_ID)
        world.delete(share)
        world.commit()

        assert not gate.can_assign(reader, chores)
