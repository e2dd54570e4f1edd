# services/assignee_service.py
import enum
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from assignees_api.core.app_logger import get_logger
from assignees_api.core.db import transaction
from assignees_api.core.errors import AccessDeniedError, NotFoundError, ValidationError
from assignees_api.core.pagination import get_limit_from_page_index
from assignees_api.models.orm.task_assignee import TaskAssigneeORM
from assignees_api.models.orm.task_list import TaskListORM
from assignees_api.models.orm.user import UserORM
from assignees_api.repositories.assignee_repo import TaskAssigneeRepository
from assignees_api.repositories.task_repo import TaskListRepository, TaskRepository
from assignees_api.repositories.user_repo import UserRepository
from assignees_api.services.access import AccessGate, ListAccessGate
from assignees_api.services.reconciler import AssigneeDelta, reconcile

logger = get_logger("services.assignee")


class ReconciliationState(enum.Enum):
    STARTED = "STARTED"
    LOADED = "LOADED"
    DIFFED = "DIFFED"
    VALIDATED = "VALIDATED"
    APPLIED = "APPLIED"
    COMMITTED = "COMMITTED"
    ROLLED_BACK = "ROLLED_BACK"


@dataclass
class ReconciliationResult:
    task_id: int
    state: ReconciliationState
    delta: AssigneeDelta = field(default_factory=AssigneeDelta)
    # Users assigned to the task once the reconciliation committed
    assignees: List[UserORM] = field(default_factory=list)

    @property
    def to_add(self) -> Tuple[int, ...]:
        return self.delta.to_add

    @property
    def to_remove(self) -> Tuple[int, ...]:
        return self.delta.to_remove


@dataclass
class AssigneePage:
    users: List[UserORM]
    total_count: int
    page: int
    per_page: int


class TaskAssigneeService:
    """
    Adds, removes, lists and bulk-replaces the assignees of a task on behalf
    of ``doer``.

    Every mutating operation runs in one transaction on the session it was
    given. Changing assignees requires write access to the task's list,
    listing them requires read access, and a user can only be assigned if
    the access gate lets them read the list.
    """

    def __init__(self, db: Session, doer: UserORM, access_gate: Optional[AccessGate] = None):
        self.db = db
        self.doer = doer
        self.assignee_repo = TaskAssigneeRepository(db)
        self.task_repo = TaskRepository(db)
        self.list_repo = TaskListRepository(db)
        self.user_repo = UserRepository(db)
        self.access_gate = access_gate or ListAccessGate(db)

    # --- Single operations ---

    def add_assignee(self, task_id: int, user_id: int) -> TaskAssigneeORM:
        """Assigns one user to a task and advances the list's last-modified marker."""
        self._validate_ids(task_id, [user_id])

        with transaction(self.db):
            task_list = self._get_list_for_task(task_id)
            self._require_write_access(task_list)
            self._check_assignable(user_id, task_list)

            assignee = self.assignee_repo.insert(task_id, user_id)
            self.list_repo.touch_updated(task_list.id)

        logger.info("Assigned user %s to task %s", user_id, task_id)
        return assignee

    def remove_assignee(self, task_id: int, user_id: int) -> bool:
        """
        Unassigns one user from a task. Returns whether a row was removed;
        removing someone who is not assigned succeeds without touching the list.
        """
        self._validate_ids(task_id, [user_id])

        with transaction(self.db):
            task_list = self._get_list_for_task(task_id)
            self._require_write_access(task_list)

            removed = self.assignee_repo.delete_one(task_id, user_id) > 0
            if removed:
                self.list_repo.touch_updated(task_list.id)

        if removed:
            logger.info("Unassigned user %s from task %s", user_id, task_id)
        return removed

    def list_assignees(
        self, task_id: int, search: str = "", page: int = 0, per_page: int = 0
    ) -> AssigneePage:
        """
        Returns a page of the task's assignees filtered by username.

        The total count comes from a separate query (see
        TaskAssigneeRepository.list_with_principal_details) and may disagree
        with the page under concurrent writes.
        """
        self._validate_ids(task_id, [])

        task_list = self._get_list_for_task(task_id)
        if not self.access_gate.can_read(self.doer, task_list):
            raise AccessDeniedError(
                task_list.id,
                self.doer.id,
                f"User {self.doer.id} may not read list {task_list.id}.",
            )

        limit, offset = get_limit_from_page_index(page, per_page)
        users, total_count = self.assignee_repo.list_with_principal_details(
            task_id, search or "", limit, offset
        )
        return AssigneePage(users=users, total_count=total_count, page=page, per_page=limit)

    # --- Bulk replace ---

    def run_reconciliation(self, task_id: int, desired: Iterable[int]) -> ReconciliationResult:
        """
        Makes the task's assignees exactly ``desired``.

        Loads the current set fresh, computes the delta, validates every
        addition, then deletes removals, inserts additions and touches the
        list once, all in one transaction. The first failure rolls the whole
        call back and is re-raised; additions are validated in ascending user
        id order, so the reported user is the lowest offending one. An empty
        delta writes nothing and leaves the list marker alone.
        """
        result = ReconciliationResult(task_id=task_id, state=ReconciliationState.STARTED)
        try:
            desired_ids = set(desired)
            self._validate_ids(task_id, desired_ids)

            with transaction(self.db):
                task_list = self._get_list_for_task(task_id)
                self._require_write_access(task_list)
                current_ids = self.assignee_repo.current_user_ids(task_id)
                self._advance(result, ReconciliationState.LOADED)

                result.delta = reconcile(current_ids, desired_ids)
                self._advance(result, ReconciliationState.DIFFED)

                for user_id in result.delta.to_add:
                    self._check_assignable(user_id, task_list)
                self._advance(result, ReconciliationState.VALIDATED)

                if not result.delta.is_empty:
                    self._apply(task_id, task_list, result.delta)
                self._advance(result, ReconciliationState.APPLIED)

                result.assignees = self.assignee_repo.get_assigned_users(task_id)
        except Exception:
            failed_at = result.state
            result.state = ReconciliationState.ROLLED_BACK
            logger.warning(
                "Reconciliation of task %s rolled back after %s", task_id, failed_at.value
            )
            raise

        self._advance(result, ReconciliationState.COMMITTED)
        logger.info(
            "Reconciled assignees of task %s: added %s, removed %s",
            task_id,
            list(result.to_add),
            list(result.to_remove),
        )
        return result

    def _apply(self, task_id: int, task_list: TaskListORM, delta: AssigneeDelta) -> None:
        if delta.remove_all:
            self.assignee_repo.delete_all(task_id)
        else:
            self.assignee_repo.delete_many(task_id, delta.to_remove)

        for user_id in delta.to_add:
            self.assignee_repo.insert(task_id, user_id)

        self.list_repo.touch_updated(task_list.id)

    @staticmethod
    def _advance(result: ReconciliationResult, state: ReconciliationState) -> None:
        logger.debug(
            "Reconciliation of task %s: %s -> %s",
            result.task_id,
            result.state.value,
            state.value,
        )
        result.state = state

    # --- Helpers ---

    @staticmethod
    def _validate_ids(task_id: int, user_ids: Iterable[int]) -> None:
        if not isinstance(task_id, int) or isinstance(task_id, bool) or task_id <= 0:
            raise ValidationError(f"Invalid task id: {task_id!r}.")
        for user_id in user_ids:
            if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
                raise ValidationError(f"Invalid user id: {user_id!r}.")

    def _get_list_for_task(self, task_id: int) -> TaskListORM:
        task = self.task_repo.get_task(task_id)
        if task is None:
            raise NotFoundError("task", task_id)

        task_list = self.list_repo.get_list(task.list_id)
        if task_list is None:
            raise NotFoundError("list", task.list_id)
        return task_list

    def _require_write_access(self, task_list: TaskListORM) -> None:
        if not self.access_gate.can_write(self.doer, task_list):
            logger.warning(
                "User %s may not change assignees in list %s", self.doer.id, task_list.id
            )
            raise AccessDeniedError(
                task_list.id,
                self.doer.id,
                f"User {self.doer.id} may not edit tasks in list {task_list.id}.",
            )

    def _check_assignable(self, user_id: int, task_list: TaskListORM) -> None:
        user = self.user_repo.get_user(user_id)
        if user is None:
            raise NotFoundError("user", user_id)

        if not self.access_gate.can_assign(user, task_list):
            logger.warning("User %s cannot be assigned in list %s", user_id, task_list.id)
            raise AccessDeniedError(task_list.id, user_id)
