import math
from contextlib import asynccontextmanager

import uvicorn
from fastapi import Depends, FastAPI, Path, Query, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from starlette import status

from assignees_api.core.app_logger import get_logger
from assignees_api.core.auth import get_current_user, require_auth_token
from assignees_api.core.db import engine, get_db
from assignees_api.core.errors import AssigneeServiceError
from assignees_api.core.settings import config_settings
from assignees_api.models.orm.base import Base
from assignees_api.models.orm.user import UserORM
from assignees_api.models.schemas.assignee import (
    AssigneePageModel,
    BulkAssigneesModel,
    BulkAssigneesResponseModel,
    MessageModel,
    TaskAssigneeCreateModel,
    TaskAssigneeModel,
)
from assignees_api.models.schemas.user import UserModel
from assignees_api.services.assignee_service import TaskAssigneeService

logger = get_logger("api")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    if config_settings.CREATE_TABLES:
        logger.info("Creating database tables")
        Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(
    title="Task assignees",
    description="Assign users to tasks, one at a time or as a whole set.",
    version="0.1.0",
    dependencies=[Depends(require_auth_token)],
    lifespan=lifespan,
)


@app.exception_handler(AssigneeServiceError)
def handle_assignee_service_error(request: Request, exc: AssigneeServiceError):
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


@app.put(
    "/tasks/{task_id}/assignees",
    response_model=TaskAssigneeModel,
    status_code=status.HTTP_201_CREATED,
    summary="Add a new assignee to a task",
)
def put_task_assignee(
    assignee_data: TaskAssigneeCreateModel,
    task_id: int = Path(..., gt=0, description="The ID of the task."),
    db: Session = Depends(get_db),
    doer: UserORM = Depends(get_current_user),
):
    """
    Assigns a user to a task. The assignee needs read access to the task's
    list, the caller must be able to edit the task.
    """
    assignee_service = TaskAssigneeService(db, doer)
    assignee = assignee_service.add_assignee(task_id, assignee_data.user_id)
    return TaskAssigneeModel.model_validate(assignee)


@app.delete(
    "/tasks/{task_id}/assignees/{user_id}",
    response_model=MessageModel,
    status_code=status.HTTP_200_OK,
    summary="Delete an assignee",
)
def delete_task_assignee(
    task_id: int = Path(..., gt=0, description="The ID of the task."),
    user_id: int = Path(..., gt=0, description="The ID of the assigned user."),
    db: Session = Depends(get_db),
    doer: UserORM = Depends(get_current_user),
):
    """Un-assigns a user from a task. Un-assigning someone who is not assigned succeeds."""
    assignee_service = TaskAssigneeService(db, doer)
    assignee_service.remove_assignee(task_id, user_id)
    return MessageModel(message="The assignee was successfully deleted.")


@app.get(
    "/tasks/{task_id}/assignees",
    response_model=AssigneePageModel,
    status_code=status.HTTP_200_OK,
    summary="Get all assignees for a task",
)
def get_task_assignees(
    response: Response,
    task_id: int = Path(..., gt=0, description="The ID of the task."),
    s: str = Query("", description="Search assignees by their username."),
    page: int = Query(1, ge=1, description="The page number, starting at 1."),
    per_page: int = Query(
        0, ge=0, description="Items per page, capped at the configured maximum."
    ),
    db: Session = Depends(get_db),
    doer: UserORM = Depends(get_current_user),
):
    assignee_service = TaskAssigneeService(db, doer)
    assignee_page = assignee_service.list_assignees(task_id, s, page, per_page)

    total_pages = (
        math.ceil(assignee_page.total_count / assignee_page.per_page)
        if assignee_page.per_page
        else 1
    )
    response.headers["x-pagination-total-pages"] = str(total_pages)
    response.headers["x-pagination-result-count"] = str(len(assignee_page.users))

    return AssigneePageModel(
        items=[UserModel.model_validate(user) for user in assignee_page.users],
        result_count=len(assignee_page.users),
        total_count=assignee_page.total_count,
        page=assignee_page.page,
        per_page=assignee_page.per_page,
    )


@app.post(
    "/tasks/{task_id}/assignees/bulk",
    response_model=BulkAssigneesResponseModel,
    status_code=status.HTTP_200_OK,
    summary="Replace all assignees of a task",
)
def post_bulk_task_assignees(
    bulk_data: BulkAssigneesModel,
    task_id: int = Path(..., gt=0, description="The ID of the task."),
    db: Session = Depends(get_db),
    doer: UserORM = Depends(get_current_user),
):
    """
    Makes the given users the task's assignees. Every user not in the list is
    unassigned; pass an empty array to unassign everyone. Either all changes
    are applied or none are.
    """
    assignee_service = TaskAssigneeService(db, doer)
    result = assignee_service.run_reconciliation(
        task_id, [assignee.id for assignee in bulk_data.assignees]
    )
    return BulkAssigneesResponseModel(
        assignees=[UserModel.model_validate(user) for user in result.assignees]
    )


# Entry point for running the application directly (local development)
if __name__ == "__main__":
    uvicorn.run("assignees_api.main:app", host="0.0.0.0", port=8000, reload=True)
