from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .user import UserModel


# --- Single assignee ---


class TaskAssigneeCreateModel(BaseModel):
    """Request body for assigning one user to a task."""

    user_id: int = Field(..., gt=0, description="The ID of the user to assign.")


class TaskAssigneeModel(BaseModel):
    """Data model for a persistent assignment record."""

    task_id: int
    user_id: int
    created: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageModel(BaseModel):
    message: str


# --- Listing ---


class AssigneePageModel(BaseModel):
    """
    One page of assignees.

    total_count is computed by a separate query from the page itself, so it can
    disagree with the page under concurrent writes.
    """

    items: List[UserModel]
    result_count: int = Field(..., description="Number of users on this page.")
    total_count: int = Field(
        ..., description="Number of matching assignees across all pages."
    )
    page: int
    per_page: int


# --- Bulk replace ---


class AssigneeRefModel(BaseModel):
    id: int = Field(..., gt=0, description="The ID of the user.")


class BulkAssigneesModel(BaseModel):
    """
    The complete desired set of assignees for a task. Every user not in the
    list is unassigned; an empty list unassigns everyone.
    """

    assignees: List[AssigneeRefModel] = Field(default_factory=list)


class BulkAssigneesResponseModel(BaseModel):
    assignees: List[UserModel]
