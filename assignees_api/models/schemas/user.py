from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class UserModel(BaseModel):
    """Public view of a user, as returned in assignee listings."""

    id: int
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    created: datetime

    model_config = ConfigDict(from_attributes=True)
