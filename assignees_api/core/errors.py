from starlette import status


class AssigneeServiceError(Exception):
    """Base class for every failure the assignee service reports to callers."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AccessDeniedError(AssigneeServiceError):
    """A user lacks the access to a list that an operation requires."""

    status_code = status.HTTP_403_FORBIDDEN
    code = "access_denied"

    def __init__(self, list_id: int, user_id: int, message: str | None = None):
        super().__init__(
            message or f"User {user_id} does not have access to list {list_id}."
        )
        self.list_id = list_id
        self.user_id = user_id


class NotFoundError(AssigneeServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"

    def __init__(self, resource: str, resource_id: int):
        super().__init__(f"{resource.capitalize()} {resource_id} does not exist.")
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(AssigneeServiceError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"

    def __init__(self, task_id: int, user_id: int):
        super().__init__(f"User {user_id} is already assigned to task {task_id}.")
        self.task_id = task_id
        self.user_id = user_id


class ValidationError(AssigneeServiceError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class PersistenceError(AssigneeServiceError):
    """Opaque lower-layer (database) failure."""

    code = "persistence_error"
