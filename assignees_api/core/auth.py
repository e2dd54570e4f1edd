from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .db import get_db
from .settings import config_settings
from assignees_api.models.orm.user import UserORM

# Tells FastAPI where to look for the token. Clients would request one from
# "/api/v1/auth/token" if the API supported username/password login.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/token")


def require_auth_token(token: Annotated[str, Depends(oauth2_scheme)]) -> str:
    """
    Dependency function that requires a Bearer token and validates it against
    the configured tokens.

    If no token is provided, OAuth2PasswordBearer automatically raises
    a 401 Unauthorized exception.
    """
    if not token or token not in config_settings.TOKENS:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token


def get_current_user(
    token: Annotated[str, Depends(require_auth_token)],
    db: Session = Depends(get_db),
) -> UserORM:
    """Resolves the validated token to the user performing the request."""
    user = db.get(UserORM, config_settings.TOKENS[token])
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
