"""
FastAPI dependencies: current user, role checks, file store and paging.
"""
from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from contactbook.core.config import get_settings
from contactbook.core.security import decode_token
from contactbook.db.session import get_db
from contactbook.models.user import User
from contactbook.services.file_store import LocalFileStore

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the user from a bearer access token or fail with 401."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = decode_token(credentials.credentials)
    if payload is None or payload.get("type") != "access":
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    user = db.get(User, int(user_id)) if user_id and user_id.isdigit() else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Allow only users with the admin role."""
    if not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator role required",
        )
    return current_user


@lru_cache
def get_file_store() -> LocalFileStore:
    """Get the cached upload store rooted at UPLOAD_DIR."""
    return LocalFileStore(get_settings().UPLOAD_DIR)


@dataclass
class PageParams:
    page: int
    limit: int


def get_page_params(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
) -> PageParams:
    """Page/limit query parameters; limit defaults to and is capped by settings."""
    settings = get_settings()
    if limit is None:
        limit = settings.DEFAULT_PAGE_SIZE
    return PageParams(page=page, limit=min(limit, settings.MAX_PAGE_SIZE))
