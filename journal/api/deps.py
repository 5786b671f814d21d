"""Shared API dependencies."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session

from journal.database import get_session
from journal.models.user import User
from journal.services.auth import decode_access_token
from journal.services.journal import ActionResult, TradeJournal

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User:
    """Validate JWT and return the current user."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = session.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    return user


def get_journal(
    user: User = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> TradeJournal:
    """Journal bound to the request's session and the authenticated user."""
    return TradeJournal(session, user)


def unwrap(result: ActionResult):
    """Return the result's data, or raise the HTTP error matching its failure."""
    if not result.success:
        raise HTTPException(
            status_code=result.status_code,
            detail={"message": result.message, "errors": result.errors},
        )
    return result.data
