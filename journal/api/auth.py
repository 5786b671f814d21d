"""Authentication API: login endpoint."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session, select

from journal.database import get_session
from journal.models.user import User
from journal.schemas.auth import LoginRequest, LoginResponse
from journal.services.auth import verify_password, verify_totp, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
def login(body: LoginRequest, session: Session = Depends(get_session)):
    user = session.exec(select(User).where(User.username == body.username)).first()

    if not user or not user.is_active or not verify_password(body.password, user.hashed_password):
        logger.info(f"Rejected login for '{body.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    if not verify_totp(user.totp_secret, body.totp_code):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid TOTP code",
        )

    return LoginResponse(access_token=create_access_token(user.id))
