from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.orm import Session

from lawhelper.api.deps import get_current_user, session_cookie
from lawhelper.core.config import settings
from lawhelper.core.logger import logger
from lawhelper.db import models, schemas
from lawhelper.db.database import get_db
from lawhelper.services.account_service import AccountService, mask_email
from lawhelper.services.session_service import SessionService
from lawhelper.utils.exceptions import DuplicateEmailError

router = APIRouter()


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.SESSION_TTL_HOURS * 3600,
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )


def _clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )


@router.post("/register", response_model=schemas.AccountOut, status_code=status.HTTP_201_CREATED)
def register(
    body: schemas.RegisterRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db),
):
    """Create an account and log it in."""
    try:
        user = AccountService.create_account(db, body.name, body.email, body.password)
    except DuplicateEmailError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already exists")

    token = SessionService.create_session(db, user, request.headers.get("user-agent"))
    _set_session_cookie(response, token)
    return user


@router.post("/login", response_model=schemas.AccountOut)
def login(
    body: schemas.LoginRequest,
    request: Request,
    response: Response,
    current_token: Optional[str] = Depends(session_cookie),
    db: Session = Depends(get_db),
):
    """Verify credentials and start a fresh session."""
    user = AccountService.authenticate(db, body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    # Never reuse a session id that existed before authentication
    SessionService.destroy_session(db, current_token)
    token = SessionService.create_session(db, user, request.headers.get("user-agent"))
    _set_session_cookie(response, token)
    logger.info("login_succeeded email=%s", mask_email(user.email))
    return user


@router.post("/logout", response_model=schemas.MessageResponse)
def logout(
    response: Response,
    token: Optional[str] = Depends(session_cookie),
    db: Session = Depends(get_db),
):
    """End the current session. Succeeds with or without one."""
    SessionService.destroy_session(db, token)
    _clear_session_cookie(response)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=schemas.AccountOut)
def get_current_user_info(current_user: models.User = Depends(get_current_user)):
    """Get the logged-in account"""
    return current_user
