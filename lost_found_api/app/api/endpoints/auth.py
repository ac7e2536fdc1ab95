"""
Authentication endpoints.

Registration and login both answer with a fresh session token and the
public view of the user.  The token goes into the ``x-auth-token``
header of subsequent requests.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from lost_found_api.app.core.config import Settings
from lost_found_api.app.core.db import Database, get_db
from lost_found_api.app.core.errors import DuplicateEntityError, InvalidCredentialsError
from lost_found_api.app.core.security import create_access_token, get_app_settings
from lost_found_api.app.schemas.user import AuthResponse, UserCreate, UserLogin, UserRead
from lost_found_api.app.services.user_service import UserService


router = APIRouter()


def _issue_token(user: UserRead, app_settings: Settings) -> str:
    return create_access_token(
        {"id": user.id, "role": user.role.value},
        expires_delta=app_settings.access_token_expire_minutes * 60,
        secret_key=app_settings.secret_key,
    )


@router.post("/register", response_model=AuthResponse)
async def register(
    data: UserCreate,
    db: Database = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    """Create an account and log it in.  400 if the email is taken."""
    try:
        user = await UserService.create_user(db, data)
    except DuplicateEntityError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return AuthResponse(token=_issue_token(user, app_settings), user=user)


@router.post("/login", response_model=AuthResponse)
async def login(
    data: UserLogin,
    db: Database = Depends(get_db),
    app_settings: Settings = Depends(get_app_settings),
) -> AuthResponse:
    try:
        user = await UserService.authenticate(db, data.email, data.password)
    except InvalidCredentialsError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e
    return AuthResponse(token=_issue_token(user, app_settings), user=user)
