# storefront/routers/auth.py
from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from storefront.core.auth import Principal, get_current_user, get_principal, require_admin
from storefront.database import get_session
from storefront.models.user import User
from storefront.repositories.user_repo import RevokedTokenRepository, UserRepository
from storefront.schemas.common import MessageResponse
from storefront.schemas.user import (
    AuthResponse,
    LoginRequest,
    PasswordChange,
    ProfileUpdate,
    RegisterRequest,
    UserRead,
    UserResponse,
)
from storefront.services.auth_service import AuthService
from storefront.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["Auth"])

user_repo = UserRepository()
auth_service = AuthService(user_repo, RevokedTokenRepository())
user_service = UserService(user_repo)


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    payload: RegisterRequest,
    session: Session = Depends(get_session),
):
    """
    Create an account and return it with a fresh token.
    """
    return auth_service.register(session, payload)


@router.post("/login", response_model=AuthResponse)
def login(
    payload: LoginRequest,
    session: Session = Depends(get_session),
):
    """
    Exchange email + password for a token (valid one hour).
    """
    return auth_service.login(session, payload)


@router.get("/profile", response_model=UserRead)
def read_profile(current_user: User = Depends(get_current_user)):
    """
    Return the authenticated user's profile.
    """
    return current_user


@router.put("/profile", response_model=UserResponse)
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    Update name and/or email of the authenticated user.
    """
    user = user_service.update_profile(session, current_user, payload)
    return UserResponse(
        message="Profile updated successfully!",
        user=UserRead.model_validate(user),
    )


@router.put("/change-password", response_model=MessageResponse)
def change_password(
    payload: PasswordChange,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    auth_service.change_password(session, current_user, payload)
    return MessageResponse(message="Password changed successfully!")


@router.post("/logout", response_model=MessageResponse)
def logout(
    session: Session = Depends(get_session),
    principal: Principal = Depends(get_principal),
):
    """
    Revoke the token used for this request.
    """
    auth_service.logout(session, principal)
    return MessageResponse(message="Logged out successfully!")


@router.get(
    "/admin-dashboard",
    response_model=MessageResponse,
    dependencies=[Depends(require_admin)],
)
def admin_dashboard():
    return MessageResponse(message="Welcome to the Admin Dashboard!")
