# storefront/services/auth_service.py
import logging

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.core.auth import Principal, revocation_cutoff
from storefront.core.security import hash_password, issue_token, verify_password
from storefront.models.user import User, utcnow
from storefront.repositories.user_repo import RevokedTokenRepository, UserRepository
from storefront.schemas.user import (
    AuthResponse,
    LoginRequest,
    PasswordChange,
    RegisterRequest,
    UserRead,
)

logger = logging.getLogger(__name__)


class AuthService:
    """
    Credentials and session tokens.

    Responsibilities:
      - registration with unique email
      - password login and token issuing
      - password change
      - logout via the revocation list
    """

    def __init__(self, repo: UserRepository, revoked_repo: RevokedTokenRepository):
        self.repo = repo
        self.revoked_repo = revoked_repo

    def register(self, session: Session, payload: RegisterRequest) -> AuthResponse:
        """
        Create an account and sign the caller in.

        Raises:
            HTTPException(400): if the email is already registered.
        """
        if self.repo.get_by_email(session, payload.email) is not None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User already exists!",
            )

        user = User(
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            is_admin=payload.is_admin,
        )
        user = self.repo.create(session, user)
        logger.info("Registered user %s (admin=%s)", user.id, user.is_admin)

        return AuthResponse(
            message="User registered successfully!",
            user=UserRead.model_validate(user),
            token=issue_token(user.id, user.is_admin),
        )

    def login(self, session: Session, payload: LoginRequest) -> AuthResponse:
        user = self.repo.get_by_email(session, payload.email)
        if user is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="User not found!",
            )

        if not verify_password(payload.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials!",
            )

        return AuthResponse(
            message="Login successful!",
            user=UserRead.model_validate(user),
            token=issue_token(user.id, user.is_admin),
        )

    def change_password(
        self,
        session: Session,
        current_user: User,
        payload: PasswordChange,
    ) -> None:
        if not verify_password(payload.old_password, current_user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Old password is incorrect!",
            )

        current_user.password_hash = hash_password(payload.new_password)
        current_user.updated_at = utcnow()
        self.repo.update(session, current_user)

    def logout(self, session: Session, principal: Principal) -> None:
        """
        Revoke the token used for this request.

        Stale revocation rows are pruned on the way; they can no longer
        match a live token.
        """
        self.revoked_repo.add(session, principal.token)
        pruned = self.revoked_repo.prune(session, revocation_cutoff())
        logger.info("User %s logged out (pruned %d stale tokens)", principal.id, pruned)
