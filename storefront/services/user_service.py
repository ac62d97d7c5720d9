# storefront/services/user_service.py
import uuid

from fastapi import HTTPException, status
from sqlmodel import Session

from storefront.models.user import User, utcnow
from storefront.repositories.user_repo import UserRepository
from storefront.schemas.user import AdminUserUpdate, ProfileUpdate


class UserService:
    """
    Business logic for User profiles.

    Responsibilities:
      - self-service profile edits
      - admin listing / editing / deletion
      - keep email unique on every edit
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    # ----- helpers -----

    def _ensure_email_free(
        self,
        session: Session,
        email: str,
        owner_id: uuid.UUID,
    ) -> None:
        existing = self.repo.get_by_email(session, email)
        if existing is not None and existing.id != owner_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email is already in use!",
            )

    # ----- Self profile -----

    def update_profile(
        self,
        session: Session,
        current_user: User,
        payload: ProfileUpdate,
    ) -> User:
        """
        Partial update for profile edits (name, email).
        """
        if payload.email is not None and payload.email != current_user.email:
            self._ensure_email_free(session, payload.email, current_user.id)
            current_user.email = payload.email

        if payload.name is not None:
            current_user.name = payload.name

        current_user.updated_at = utcnow()
        return self.repo.update(session, current_user)

    # ----- Admin operations -----

    def list_users(self, session: Session) -> list[User]:
        """List every user (admin only)."""
        return self.repo.list(session)

    def get_user(self, session: Session, user_id: uuid.UUID) -> User:
        """
        Get a user by id (admin only).

        Raises:
            HTTPException(404): if not found.
        """
        user = self.repo.get_by_id(session, user_id)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found!",
            )
        return user

    def update_user(
        self,
        session: Session,
        user_id: uuid.UUID,
        payload: AdminUserUpdate,
    ) -> User:
        """
        Change name, email or admin flag of any user (admin only).
        """
        user = self.get_user(session, user_id)

        if payload.email is not None and payload.email != user.email:
            self._ensure_email_free(session, payload.email, user.id)
            user.email = payload.email

        if payload.name is not None:
            user.name = payload.name

        if payload.is_admin is not None:
            user.is_admin = payload.is_admin

        user.updated_at = utcnow()
        return self.repo.update(session, user)

    def delete_user(self, session: Session, user_id: uuid.UUID) -> None:
        """Delete a user (admin only). Their orders are kept."""
        user = self.get_user(session, user_id)
        self.repo.delete(session, user)
