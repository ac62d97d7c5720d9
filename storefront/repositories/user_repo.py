# storefront/repositories/user_repo.py
import uuid
from datetime import datetime

from sqlmodel import Session, select

from storefront.models.user import RevokedToken, User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic
    """

    # ----- Basic CRUD -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def list(self, session: Session) -> list[User]:
        """All users, oldest first."""
        stmt = select(User).order_by(User.created_at)
        return session.exec(stmt).all()

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    def delete(self, session: Session, user: User) -> None:
        """Delete a User."""
        session.delete(user)
        session.commit()


class RevokedTokenRepository:
    """
    Revocation list for access tokens.

    Entries are only honoured while newer than the caller-supplied
    cutoff, so stale rows are harmless until pruned.
    """

    def is_revoked(self, session: Session, token: str, not_before: datetime) -> bool:
        stmt = select(RevokedToken).where(
            RevokedToken.token == token,
            RevokedToken.created_at > not_before,
        )
        return session.exec(stmt).first() is not None

    def add(self, session: Session, token: str) -> RevokedToken:
        entry = RevokedToken(token=token)
        session.add(entry)
        session.commit()
        session.refresh(entry)
        return entry

    def prune(self, session: Session, older_than: datetime) -> int:
        stmt = select(RevokedToken).where(RevokedToken.created_at <= older_than)
        rows = session.exec(stmt).all()
        for row in rows:
            session.delete(row)
        session.commit()
        return len(rows)
