"""
Database models for Courier (authoritative ORM definitions).

Two tables: ``users`` and ``messages``. Every message belongs to exactly one
user; deleting a user deletes its messages.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

from sqlalchemy import (
    DateTime,
    ForeignKeyConstraint,
    Index,
    Integer,
    MetaData,
    PrimaryKeyConstraint,
    String,
    Text,
    UniqueConstraint,
    select,
)
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship, validates

from ..auth.passwords import hash_password
from ..errors import ModelValidationError

# Naming convention for deterministic constraint/index names
naming_convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PASSWORD_MIN_LENGTH = 7
PASSWORD_MAX_LENGTH = 42


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all database models with type checking support."""

    metadata = MetaData(naming_convention=naming_convention)


class Users(Base):
    __tablename__ = "users"
    __table_args__ = (
        PrimaryKeyConstraint("id", name="users_pkey"),
        UniqueConstraint("username", name="users_username_key"),
        UniqueConstraint("email", name="users_email_key"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str | None] = mapped_column(String(50))
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=_utcnow, nullable=False)

    messages: Mapped[list[Messages]] = relationship(
        "Messages",
        uselist=True,
        back_populates="user",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @validates("username")
    def validate_username(self, key: str, value: str) -> str:
        if not value or not value.strip():
            raise ModelValidationError("A user has to have a username.")
        return value

    @validates("email")
    def validate_email(self, key: str, value: str) -> str:
        if not value or not value.strip():
            raise ModelValidationError("A user has to have an email.")
        if not EMAIL_PATTERN.match(value):
            raise ModelValidationError("Validation isEmail on email failed")
        return value

    @validates("password")
    def validate_password(self, key: str, value: str) -> str:
        """Check the plain password and store only its hash."""
        if not value:
            raise ModelValidationError("A user has to have a password.")
        if not PASSWORD_MIN_LENGTH <= len(value) <= PASSWORD_MAX_LENGTH:
            raise ModelValidationError(
                f"Password has to be between {PASSWORD_MIN_LENGTH} "
                f"and {PASSWORD_MAX_LENGTH} characters."
            )
        return hash_password(value)

    @classmethod
    async def find_by_login(cls, session: AsyncSession, login: str) -> Users | None:
        """Find a user by username, falling back to email."""
        stmt = select(cls).where(cls.username == login)
        user = (await session.execute(stmt)).scalar_one_or_none()
        if user is None:
            stmt = select(cls).where(cls.email == login)
            user = (await session.execute(stmt)).scalar_one_or_none()
        return user


class Messages(Base):
    __tablename__ = "messages"
    __table_args__ = (
        ForeignKeyConstraint(
            ["user_id"],
            ["users.id"],
            ondelete="CASCADE",
            name="messages_user_id_fkey",
        ),
        PrimaryKeyConstraint("id", name="messages_pkey"),
        Index("idx_messages_user", "user_id"),
        Index("idx_messages_created_at", "created_at"),
    )

    id: Mapped[int] = mapped_column(Integer, autoincrement=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(True), default=_utcnow, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    user: Mapped[Users] = relationship("Users", back_populates="messages")

    @validates("text")
    def validate_text(self, key: str, value: str) -> str:
        if not value or not value.strip():
            raise ModelValidationError("A message has to have a text.")
        return value


target_metadata = Base.metadata

__all__ = ["Base", "Messages", "Users", "target_metadata"]
