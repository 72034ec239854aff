from typing import Any
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateUserError
from core.security import get_password_hash, verify_password
from models.users import User


class UserCRUD:
    """Accounts that log in to edit the catalog and own the recipes they add."""

    async def _first(self, db: AsyncSession, *criteria: Any) -> User | None:
        result = await db.execute(select(User).where(*criteria))
        return result.scalar_one_or_none()

    async def get_by_id(self, db: AsyncSession, user_id: UUID) -> User | None:
        return await self._first(db, User.id == user_id)

    async def get_by_username(self, db: AsyncSession, username: str) -> User | None:
        return await self._first(db, User.username == username)

    async def authenticate(
        self, db: AsyncSession, username: str, password: str
    ) -> User | None:
        """Return the user when the password matches, None otherwise."""
        user = await self.get_by_username(db, username)
        if user is None or not verify_password(password, user.hashed_password):
            return None
        return user

    async def create(
        self,
        db: AsyncSession,
        *,
        username: str,
        email: str,
        password: str,
        is_admin: bool = False,
    ) -> User:
        """Store a user with a hashed password and a lower-cased email.

        A taken username or email raises DuplicateUserError.
        """
        user = User(
            username=username,
            email=email.lower(),
            hashed_password=get_password_hash(password),
            is_admin=is_admin,
        )
        db.add(user)
        try:
            await db.commit()
        except IntegrityError as exc:
            await db.rollback()
            raise DuplicateUserError("Username or email already registered") from exc
        return user


user_crud = UserCRUD()
