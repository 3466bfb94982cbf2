"""
Persistence of ``User`` records.

The unique constraints on ``users.username`` and ``users.email`` are the
source of truth for duplicates. ``create`` checks first so the usual case
gets a clean rejection, and translates a constraint violation from a
concurrent signup into the same ``DuplicateError``.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.exceptions import DuplicateError
from database.models import User

logger = logging.getLogger(__name__)


class AccountStore:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(
        self,
        username: str,
        email: str,
        password_hash: str,
        name: str,
        position: Optional[str] = None,
        department: Optional[str] = None,
    ) -> User:
        """Insert a new user, raising ``DuplicateError`` on a username or email clash."""
        taken = await self._taken_field(username, email)
        if taken is not None:
            raise DuplicateError(taken)

        user = User(
            username=username,
            email=email,
            password_hash=password_hash,
            name=name,
            position=position,
            department=department,
        )
        self._session.add(user)
        try:
            await self._session.flush()
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            logger.info("Signup for %r lost a uniqueness race", username)
            raise DuplicateError()

        logger.info("Created user %s (%s)", user.username, user.user_id)
        return user

    async def find_by_username(self, username: str) -> Optional[User]:
        result = await self._session.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def get(self, user_id: int) -> Optional[User]:
        return await self._session.get(User, user_id)

    async def _taken_field(self, username: str, email: str) -> Optional[str]:
        result = await self._session.execute(
            select(User.username, User.email)
            .where(or_(User.username == username, User.email == email))
            .limit(1)
        )
        row = result.first()
        if row is None:
            return None
        return "username" if row.username == username else "email"
