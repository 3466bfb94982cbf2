"""
Credential authenticator: username/password to identity.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional

from auth.exceptions import InvalidCredentials
from auth.password import DEFAULT_ROUNDS, dummy_hash, verify_password
from auth.store import AccountStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedIdentity:
    user_id: int
    name: str
    department: Optional[str] = None
    position: Optional[str] = None


class CredentialAuthenticator:
    """
    Looks the user up and checks the password against its bcrypt hash.

    Unknown usernames still pay for one hash verification, against a dummy
    hash, so response timing does not reveal which usernames exist.
    """

    def __init__(self, store: AccountStore, bcrypt_rounds: int = DEFAULT_ROUNDS) -> None:
        self._store = store
        self._bcrypt_rounds = bcrypt_rounds

    async def authenticate(self, username: str, password: str) -> AuthenticatedIdentity:
        user = await self._store.find_by_username(username)

        if user is None:
            await asyncio.to_thread(
                verify_password, password, dummy_hash(self._bcrypt_rounds)
            )
            logger.info("Login failed: unknown username")
            raise InvalidCredentials()

        if not await asyncio.to_thread(verify_password, password, user.password_hash):
            logger.info("Login failed for user %s: bad password", user.user_id)
            raise InvalidCredentials()

        return AuthenticatedIdentity(
            user_id=user.user_id,
            name=user.name,
            department=user.department,
            position=user.position,
        )
