"""
FastAPI dependencies for authentication.

Settings and the JWT configuration are read from ``app.state`` (populated by
``create_app``) so every collaborator receives its configuration explicitly.
"""

from __future__ import annotations

from typing import AsyncGenerator, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from auth.authenticator import CredentialAuthenticator
from auth.exceptions import InvalidToken
from auth.store import AccountStore
from auth.tokens import JwtSettings, TokenClaims, TokenIssuer, TokenValidator
from config.settings import Settings
from database.session import get_db_session

_bearer_scheme = HTTPBearer(auto_error=False)


async def db_session(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a DB session for route handlers."""
    yield session


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_jwt_settings(request: Request) -> JwtSettings:
    return request.app.state.jwt_settings


def get_account_store(session: AsyncSession = Depends(db_session)) -> AccountStore:
    return AccountStore(session)


def get_authenticator(
    store: AccountStore = Depends(get_account_store),
    settings: Settings = Depends(get_settings),
) -> CredentialAuthenticator:
    return CredentialAuthenticator(store, bcrypt_rounds=settings.bcrypt_rounds)


def get_token_issuer(jwt_settings: JwtSettings = Depends(get_jwt_settings)) -> TokenIssuer:
    return TokenIssuer(jwt_settings)


def get_token_validator(jwt_settings: JwtSettings = Depends(get_jwt_settings)) -> TokenValidator:
    return TokenValidator(jwt_settings)


async def get_current_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    validator: TokenValidator = Depends(get_token_validator),
) -> TokenClaims:
    """
    Extract and verify the Bearer token, returning its claims.

    Missing, malformed, expired or foreign tokens all produce a 401.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        return validator.validate(credentials.credentials)
    except InvalidToken:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
