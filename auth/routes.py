"""
Auth API routes — signup, login, me.

Route prefix: /api/auth
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator

from auth.authenticator import CredentialAuthenticator
from auth.dependencies import (
    get_account_store,
    get_authenticator,
    get_current_claims,
    get_settings,
    get_token_issuer,
)
from auth.exceptions import DuplicateError, InvalidCredentials
from auth.password import hash_password
from auth.store import AccountStore
from auth.tokens import TokenClaims, TokenIssuer
from config.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


# ── Request / response schemas ─────────────────────────────────────────


class SignupRequest(BaseModel):
    username: str = Field(..., min_length=2, max_length=64)
    password: str = Field(..., min_length=4, max_length=72)
    name: str = Field(..., min_length=1, max_length=128)
    email: str = Field(..., min_length=3, max_length=255)
    position: Optional[str] = Field(None, max_length=128)
    department: Optional[str] = Field(None, max_length=128)

    @field_validator("password")
    @classmethod
    def _fits_bcrypt(cls, value: str) -> str:
        # bcrypt only looks at the first 72 bytes
        if len(value.encode()) > 72:
            raise ValueError("password must be at most 72 bytes")
        return value


class LoginRequest(BaseModel):
    username: str
    password: str


class SignupResponse(BaseModel):
    message: str


class LoginResponse(BaseModel):
    token: str
    expiry: datetime
    name: str
    department: str
    position: str


class MeResponse(BaseModel):
    user_id: int
    username: str
    name: str
    email: str
    department: str
    position: str


# ── Endpoints ──────────────────────────────────────────────────────────


@router.post("/signup", response_model=SignupResponse)
async def signup(
    req: SignupRequest,
    store: AccountStore = Depends(get_account_store),
    settings: Settings = Depends(get_settings),
) -> Dict[str, Any]:
    """Register a new user."""
    password_hash = await asyncio.to_thread(
        hash_password, req.password, settings.bcrypt_rounds
    )
    try:
        await store.create(
            username=req.username,
            email=req.email,
            password_hash=password_hash,
            name=req.name,
            position=req.position,
            department=req.department,
        )
    except DuplicateError as exc:
        logger.info("Signup rejected for %r: %s taken", req.username, exc.field or "username/email")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        )

    return {"message": "Signup successful."}


@router.post("/login", response_model=LoginResponse)
async def login(
    req: LoginRequest,
    authenticator: CredentialAuthenticator = Depends(get_authenticator),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> Dict[str, Any]:
    """Login with username + password."""
    try:
        identity = await authenticator.authenticate(req.username, req.password)
    except InvalidCredentials as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        )

    signed = issuer.issue(identity)
    logger.info("Login: %s (%s)", identity.name, identity.user_id)

    return {
        "token": signed.token,
        "expiry": signed.expiry,
        "name": identity.name,
        "department": identity.department or "",
        "position": identity.position or "",
    }


@router.get("/me", response_model=MeResponse)
async def me(
    claims: TokenClaims = Depends(get_current_claims),
    store: AccountStore = Depends(get_account_store),
) -> Dict[str, Any]:
    """Profile of the bearer of a valid token."""
    user = await store.get(claims.user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {
        "user_id": user.user_id,
        "username": user.username,
        "name": user.name,
        "email": user.email,
        "department": user.department or "",
        "position": user.position or "",
    }
