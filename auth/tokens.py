"""
JWT creation and verification.

Tokens are standard HMAC-signed JWTs built with PyJWT. The signing
configuration comes from a frozen ``JwtSettings`` that ``create_app`` builds
once from ``config.settings`` and hands to the issuer and validator.

The clock is a parameter on both sides (``now``), defaulting to the current
UTC time, so lifetime boundaries can be checked exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from auth.authenticator import AuthenticatedIdentity
from auth.exceptions import InvalidToken

logger = logging.getLogger(__name__)

_REQUIRED_CLAIMS = ["sub", "iss", "aud", "exp", "iat"]


@dataclass(frozen=True)
class JwtSettings:
    key: str
    issuer: str
    audience: str
    expiry_minutes: int
    algorithm: str = "HS256"

    @classmethod
    def from_config(cls, settings: Any) -> "JwtSettings":
        return cls(
            key=settings.jwt_key,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            expiry_minutes=settings.jwt_expiry_minutes,
            algorithm=settings.jwt_algorithm,
        )


@dataclass(frozen=True)
class SignedToken:
    token: str
    expiry: datetime


@dataclass(frozen=True)
class TokenClaims:
    user_id: int
    name: Optional[str]
    expiry: datetime


def _utc(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now.astimezone(timezone.utc)


class TokenIssuer:
    def __init__(self, settings: JwtSettings) -> None:
        self._settings = settings

    def issue(self, identity: AuthenticatedIdentity, now: Optional[datetime] = None) -> SignedToken:
        """Sign a token for ``identity`` valid for ``expiry_minutes`` from ``now``."""
        issued_at = _utc(now).replace(microsecond=0)
        expiry = issued_at + timedelta(minutes=self._settings.expiry_minutes)
        payload: Dict[str, Any] = {
            "sub": str(identity.user_id),
            "name": identity.name,
            "iss": self._settings.issuer,
            "aud": self._settings.audience,
            "iat": issued_at,
            "nbf": issued_at,
            "exp": expiry,
        }
        token = jwt.encode(payload, self._settings.key, algorithm=self._settings.algorithm)
        return SignedToken(token=token, expiry=expiry)


class TokenValidator:
    """
    Verifies signature, issuer and audience through PyJWT, then checks
    ``nbf <= now < exp`` against the supplied clock.

    Every failure surfaces as ``InvalidToken``.
    """

    def __init__(self, settings: JwtSettings) -> None:
        self._settings = settings

    def validate(self, token: str, now: Optional[datetime] = None) -> TokenClaims:
        try:
            claims = jwt.decode(
                token,
                self._settings.key,
                algorithms=[self._settings.algorithm],
                audience=self._settings.audience,
                issuer=self._settings.issuer,
                options={
                    "require": _REQUIRED_CLAIMS,
                    "verify_exp": False,
                    "verify_nbf": False,
                    "verify_iat": False,
                },
            )
        except jwt.InvalidTokenError as exc:
            logger.debug("Token rejected: %s", exc)
            raise InvalidToken(str(exc)) from exc

        current = _utc(now).timestamp()
        try:
            exp = float(claims["exp"])
            nbf = float(claims.get("nbf", claims["iat"]))
            user_id = int(claims["sub"])
        except (TypeError, ValueError) as exc:
            raise InvalidToken("Malformed claims") from exc

        if current >= exp:
            raise InvalidToken("Token has expired")
        if current < nbf:
            raise InvalidToken("Token is not yet valid")

        return TokenClaims(
            user_id=user_id,
            name=claims.get("name"),
            expiry=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
