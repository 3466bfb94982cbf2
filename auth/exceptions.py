"""
Domain errors raised by the account store, authenticator and token code.

The HTTP layer maps each of these onto a status code; none of them is fatal.
"""

from __future__ import annotations

from typing import Optional


class AuthError(Exception):
    """Base class for credential-service errors."""


class DuplicateError(AuthError):
    """Username or email is already registered."""

    def __init__(self, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__("Username or email already exists.")


class InvalidCredentials(AuthError):
    """Unknown username or wrong password; the two are never told apart."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class InvalidToken(AuthError):
    """Bearer token failed signature, issuer, audience or lifetime checks."""
