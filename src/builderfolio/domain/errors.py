"""Account errors raised where a lookup or credential check is mandatory.

Malformed arguments are plain ``ValueError`` (pydantic's ``ValidationError``
included). Authorization mismatches and duplicate registrations are soft
failures reported through return values, not exceptions.
"""

from __future__ import annotations


class BuilderfolioError(Exception):
    """Base class for builderfolio errors."""


class UserNotFoundError(BuilderfolioError, LookupError):
    """No account exists with the requested identifier."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class UserAlreadyExistsError(BuilderfolioError):
    """An account already uses the requested contact address."""

    def __init__(self, email: str) -> None:
        super().__init__(f"User already exists with email: {email}")
        self.email = email


class InvalidCredentialsError(BuilderfolioError):
    """The supplied secret does not match the stored one."""
