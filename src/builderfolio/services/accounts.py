"""AccountService — registration, login, and profile maintenance.

Registration is the only place a user record and a role-index entry are
created together. The duplicate-contact check and the save run in one
orchestration scope so two concurrent registrations through this service
cannot both claim the same email address.
"""

from __future__ import annotations

import hmac

import structlog
from pydantic import ValidationError

from builderfolio.domain.errors import (
    InvalidCredentialsError,
    UserAlreadyExistsError,
    UserNotFoundError,
)
from builderfolio.domain.ids import Role
from builderfolio.domain.models import User, UserProfile
from builderfolio.services.base import BaseService
from builderfolio.services.result import (
    INVALID_ARGUMENT,
    NOT_FOUND,
    USER_EXISTS,
    ServiceResult,
)

logger = structlog.get_logger(__name__)


def _user_data(user: User) -> dict[str, object]:
    return {
        "id": user.id,
        "role": str(user.role),
        "name": user.name,
        "email": user.email,
    }


class AccountService(BaseService):
    """Handles builder and manager accounts."""

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(
        self,
        name: str,
        email: str,
        phone: str,
        experience: int,
        password: str,
        role: Role,
    ) -> ServiceResult:
        """Register a builder or manager and open their role-index entry.

        Returns ``ok=False`` with code ``USER_EXISTS`` when the email is
        already registered.

        Raises:
            ValueError: If the profile is malformed (empty name, email or
                password, negative experience, unknown role).
        """
        op = "register"
        profile = UserProfile(
            name=name,
            email=email,
            phone=phone,
            experience=experience,
            password=password,
            role=role,
        )

        ws = self._workspace
        try:
            with ws.orchestration():
                self._ensure_contact_free(profile.email)
                user = User.from_profile(profile, ws.identities.next_user_id(profile.role))
                ws.users.save(user)
                ws.index_for(user.role).create_entry(user.id)
        except UserAlreadyExistsError as exc:
            logger.warning("user.register_rejected", email=profile.email, reason="duplicate")
            return ServiceResult.failure(op, USER_EXISTS, str(exc), detail={"email": exc.email})

        logger.info("user.registered", user_id=user.id, role=str(user.role))
        warnings: list[str] = []
        self._dispatch_event(
            "post_register",
            {"user_id": user.id, "role": str(user.role)},
            warnings,
        )
        return ServiceResult(ok=True, op=op, data=_user_data(user), warnings=warnings)

    # ------------------------------------------------------------------
    # Lookup and authentication
    # ------------------------------------------------------------------

    def fetch_user(self, user_id: str) -> User:
        """Return the user with *user_id*.

        Raises:
            UserNotFoundError: If no such user exists.
        """
        user = self._workspace.users.find_by_id(user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user

    def login(self, user_id: str, password: str) -> User:
        """Authenticate *user_id* with *password*.

        Raises:
            UserNotFoundError: If no such user exists.
            InvalidCredentialsError: If the password does not match.
        """
        try:
            user = self.fetch_user(user_id)
        except UserNotFoundError:
            logger.warning("user.login_failed", user_id=user_id, reason="not_found")
            raise

        stored = user.password.get_secret_value().encode("utf-8")
        if not hmac.compare_digest(stored, password.encode("utf-8")):
            logger.warning("user.login_failed", user_id=user_id, reason="bad_password")
            raise InvalidCredentialsError("Incorrect password")

        logger.info("user.login", user_id=user_id)
        return user

    # ------------------------------------------------------------------
    # Profile maintenance
    # ------------------------------------------------------------------

    def update_profile(
        self,
        user_id: str,
        *,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        experience: int | None = None,
        password: str | None = None,
    ) -> ServiceResult:
        """Apply profile changes to an existing account.

        Identifier and role never change. An email already used by another
        account is refused with ``USER_EXISTS``; an invalid value with
        ``INVALID_ARGUMENT``, leaving the profile untouched.
        """
        op = "update_profile"
        requested = {
            "name": name,
            "email": email,
            "phone": phone,
            "experience": experience,
            "password": password,
        }
        changes = {key: value for key, value in requested.items() if value is not None}

        ws = self._workspace
        with ws.orchestration():
            user = ws.users.find_by_id(user_id)
            if user is None:
                return ServiceResult.failure(op, NOT_FOUND, f"User not found: {user_id}")

            if "email" in changes:
                holder = ws.users.find_by_contact(changes["email"])
                if holder is not None and holder.id != user_id:
                    exc = UserAlreadyExistsError(changes["email"])
                    return ServiceResult.failure(
                        op, USER_EXISTS, str(exc), detail={"email": exc.email}
                    )

            try:
                candidate = UserProfile.model_validate({**dict(user), **changes})
            except ValidationError as exc:
                return ServiceResult.failure(
                    op,
                    INVALID_ARGUMENT,
                    f"Invalid profile update: {exc.error_count()} error(s)",
                    detail={"errors": [err["msg"] for err in exc.errors()]},
                )

            for key in changes:
                setattr(user, key, getattr(candidate, key))
            ws.users.save(user)

        logger.info("user.updated", user_id=user_id, fields=sorted(changes))
        return ServiceResult(
            ok=True,
            op=op,
            data={**_user_data(user), "fields_changed": sorted(changes)},
        )

    def _ensure_contact_free(self, email: str) -> None:
        if self._workspace.users.exists_by_contact(email):
            raise UserAlreadyExistsError(email)
