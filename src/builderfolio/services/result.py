"""ServiceResult and ServiceError — the envelope for reportable outcomes.

Account, integrity, and scenario operations return ServiceResult; the CLI
formats and emits it. Coordinator operations keep their plain return
values (records, lists, booleans) and are wrapped by their callers.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Error codes shared across services.
NOT_FOUND = "NOT_FOUND"
USER_EXISTS = "USER_EXISTS"
INVALID_ARGUMENT = "INVALID_ARGUMENT"


class ServiceError(BaseModel):
    """Structured error payload within a ServiceResult."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Return type for reportable service operations.

    Attributes:
        ok: Whether the operation succeeded.
        op: Name of the operation (e.g. ``"register"``).
        data: Operation-specific payload on success.
        warnings: Non-fatal issues encountered during the operation.
        error: Structured error if ``ok`` is False.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
    ) -> ServiceResult:
        return cls(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail or {}),
        )
