"""Account, client, and project models.

Each record comes in two steps: a *draft* model holding the validated
fields, and the identified record that extends it with a permanent ``id``.
Services validate the draft first and only then draw an identifier, so a
rejected construction leaves every counter and repository untouched.

Models validate on assignment, which is how profile setters are applied.
Project updates replace the stored record with a new one. Identifiers,
roles, and project ownership are frozen fields: assigning to them raises
``pydantic.ValidationError``.
"""

from __future__ import annotations

from datetime import date
from typing import Self

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

from builderfolio.domain.ids import Role
from builderfolio.domain.lifecycle import ProjectStatus

# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


class UserProfile(BaseModel):
    """Registration details for a builder or project manager."""

    model_config = {"validate_assignment": True}

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = ""
    experience: int = Field(default=0, ge=0)
    password: SecretStr
    role: Role = Field(frozen=True)

    @field_validator("password")
    @classmethod
    def _password_not_empty(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("Password cannot be empty")
        return value


class User(UserProfile):
    """A registered account. ``id`` is role-scoped (``B1``, ``P1``)."""

    id: str = Field(min_length=1, frozen=True)

    @classmethod
    def from_profile(cls, profile: UserProfile, user_id: str) -> Self:
        return cls(id=user_id, **dict(profile))


# ---------------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------------


class ClientDetails(BaseModel):
    """Contact details of the client a project is built for."""

    model_config = {"validate_assignment": True}

    name: str = Field(min_length=1)
    email: str = Field(min_length=1)
    phone: str = Field(min_length=1)


class Client(ClientDetails):
    """A client embedded in exactly one project; no lifecycle of its own."""

    id: int = Field(ge=1, frozen=True)

    @classmethod
    def from_details(cls, details: ClientDetails, client_id: int) -> Self:
        return cls(id=client_id, **dict(details))


# ---------------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------------


class ProjectDraft(BaseModel):
    """Validated project fields, before a project identifier is assigned.

    ``end_date`` may equal ``start_date``; only an end before the start is
    rejected here.
    """

    model_config = {"validate_assignment": True}

    name: str = Field(min_length=1)
    description: str = ""
    start_date: date
    end_date: date
    status: ProjectStatus = ProjectStatus.UPCOMING
    client: Client
    builder_id: str = Field(min_length=1, frozen=True)
    manager_id: str = Field(min_length=1, frozen=True)

    @model_validator(mode="after")
    def _end_not_before_start(self) -> Self:
        if self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class Project(ProjectDraft):
    """A persisted project owned by one builder and one manager."""

    id: int = Field(ge=1, frozen=True)

    @classmethod
    def from_draft(cls, draft: ProjectDraft, project_id: int) -> Self:
        return cls(id=project_id, **dict(draft))

    def summary(self) -> dict[str, object]:
        """JSON-safe view used by service results and renderers."""
        return {
            "id": self.id,
            "name": self.name,
            "status": str(self.status),
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "builder_id": self.builder_id,
            "manager_id": self.manager_id,
            "client": self.client.name,
        }
