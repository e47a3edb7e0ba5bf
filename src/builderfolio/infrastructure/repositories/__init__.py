"""In-memory repositories keyed by identifier."""

from builderfolio.infrastructure.repositories.projects import ProjectRepository
from builderfolio.infrastructure.repositories.roles import RoleIndex
from builderfolio.infrastructure.repositories.users import UserRepository

__all__ = ["ProjectRepository", "RoleIndex", "UserRepository"]
