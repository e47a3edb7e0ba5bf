"""Pluggy hook specifications for builderfolio lifecycle events.

Events fire after the corresponding change has been applied to the
workspace. Hook implementations observe; they cannot veto or roll back.
"""

from __future__ import annotations

import pluggy

hookspec = pluggy.HookspecMarker("builderfolio")


class BuilderfolioHookSpec:
    """Hook specifications for the builderfolio plugin system."""

    @hookspec
    def post_register(self, user_id: str, role: str) -> None:
        """Called after an account is registered."""

    @hookspec
    def post_project_create(
        self,
        project_id: int,
        name: str,
        builder_id: str,
        manager_id: str,
        status: str,
    ) -> None:
        """Called after a project is stored and linked to both owners."""

    @hookspec
    def post_status_update(
        self,
        project_id: int,
        actor_id: str,
        old_status: str,
        new_status: str,
    ) -> None:
        """Called after a builder changes a project's status."""

    @hookspec
    def post_project_update(
        self,
        project_id: int,
        actor_id: str,
        fields_changed: list[str],
    ) -> None:
        """Called after a manager edits a project's details."""

    @hookspec
    def post_project_delete(
        self,
        project_id: int,
        builder_id: str,
        manager_id: str,
    ) -> None:
        """Called after a project is removed and unlinked."""

    @hookspec
    def post_check(self, issues_found: int, issues_fixed: int) -> None:
        """Called after an integrity check or repair."""
