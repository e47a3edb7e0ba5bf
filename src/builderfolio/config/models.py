"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, builderfolio.toml only contains
overrides. An empty file (or none at all) is a valid configuration.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CoordinatorConfig(BaseModel):
    """[coordinator] section."""

    model_config = {"frozen": True}

    # One workspace-wide lock held across each multi-store change.
    serialize_orchestration: bool = True


class PluginsConfig(BaseModel):
    """[plugins] section."""

    model_config = {"frozen": True}

    enabled: bool = True
    max_workers: int = Field(default=2, ge=1)

