"""Locate ``builderfolio.toml``.

An explicit ``BUILDERFOLIO_CONFIG`` path takes precedence. Otherwise the
search starts in the given directory and climbs towards the filesystem root,
stopping at the first directory holding the file.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "builderfolio.toml"
CONFIG_ENV_VAR = "BUILDERFOLIO_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file governing *start* (default: cwd), if any.

    A ``BUILDERFOLIO_CONFIG`` value naming a missing file yields None rather
    than falling back to the directory search.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        candidate = Path(override)
        return candidate if candidate.is_file() else None

    directory = (start or Path.cwd()).resolve()
    for folder in (directory, *directory.parents):
        candidate = folder / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
