"""Config file discovery.

Walk-up finder locates brewstrap.toml, similar to how git finds .git/.
The BREWSTRAP_CONFIG env var and the --config CLI flag take precedence.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "brewstrap.toml"
CONFIG_ENV_VAR = "BREWSTRAP_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Walk up from *start* (default: cwd) looking for brewstrap.toml.

    Returns the path to the config file, or None if not found.
    A set BREWSTRAP_CONFIG wins outright, even when it points nowhere.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path).expanduser()
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None
