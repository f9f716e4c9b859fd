"""Directory and file locations.

Settings are resolved once at startup and passed to the vault operations,
which never read the environment themselves.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional


# Default base directory in user's home directory
DEFAULT_BASE_DIR = Path.home() / ".secret_vault"

DEFAULT_PROFILE = "release"
PREFERENCES_FILE = "config.json"

# Environment overrides
VAULT_DIR_ENV = "SECRET_VAULT_DIR"
PROFILE_ENV = "SECRET_VAULT_PROFILE"


@dataclass(frozen=True)
class Settings:
    vault_dir: Path
    preferences_path: Path


def load_settings(
    environ: Optional[Mapping[str, str]] = None,
    base_dir: Path = DEFAULT_BASE_DIR,
) -> Settings:
    """
    Resolve where vaults and preferences live.

    ``SECRET_VAULT_DIR`` replaces the vault directory outright; otherwise
    vaults go to ``<base_dir>/<profile>`` where the profile defaults to
    ``release`` and can be changed with ``SECRET_VAULT_PROFILE``.
    """
    if environ is None:
        environ = os.environ

    override = environ.get(VAULT_DIR_ENV)
    if override:
        vault_dir = Path(override).expanduser()
    else:
        vault_dir = base_dir / environ.get(PROFILE_ENV, DEFAULT_PROFILE)

    return Settings(
        vault_dir=vault_dir,
        preferences_path=base_dir / PREFERENCES_FILE,
    )
