"""Username to vault file resolution."""

import hashlib
from pathlib import Path
from typing import Union


def digest(text: str) -> str:
    """Return the hex SHA-256 digest of a string."""
    return hashlib.sha256(text.encode('utf-8')).hexdigest()


def vault_path(username: str, vault_dir: Union[str, Path]) -> Path:
    """Path of the vault file belonging to ``username``."""
    return Path(vault_dir) / digest(username)


def user_exists(username: str, vault_dir: Union[str, Path]) -> bool:
    """
    Check whether a vault exists for ``username``.

    Only the file name is checked; the vault is not opened.
    """
    return vault_path(username, vault_dir).is_file()
