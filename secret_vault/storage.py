"""File operations for vault files."""

import logging
import os
import tempfile
from pathlib import Path

from .exceptions import UserExistsError, UserNotFoundError, VaultIOError


logger = logging.getLogger(__name__)


def read_vault_file(path: Path) -> bytes:
    """
    Read the raw bytes of a vault file.

    Args:
        path: Path to the vault file

    Returns:
        File contents

    Raises:
        UserNotFoundError: If the file does not exist
        VaultIOError: If the file cannot be read
    """
    try:
        with open(path, 'rb') as f:
            data = f.read()
    except FileNotFoundError:
        raise UserNotFoundError("User does not exist.") from None
    except OSError as e:
        raise VaultIOError(f"Failed to read vault: {e}") from e

    logger.debug("Read %d bytes from vault %s", len(data), path.name)
    return data


def _write_temp(path: Path, data: bytes) -> str:
    """Write ``data`` to a synced temporary file next to ``path``."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".", suffix=".tmp")
    except OSError as e:
        raise VaultIOError(f"Failed to write vault: {e}") from e

    try:
        with os.fdopen(fd, 'wb') as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
    except OSError as e:
        os.remove(tmp_path)
        raise VaultIOError(f"Failed to write vault: {e}") from e
    return tmp_path


def write_vault_file(path: Path, data: bytes) -> None:
    """
    Atomically replace a vault file.

    The bytes go to a temporary file in the same directory which is then
    renamed over ``path``, so readers see either the old or the new vault.

    Args:
        path: Path to the vault file
        data: Complete vault file contents

    Raises:
        VaultIOError: If the file cannot be written
    """
    tmp_path = _write_temp(path, data)
    try:
        os.replace(tmp_path, path)
    except OSError as e:
        os.remove(tmp_path)
        raise VaultIOError(f"Failed to write vault: {e}") from e

    logger.debug("Wrote %d bytes to vault %s", len(data), path.name)


def create_vault_file(path: Path, data: bytes) -> None:
    """
    Write a new vault file, refusing to replace an existing one.

    The complete temporary file is hard-linked into place, which fails
    if ``path`` already exists, even when another process created it
    a moment earlier.

    Raises:
        UserExistsError: If a vault already exists at ``path``
        VaultIOError: If the file cannot be written
    """
    tmp_path = _write_temp(path, data)
    try:
        os.link(tmp_path, path)
    except FileExistsError:
        raise UserExistsError("User already exists.") from None
    except OSError as e:
        raise VaultIOError(f"Failed to create vault: {e}") from e
    finally:
        os.remove(tmp_path)

    logger.debug("Created vault %s", path.name)
