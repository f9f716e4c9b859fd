"""Vault operations: registration, authentication and record changes.

Every operation works on the whole vault: the file is read, the master
password is checked by decrypting it, the records are changed in memory
and the vault is encrypted again under a fresh nonce and atomically
rewritten. No key material is kept between calls.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from argon2.exceptions import HashingError
from cryptography.exceptions import InvalidTag

from . import crypto
from . import storage
from .codec import VaultHeader, decode_vault, encode_vault, params_in_range
from .exceptions import AuthenticationError, UserExistsError
from .identity import digest, vault_path
from .records import RecordStore, RecordsSnapshot


@dataclass(frozen=True)
class RecordOperationConfig:
    """Inputs for a single record operation. Never stored."""

    username: str
    master_password: str = field(repr=False)
    domain: str
    secret: str = field(repr=False)
    vault_dir: Union[str, Path]


@dataclass(frozen=True)
class _OpenVault:
    header: VaultHeader
    key: bytes
    records: RecordStore


class User:
    """
    Handle to a registered user's vault.

    The handle only knows where the vault lives. Each record operation
    re-authenticates with the master password from its own config.
    """

    def __init__(self, vault_dir: Union[str, Path], user_id: str):
        self.vault_dir = Path(vault_dir)
        self.user_id = user_id

    def __repr__(self) -> str:
        return f"User(user_id={self.user_id!r}, vault_dir={str(self.vault_dir)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.vault_dir == other.vault_dir and self.user_id == other.user_id

    def __hash__(self) -> int:
        return hash((self.vault_dir, self.user_id))

    @property
    def path(self) -> Path:
        """Path of this user's vault file."""
        return self.vault_dir / self.user_id

    def _check_config(self, config: RecordOperationConfig) -> None:
        if vault_path(config.username, config.vault_dir) != self.path:
            raise ValueError("Record operation targets a different user's vault")

    def add_record(self, config: RecordOperationConfig) -> RecordsSnapshot:
        """Add or overwrite a record in this user's vault."""
        self._check_config(config)
        return add_record(config)

    def remove_record(self, config: RecordOperationConfig) -> RecordsSnapshot:
        """Remove a record from this user's vault."""
        self._check_config(config)
        return remove_record(config)

    def modify_record(self, config: RecordOperationConfig) -> RecordsSnapshot:
        """Replace the secret of a record in this user's vault."""
        self._check_config(config)
        return modify_record(config)


def _require_credentials(username: str, master_password: str) -> None:
    if not username:
        raise ValueError("Username cannot be empty")
    if not master_password:
        raise ValueError("Master password cannot be empty")


def _require_domain(domain: str) -> None:
    if not domain or not domain.strip():
        raise ValueError("Domain cannot be empty")


def _seal(records: RecordStore, key: bytes, kdf_params: crypto.KdfParams, salt: bytes) -> bytes:
    """Encrypt the record store under a fresh nonce and encode the vault."""
    header = VaultHeader(kdf_params=kdf_params, salt=salt, nonce=crypto.generate_nonce())
    header_bytes = header.to_bytes()
    ciphertext = crypto.encrypt(records.to_bytes(), key, header.nonce, header_bytes)
    return encode_vault(header, ciphertext)


def _open(path: Path, master_password: str) -> _OpenVault:
    """
    Read, authenticate and decrypt the vault at ``path``.

    Raises:
        UserNotFoundError: If the vault does not exist
        AuthenticationError: If the password is wrong or the vault is damaged
        SerializationError: If the decrypted payload is malformed
        VaultIOError: If the vault cannot be read
    """
    data = storage.read_vault_file(path)
    header, header_bytes, ciphertext = decode_vault(data)

    try:
        key = crypto.derive_key(master_password, header.salt, header.kdf_params)
        plaintext = crypto.decrypt(ciphertext, header.nonce, key, header_bytes)
    except (InvalidTag, HashingError, MemoryError):
        raise AuthenticationError("Unable to decrypt vault.") from None

    return _OpenVault(header=header, key=key, records=RecordStore.from_bytes(plaintext))


def _save(path: Path, vault: _OpenVault) -> RecordsSnapshot:
    data = _seal(vault.records, vault.key, vault.header.kdf_params, vault.header.salt)
    storage.write_vault_file(path, data)
    return vault.records.snapshot()


def create_user(
    username: str,
    master_password: str,
    domain: Optional[str] = None,
    secret: Optional[str] = None,
    *,
    vault_dir: Union[str, Path],
    kdf_params: crypto.KdfParams = crypto.DEFAULT_KDF_PARAMS,
) -> User:
    """
    Register a new user and write their vault.

    Args:
        username: Name of the user; only its digest reaches the disk
        master_password: Password the vault key is derived from
        domain: Optional domain of a first record
        secret: Secret of the first record
        vault_dir: Directory holding the vault files
        kdf_params: Argon2id cost parameters recorded in the vault header

    Returns:
        Handle to the new user's vault

    Raises:
        UserExistsError: If the user already has a vault
        VaultIOError: If the vault cannot be written
        ValueError: If username or master password is empty, or domain is blank
    """
    _require_credentials(username, master_password)
    if domain:
        _require_domain(domain)
    if not params_in_range(kdf_params.time_cost, kdf_params.memory_cost, kdf_params.parallelism):
        raise ValueError(f"KDF parameters out of range: {kdf_params}")

    path = vault_path(username, vault_dir)
    if path.exists():
        raise UserExistsError("User already exists.")

    records = RecordStore()
    if domain:
        records.upsert(domain, secret or "")

    salt = crypto.generate_salt()
    key = crypto.derive_key(master_password, salt, kdf_params)
    storage.create_vault_file(path, _seal(records, key, kdf_params, salt))

    return User(vault_dir, digest(username))


def authenticate(
    vault_dir: Union[str, Path],
    username: str,
    master_password: str,
) -> tuple[User, RecordsSnapshot]:
    """
    Verify a master password and return the user's records.

    Returns:
        Tuple of (user handle, records snapshot)

    Raises:
        UserNotFoundError: If the user has no vault
        AuthenticationError: If the password is wrong or the vault is damaged
    """
    _require_credentials(username, master_password)

    path = vault_path(username, vault_dir)
    vault = _open(path, master_password)
    return User(vault_dir, digest(username)), vault.records.snapshot()


def add_record(config: RecordOperationConfig) -> RecordsSnapshot:
    """
    Store a record, overwriting the secret if the domain already exists.

    Raises:
        UserNotFoundError: If the user has no vault
        AuthenticationError: If the password is wrong or the vault is damaged
        VaultIOError: If the vault cannot be rewritten
    """
    _require_credentials(config.username, config.master_password)
    _require_domain(config.domain)

    path = vault_path(config.username, config.vault_dir)
    vault = _open(path, config.master_password)
    vault.records.upsert(config.domain, config.secret)
    return _save(path, vault)


def remove_record(config: RecordOperationConfig) -> RecordsSnapshot:
    """
    Delete the record for ``config.domain``.

    Raises:
        UserNotFoundError: If the user has no vault
        AuthenticationError: If the password is wrong or the vault is damaged
        RecordNotFoundError: If the domain is not stored
    """
    _require_credentials(config.username, config.master_password)
    _require_domain(config.domain)

    path = vault_path(config.username, config.vault_dir)
    vault = _open(path, config.master_password)
    vault.records.remove(config.domain)
    return _save(path, vault)


def modify_record(config: RecordOperationConfig) -> RecordsSnapshot:
    """
    Replace the secret stored for ``config.domain``.

    Raises:
        UserNotFoundError: If the user has no vault
        AuthenticationError: If the password is wrong or the vault is damaged
        RecordNotFoundError: If the domain is not stored
    """
    _require_credentials(config.username, config.master_password)
    _require_domain(config.domain)

    path = vault_path(config.username, config.vault_dir)
    vault = _open(path, config.master_password)
    vault.records.replace(config.domain, config.secret)
    return _save(path, vault)
