"""Key derivation and authenticated encryption for vault payloads."""

import secrets
from dataclasses import dataclass

from argon2.low_level import hash_secret_raw, Type
from cryptography.hazmat.primitives.ciphers.aead import AESGCM


# Argon2id parameters
ARGON2_MEMORY_COST = 65536  # 64 MB
ARGON2_TIME_COST = 3        # 3 iterations
ARGON2_PARALLELISM = 4      # 4 parallel threads
ARGON2_HASH_LEN = 32        # 256-bit key

SALT_LENGTH = 16            # 16 bytes
NONCE_LENGTH = 12           # 96-bit nonce for AES-GCM
TAG_LENGTH = 16             # GCM tag appended to the ciphertext


@dataclass(frozen=True)
class KdfParams:
    """Argon2id cost parameters, stored in every vault header."""

    time_cost: int = ARGON2_TIME_COST
    memory_cost: int = ARGON2_MEMORY_COST
    parallelism: int = ARGON2_PARALLELISM


DEFAULT_KDF_PARAMS = KdfParams()


def generate_salt() -> bytes:
    """Generate a cryptographically secure random 16-byte salt."""
    return secrets.token_bytes(SALT_LENGTH)


def generate_nonce() -> bytes:
    """Generate a fresh 12-byte nonce; one per encryption."""
    return secrets.token_bytes(NONCE_LENGTH)


def derive_key(password: str, salt: bytes, params: KdfParams = DEFAULT_KDF_PARAMS) -> bytes:
    """
    Derive a 256-bit encryption key from password using Argon2id.

    Args:
        password: The master password
        salt: Random salt bytes stored in the vault header
        params: Argon2id cost parameters

    Returns:
        32-byte derived key suitable for AES-256
    """
    return hash_secret_raw(
        secret=password.encode('utf-8'),
        salt=salt,
        time_cost=params.time_cost,
        memory_cost=params.memory_cost,
        parallelism=params.parallelism,
        hash_len=ARGON2_HASH_LEN,
        type=Type.ID  # Argon2id
    )


def encrypt(plaintext: bytes, key: bytes, nonce: bytes, associated_data: bytes) -> bytes:
    """
    Encrypt plaintext using AES-256-GCM.

    The nonce must never have been used with ``key`` before. The associated
    data is authenticated but not encrypted.

    Returns:
        Ciphertext with the 16-byte GCM tag appended
    """
    aesgcm = AESGCM(key)
    return aesgcm.encrypt(nonce, plaintext, associated_data)


def decrypt(ciphertext: bytes, nonce: bytes, key: bytes, associated_data: bytes) -> bytes:
    """
    Decrypt ciphertext using AES-256-GCM.

    Args:
        ciphertext: The encrypted data (includes GCM tag)
        nonce: The 12-byte nonce used during encryption
        key: 32-byte encryption key
        associated_data: The header bytes authenticated alongside

    Returns:
        Decrypted plaintext bytes

    Raises:
        cryptography.exceptions.InvalidTag: If decryption fails (wrong key or tampered data)
    """
    aesgcm = AESGCM(key)
    return aesgcm.decrypt(nonce, ciphertext, associated_data)
