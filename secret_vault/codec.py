"""On-disk vault format.

Layout (big-endian)::

    magic(4) version(1) time_cost(4) memory_cost(4) parallelism(1)
    salt(16) nonce(12) ciphertext(...)

Everything before the ciphertext is the header. The header is fed to
AES-GCM as associated data, so any change to it fails decryption.
"""

import struct
from dataclasses import dataclass

from .crypto import KdfParams, NONCE_LENGTH, SALT_LENGTH, TAG_LENGTH
from .exceptions import AuthenticationError


MAGIC = b"SVLT"
FORMAT_VERSION = 1

_PREFIX = struct.Struct(">4sBIIB")
HEADER_LENGTH = _PREFIX.size + SALT_LENGTH + NONCE_LENGTH

# Argon2id limits accepted in a header; a damaged header must not
# trigger an unbounded key derivation
MAX_TIME_COST = 64
MAX_MEMORY_COST = 1024 * 1024  # KiB (1 GiB)
MAX_PARALLELISM = 16


@dataclass(frozen=True)
class VaultHeader:
    """Plaintext part of a vault file."""

    kdf_params: KdfParams
    salt: bytes
    nonce: bytes
    version: int = FORMAT_VERSION

    def to_bytes(self) -> bytes:
        if len(self.salt) != SALT_LENGTH:
            raise ValueError(f"Salt must be {SALT_LENGTH} bytes")
        if len(self.nonce) != NONCE_LENGTH:
            raise ValueError(f"Nonce must be {NONCE_LENGTH} bytes")
        params = self.kdf_params
        if not params_in_range(params.time_cost, params.memory_cost, params.parallelism):
            raise ValueError(f"KDF parameters out of range: {params}")
        prefix = _PREFIX.pack(
            MAGIC,
            self.version,
            self.kdf_params.time_cost,
            self.kdf_params.memory_cost,
            self.kdf_params.parallelism,
        )
        return prefix + self.salt + self.nonce


def params_in_range(time_cost: int, memory_cost: int, parallelism: int) -> bool:
    """Whether Argon2id parameters are within the accepted limits."""
    return (
        1 <= time_cost <= MAX_TIME_COST
        and 1 <= parallelism <= MAX_PARALLELISM
        and 8 * parallelism <= memory_cost <= MAX_MEMORY_COST
    )


def encode_vault(header: VaultHeader, ciphertext: bytes) -> bytes:
    """Serialize a header and its ciphertext into vault file bytes."""
    return header.to_bytes() + ciphertext


def decode_vault(data: bytes) -> tuple[VaultHeader, bytes, bytes]:
    """
    Split vault file bytes into their parts.

    Returns:
        Tuple of (header, raw header bytes, ciphertext)

    Raises:
        AuthenticationError: If the data is not a readable vault
    """
    if len(data) < HEADER_LENGTH + TAG_LENGTH:
        raise AuthenticationError("Unable to decrypt vault.")

    magic, version, time_cost, memory_cost, parallelism = _PREFIX.unpack_from(data)
    if magic != MAGIC or version != FORMAT_VERSION:
        raise AuthenticationError("Unable to decrypt vault.")

    if not params_in_range(time_cost, memory_cost, parallelism):
        raise AuthenticationError("Unable to decrypt vault.")

    offset = _PREFIX.size
    salt = data[offset:offset + SALT_LENGTH]
    offset += SALT_LENGTH
    nonce = data[offset:offset + NONCE_LENGTH]
    offset += NONCE_LENGTH

    header = VaultHeader(
        kdf_params=KdfParams(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        ),
        salt=salt,
        nonce=nonce,
        version=version,
    )
    return header, data[:offset], data[offset:]
