"""Exceptions raised by the vault operations."""


class VaultError(Exception):
    """Base exception for vault errors."""
    pass


class UserExistsError(VaultError):
    """Raised when registering a user whose vault already exists."""
    pass


class UserNotFoundError(VaultError):
    """Raised when no vault file exists for the given user."""
    pass


class AuthenticationError(VaultError):
    """
    Raised when a vault cannot be decrypted.

    A wrong master password and a corrupted vault are reported the same
    way so the error cannot be used as a password-guessing oracle.
    """
    pass


class RecordNotFoundError(VaultError):
    """Raised when removing or modifying a domain that is not stored."""
    pass


class SerializationError(VaultError):
    """Raised when a decrypted payload is not a valid record list."""
    pass


class VaultIOError(VaultError):
    """Raised when reading or writing a vault file fails."""
    pass


class GeneratorError(VaultError):
    """Raised when the password generator gives up."""
    pass
