"""Local password manager storing one AES-256-GCM encrypted vault per user."""

from .exceptions import (
    AuthenticationError,
    GeneratorError,
    RecordNotFoundError,
    SerializationError,
    UserExistsError,
    UserNotFoundError,
    VaultError,
    VaultIOError,
)
from .generator import PasswordPolicy, generate_password
from .identity import digest, user_exists
from .manager import (
    RecordOperationConfig,
    User,
    add_record,
    authenticate,
    create_user,
    modify_record,
    remove_record,
)
from .records import Record, RecordsSnapshot

__version__ = "1.0.0"
__all__ = [
    "AuthenticationError",
    "GeneratorError",
    "PasswordPolicy",
    "Record",
    "RecordNotFoundError",
    "RecordOperationConfig",
    "RecordsSnapshot",
    "SerializationError",
    "User",
    "UserExistsError",
    "UserNotFoundError",
    "VaultError",
    "VaultIOError",
    "add_record",
    "authenticate",
    "create_user",
    "digest",
    "generate_password",
    "modify_record",
    "remove_record",
    "user_exists",
]
