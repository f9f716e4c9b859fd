"""Random password generation."""

import secrets
import string
from dataclasses import dataclass

from .exceptions import GeneratorError


LOWERCASE = string.ascii_lowercase
UPPERCASE = string.ascii_uppercase
DIGITS = string.digits
SPECIAL = "!@#$%^&*()-_=+[]{}|;:,.<>?"

DEFAULT_LENGTH = 16

# Candidates drawn before giving up; far beyond what any policy needs
MAX_ATTEMPTS = 10_000


@dataclass(frozen=True)
class PasswordPolicy:
    """Character classes and length for generated passwords."""

    include_uppercase: bool = True
    include_numbers: bool = True
    include_special: bool = True
    length: int = DEFAULT_LENGTH

    def required_classes(self) -> list[str]:
        """Alphabets a generated password must draw at least one character from."""
        classes = [LOWERCASE]
        if self.include_uppercase:
            classes.append(UPPERCASE)
        if self.include_numbers:
            classes.append(DIGITS)
        if self.include_special:
            classes.append(SPECIAL)
        return classes


def _is_valid(candidate: str, classes: list[str]) -> bool:
    return all(any(c in alphabet for c in candidate) for alphabet in classes)


def generate_password(policy: PasswordPolicy = PasswordPolicy()) -> str:
    """
    Generate a cryptographically secure random password.

    Characters are drawn uniformly from lowercase letters plus every class
    the policy enables. A candidate missing lowercase or any enabled class
    is discarded and a new one drawn.

    Args:
        policy: Enabled character classes and the password length

    Returns:
        Randomly generated password string

    Raises:
        ValueError: If the length cannot fit one character of each class
        GeneratorError: If no valid candidate is found within MAX_ATTEMPTS
    """
    classes = policy.required_classes()
    if policy.length < len(classes):
        raise ValueError(
            f"Password length must be at least {len(classes)} for the selected character classes"
        )

    charset = "".join(classes)
    for _ in range(MAX_ATTEMPTS):
        candidate = "".join(secrets.choice(charset) for _ in range(policy.length))
        if _is_valid(candidate, classes):
            return candidate

    raise GeneratorError("Failed to generate a password matching the policy")
