"""Persisted defaults for the password generator."""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from .generator import PasswordPolicy


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Preferences:
    password_policy: PasswordPolicy = field(default_factory=PasswordPolicy)

    def to_dict(self) -> dict:
        return {"password_config": asdict(self.password_policy)}

    @classmethod
    def from_dict(cls, data: dict) -> "Preferences":
        """
        Build preferences from their JSON form.

        Raises:
            ValueError: If a field is missing or has the wrong type
        """
        config = data["password_config"]
        flags = ("include_uppercase", "include_numbers", "include_special")
        for name in flags:
            if not isinstance(config[name], bool):
                raise ValueError(f"'{name}' must be a boolean")
        length = config["length"]
        if isinstance(length, bool) or not isinstance(length, int) or length < 1:
            raise ValueError("'length' must be a positive integer")

        return cls(PasswordPolicy(
            include_uppercase=config["include_uppercase"],
            include_numbers=config["include_numbers"],
            include_special=config["include_special"],
            length=length,
        ))


def save_preferences(preferences: Preferences, path: Path) -> None:
    """Write preferences as pretty-printed JSON."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(preferences.to_dict(), f, indent=2)
        f.write("\n")


def load_preferences(path: Path) -> Preferences:
    """
    Load preferences from ``path``.

    A missing or unreadable file is replaced by the defaults, which are
    written back to ``path``.
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return Preferences.from_dict(json.load(f))
    except FileNotFoundError:
        logger.debug("No preferences at %s, writing defaults", path)
    except (ValueError, KeyError, TypeError) as e:
        logger.warning("Preferences at %s are invalid (%s), resetting to defaults", path, e)

    preferences = Preferences()
    save_preferences(preferences, path)
    return preferences
