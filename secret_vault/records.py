"""In-memory record store holding the decrypted vault contents."""

import json
from typing import Iterable, NamedTuple, Optional

from .exceptions import RecordNotFoundError, SerializationError


class Record(NamedTuple):
    """A stored (domain, secret) pair."""

    domain: str
    secret: str


RecordsSnapshot = tuple[Record, ...]


class RecordStore:
    """
    Ordered mapping of domain to secret.

    Domains are unique. New domains go to the end, and storing a domain
    again moves it to the end, so iteration follows insertion/update order.
    """

    def __init__(self, records: Iterable[tuple[str, str]] = ()):
        self._records: dict[str, str] = {}
        for domain, secret in records:
            self.upsert(domain, secret)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, domain: object) -> bool:
        return domain in self._records

    def get(self, domain: str) -> Optional[str]:
        return self._records.get(domain)

    def upsert(self, domain: str, secret: str) -> None:
        """Store ``secret`` under ``domain``, replacing any previous value."""
        self._records.pop(domain, None)
        self._records[domain] = secret

    def remove(self, domain: str) -> None:
        """
        Remove a domain.

        Raises:
            RecordNotFoundError: If the domain is not stored
        """
        if domain not in self._records:
            raise RecordNotFoundError(f"No record found for '{domain}'.")
        del self._records[domain]

    def replace(self, domain: str, secret: str) -> None:
        """
        Replace the secret of an existing domain.

        Raises:
            RecordNotFoundError: If the domain is not stored
        """
        if domain not in self._records:
            raise RecordNotFoundError(f"No record found for '{domain}'.")
        self.upsert(domain, secret)

    def snapshot(self) -> RecordsSnapshot:
        """Return an immutable copy of the records in store order."""
        return tuple(Record(domain, secret) for domain, secret in self._records.items())

    def to_bytes(self) -> bytes:
        """Serialize the store to the JSON payload that gets encrypted."""
        payload = {"records": [[domain, secret] for domain, secret in self._records.items()]}
        return json.dumps(payload, ensure_ascii=False).encode('utf-8')

    @classmethod
    def from_bytes(cls, data: bytes) -> "RecordStore":
        """
        Parse a decrypted payload.

        Raises:
            SerializationError: If the payload is not a valid record list
        """
        try:
            payload = json.loads(data.decode('utf-8'))
        except (UnicodeDecodeError, ValueError) as e:
            raise SerializationError(f"Invalid vault payload: {e}") from e

        if not isinstance(payload, dict) or not isinstance(payload.get("records"), list):
            raise SerializationError("Invalid vault payload: missing record list")

        store = cls()
        for item in payload["records"]:
            if (
                not isinstance(item, list)
                or len(item) != 2
                or not all(isinstance(value, str) for value in item)
            ):
                raise SerializationError("Invalid vault payload: malformed record")
            domain, secret = item
            if domain in store:
                raise SerializationError(f"Invalid vault payload: duplicate domain '{domain}'")
            store.upsert(domain, secret)
        return store
