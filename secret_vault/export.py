"""CSV export of decrypted records."""

import csv
from datetime import datetime
from pathlib import Path

from .records import RecordsSnapshot


def default_export_name(now: datetime) -> str:
    """File name for an export made at ``now``."""
    return f"secret-vault-secrets-{now.strftime('%Y-%m-%d-%H-%M-%S')}.csv"


def export_csv(snapshot: RecordsSnapshot, path: Path) -> int:
    """
    Write records to a CSV file with a ``domain,password`` header.

    Returns:
        Number of records written
    """
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.writer(f)
        writer.writerow(["domain", "password"])
        for record in snapshot:
            writer.writerow([record.domain, record.secret])
    return len(snapshot)
