"""Tests for settings, generator preferences and CSV export."""

import csv
import json
from datetime import datetime
from pathlib import Path

from secret_vault.config import load_settings
from secret_vault.export import default_export_name, export_csv
from secret_vault.generator import PasswordPolicy
from secret_vault.preferences import Preferences, load_preferences, save_preferences
from secret_vault.records import Record


def test_settings_defaults(tmp_path):
    settings = load_settings(environ={}, base_dir=tmp_path)

    assert settings.vault_dir == tmp_path / "release"
    assert settings.preferences_path == tmp_path / "config.json"


def test_settings_profile_override(tmp_path):
    settings = load_settings(environ={"SECRET_VAULT_PROFILE": "debug"}, base_dir=tmp_path)
    assert settings.vault_dir == tmp_path / "debug"


def test_settings_vault_dir_override(tmp_path):
    target = tmp_path / "elsewhere"
    settings = load_settings(
        environ={"SECRET_VAULT_DIR": str(target), "SECRET_VAULT_PROFILE": "debug"},
        base_dir=tmp_path,
    )
    assert settings.vault_dir == target
    assert settings.preferences_path == tmp_path / "config.json"


def test_missing_preferences_written_with_defaults(tmp_path):
    path = tmp_path / "nested" / "config.json"

    preferences = load_preferences(path)

    assert preferences == Preferences()
    assert json.loads(path.read_text()) == {
        "password_config": {
            "include_uppercase": True,
            "include_numbers": True,
            "include_special": True,
            "length": 16,
        }
    }


def test_preferences_round_trip(tmp_path):
    path = tmp_path / "config.json"
    policy = PasswordPolicy(include_uppercase=False, include_numbers=True, include_special=False, length=24)

    save_preferences(Preferences(policy), path)

    assert load_preferences(path).password_policy == policy
    assert path.read_text().startswith("{\n  ")


def test_corrupt_preferences_reset(tmp_path):
    path = tmp_path / "config.json"

    for content in ("{not json", "[]", '{"password_config": {"length": 8}}',
                    '{"password_config": {"include_uppercase": "yes", "include_numbers": true, '
                    '"include_special": true, "length": 8}}'):
        path.write_text(content)
        assert load_preferences(path) == Preferences()
        assert json.loads(path.read_text())["password_config"]["length"] == 16


def test_export_csv(tmp_path):
    path = tmp_path / "export.csv"
    records = (Record("example.com", "s3cr3t!"), Record("bank.com", 'a,b"c'))

    assert export_csv(records, path) == 2

    with open(path, newline='', encoding='utf-8') as f:
        rows = list(csv.reader(f))
    assert rows == [["domain", "password"], ["example.com", "s3cr3t!"], ["bank.com", 'a,b"c']]


def test_export_empty(tmp_path):
    path = tmp_path / "export.csv"
    assert export_csv((), path) == 0
    assert path.read_text().splitlines() == ["domain,password"]


def test_default_export_name():
    name = default_export_name(datetime(2024, 3, 5, 14, 7, 9))
    assert name == "secret-vault-secrets-2024-03-05-14-07-09.csv"
    assert Path(name).suffix == ".csv"
