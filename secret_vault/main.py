#!/usr/bin/env python3
"""Command-line interface for secret-vault."""

import argparse
import getpass
import logging
import sys
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from .config import Settings, load_settings
from .exceptions import (
    AuthenticationError,
    RecordNotFoundError,
    UserExistsError,
    UserNotFoundError,
    VaultError,
)
from .export import default_export_name, export_csv
from .generator import generate_password
from .identity import user_exists
from .manager import (
    RecordOperationConfig,
    add_record,
    authenticate,
    create_user,
    modify_record,
    remove_record,
)
from .preferences import Preferences, load_preferences, save_preferences


def get_settings(args) -> Settings:
    """Resolve settings, applying a --vault-dir override."""
    settings = load_settings()
    if args.vault_dir:
        settings = Settings(
            vault_dir=Path(args.vault_dir).expanduser(),
            preferences_path=settings.preferences_path,
        )
    return settings


def prompt_username(args) -> str:
    if args.user:
        return args.user
    return input("Username: ").strip()


def prompt_master_password(prompt: str = "Master password: ") -> str:
    """Securely prompt for the master password."""
    return getpass.getpass(prompt)


def prompt_secret(settings: Settings) -> str:
    """Prompt for a secret, generating one from the preferences if left empty."""
    print("Enter password (or press Enter to generate one):")
    secret = getpass.getpass("Password: ")
    if not secret:
        policy = load_preferences(settings.preferences_path).password_policy
        secret = generate_password(policy)
        print(f"Generated password: {secret}")
    return secret


def print_records(records, show_secrets: bool = False) -> None:
    if not records:
        print("No records stored yet.")
        return

    print("\nStored records:")
    print("-" * 40)
    for record in records:
        secret = record.secret if show_secrets else "*" * 12
        print(f"  {record.domain}: {secret}")
    print()
    print(f"Total: {len(records)} record(s)")


def record_config(args, settings: Settings, with_secret: bool = False) -> RecordOperationConfig:
    username = prompt_username(args)
    password = prompt_master_password()
    secret = prompt_secret(settings) if with_secret else ""
    return RecordOperationConfig(
        username=username,
        master_password=password,
        domain=args.domain,
        secret=secret,
        vault_dir=settings.vault_dir,
    )


def cmd_register(args) -> int:
    """Register a new user with a master password."""
    settings = get_settings(args)
    username = prompt_username(args)

    if user_exists(username, settings.vault_dir):
        print(f"Error: User '{username}' already exists.")
        return 1

    print("Choose a strong master password.")
    password = prompt_master_password("Enter master password: ")
    confirm = prompt_master_password("Confirm master password: ")

    if password != confirm:
        print("Error: Passwords do not match.")
        return 1

    secret = None
    if args.domain:
        secret = prompt_secret(settings)

    try:
        create_user(username, password, args.domain, secret, vault_dir=settings.vault_dir)
    except UserExistsError:
        print(f"Error: User '{username}' already exists.")
        return 1
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print()
    print(f"User '{username}' registered successfully!")
    print(f"Vault location: {settings.vault_dir}")
    print()
    print("IMPORTANT: Remember your master password!")
    print("If you forget it, your stored passwords cannot be recovered.")
    return 0


def cmd_list(args) -> int:
    """List all stored records."""
    settings = get_settings(args)
    username = prompt_username(args)
    password = prompt_master_password()

    _, records = authenticate(settings.vault_dir, username, password)
    print_records(records, args.show_password)
    return 0


def cmd_get(args) -> int:
    """Show the secret stored for one domain."""
    settings = get_settings(args)
    username = prompt_username(args)
    password = prompt_master_password()

    _, records = authenticate(settings.vault_dir, username, password)
    for record in records:
        if record.domain == args.domain:
            print(record.secret)
            return 0

    print(f"No record found for '{args.domain}'.")
    return 1


def cmd_add(args) -> int:
    """Add a record, or overwrite the secret of an existing one."""
    settings = get_settings(args)
    config = record_config(args, settings, with_secret=True)

    records = add_record(config)
    print(f"Record for '{args.domain}' saved successfully!")
    print(f"Total: {len(records)} record(s)")
    return 0


def cmd_remove(args) -> int:
    """Remove a record."""
    settings = get_settings(args)
    config = record_config(args, settings)

    confirm = input(f"Delete record for '{args.domain}'? (y/N): ")
    if confirm.lower() != 'y':
        print("Deletion cancelled.")
        return 0

    records = remove_record(config)
    print(f"Record for '{args.domain}' deleted.")
    print(f"Total: {len(records)} record(s)")
    return 0


def cmd_modify(args) -> int:
    """Replace the secret of an existing record."""
    settings = get_settings(args)
    config = record_config(args, settings, with_secret=True)

    modify_record(config)
    print(f"Record for '{args.domain}' updated successfully!")
    return 0


def cmd_generate(args) -> int:
    """Generate a secure random password."""
    settings = get_settings(args)
    policy = load_preferences(settings.preferences_path).password_policy
    if args.length is not None:
        policy = replace(policy, length=args.length)

    try:
        password = generate_password(policy)
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    print(f"Generated password: {password}")
    print(f"Length: {len(password)} characters")
    return 0


def cmd_config(args) -> int:
    """Show or update the password generator defaults."""
    settings = get_settings(args)
    policy = load_preferences(settings.preferences_path).password_policy

    changes = {
        "include_uppercase": args.uppercase,
        "include_numbers": args.numbers,
        "include_special": args.special,
        "length": args.length,
    }
    changes = {name: value for name, value in changes.items() if value is not None}

    if changes:
        if changes.get("length", policy.length) < 1:
            print("Error: Length must be a positive integer.")
            return 1
        policy = replace(policy, **changes)
        save_preferences(Preferences(policy), settings.preferences_path)
        print("Preferences saved.")

    print("\nPassword generator:")
    print("-" * 30)
    print(f"  Uppercase: {'yes' if policy.include_uppercase else 'no'}")
    print(f"  Numbers:   {'yes' if policy.include_numbers else 'no'}")
    print(f"  Special:   {'yes' if policy.include_special else 'no'}")
    print(f"  Length:    {policy.length}")
    return 0


def cmd_export(args) -> int:
    """Export all records to a CSV file."""
    settings = get_settings(args)
    username = prompt_username(args)
    password = prompt_master_password()

    _, records = authenticate(settings.vault_dir, username, password)

    output = Path(args.output) if args.output else Path.cwd() / default_export_name(datetime.now())
    count = export_csv(records, output)

    print(f"Exported {count} record(s) to {output}")
    print("WARNING: The exported file contains your secrets in plaintext.")
    return 0


def add_toggle(parser: argparse.ArgumentParser, name: str, help_text: str) -> None:
    group = parser.add_mutually_exclusive_group()
    dest = name.replace("-", "_")
    group.add_argument(f"--{name}", dest=dest, action="store_true", default=None, help=help_text)
    group.add_argument(f"--no-{name}", dest=dest, action="store_false", default=None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secret-vault",
        description="Local password manager with AES-256-GCM encrypted vaults"
    )

    parser.add_argument(
        "-d", "--vault-dir",
        help="Directory holding vault files (default: ~/.secret_vault/release)",
        default=None
    )
    parser.add_argument(
        "-u", "--user",
        help="Username (prompted for when omitted)",
        default=None
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        title="commands",
        dest="command",
        required=True
    )

    # register command
    register_parser = subparsers.add_parser(
        "register",
        help="Register a new user with a master password"
    )
    register_parser.add_argument(
        "domain",
        nargs="?",
        default=None,
        help="Optional domain of a first record"
    )
    register_parser.set_defaults(func=cmd_register)

    # list command
    list_parser = subparsers.add_parser(
        "list",
        help="List all stored records"
    )
    list_parser.add_argument(
        "-s", "--show-password",
        action="store_true",
        help="Show the passwords in plaintext"
    )
    list_parser.set_defaults(func=cmd_list)

    # get command
    get_parser = subparsers.add_parser(
        "get",
        help="Print the password stored for a domain"
    )
    get_parser.add_argument("domain", help="Domain to look up")
    get_parser.set_defaults(func=cmd_get)

    # add command
    add_parser = subparsers.add_parser(
        "add",
        help="Add a record (overwrites an existing domain)"
    )
    add_parser.add_argument("domain", help="Domain (e.g., example.com)")
    add_parser.set_defaults(func=cmd_add)

    # remove command
    remove_parser = subparsers.add_parser(
        "remove",
        help="Remove a record"
    )
    remove_parser.add_argument("domain", help="Domain to remove")
    remove_parser.set_defaults(func=cmd_remove)

    # modify command
    modify_parser = subparsers.add_parser(
        "modify",
        help="Change the password of an existing record"
    )
    modify_parser.add_argument("domain", help="Domain to modify")
    modify_parser.set_defaults(func=cmd_modify)

    # generate command
    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate a secure random password"
    )
    generate_parser.add_argument(
        "length",
        type=int,
        nargs="?",
        default=None,
        help="Password length (default: from preferences)"
    )
    generate_parser.set_defaults(func=cmd_generate)

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Show or change password generator defaults"
    )
    add_toggle(config_parser, "uppercase", "Include uppercase letters")
    add_toggle(config_parser, "numbers", "Include digits")
    add_toggle(config_parser, "special", "Include special characters")
    config_parser.add_argument(
        "-l", "--length",
        type=int,
        default=None,
        help="Generated password length"
    )
    config_parser.set_defaults(func=cmd_config)

    # export command
    export_parser = subparsers.add_parser(
        "export",
        help="Export all records to a CSV file"
    )
    export_parser.add_argument(
        "-o", "--output",
        default=None,
        help="Output file (default: secret-vault-secrets-<date>.csv in the current directory)"
    )
    export_parser.set_defaults(func=cmd_export)

    return parser


def run(argv=None) -> int:
    """Parse arguments, run a command and return its exit code."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s"
    )

    try:
        return args.func(args)
    except UserNotFoundError:
        print("Error: User does not exist.")
        return 1
    except AuthenticationError:
        print("Error: Invalid master password.")
        return 1
    except RecordNotFoundError as e:
        print(f"Error: {e}")
        return 1
    except (VaultError, ValueError) as e:
        print(f"Error: {e}")
        return 1


def main():
    """Main entry point for the CLI."""
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        print("\nOperation cancelled.")
        sys.exit(1)


if __name__ == "__main__":
    main()
