"""Tests for the password generator."""

import itertools
import string

import pytest

from secret_vault import generator
from secret_vault.exceptions import GeneratorError
from secret_vault.generator import (
    DIGITS,
    SPECIAL,
    UPPERCASE,
    PasswordPolicy,
    generate_password,
)


ALL_POLICIES = [
    PasswordPolicy(include_uppercase=upper, include_numbers=numbers, include_special=special, length=length)
    for upper, numbers, special in itertools.product([True, False], repeat=3)
    for length in (4, 8, 16)
]


def check_conforms(password: str, policy: PasswordPolicy) -> None:
    assert len(password) == policy.length
    assert any(c in string.ascii_lowercase for c in password)

    allowed = set(string.ascii_lowercase)
    for enabled, alphabet in (
        (policy.include_uppercase, UPPERCASE),
        (policy.include_numbers, DIGITS),
        (policy.include_special, SPECIAL),
    ):
        if enabled:
            assert any(c in alphabet for c in password)
            allowed.update(alphabet)
    assert set(password) <= allowed


@pytest.mark.parametrize("policy", ALL_POLICIES)
def test_generated_passwords_conform(policy):
    for _ in range(50):
        check_conforms(generate_password(policy), policy)


def test_thousand_runs_stay_within_small_retry_budget(monkeypatch):
    monkeypatch.setattr(generator, "MAX_ATTEMPTS", 200)
    policy = PasswordPolicy(length=8)

    for _ in range(1000):
        check_conforms(generate_password(policy), policy)


def test_default_policy():
    password = generate_password()
    check_conforms(password, PasswordPolicy())
    assert len(password) == 16


def test_lowercase_only():
    policy = PasswordPolicy(include_uppercase=False, include_numbers=False, include_special=False, length=1)
    password = generate_password(policy)
    assert len(password) == 1
    assert password in string.ascii_lowercase


def test_length_too_short_for_classes():
    with pytest.raises(ValueError):
        generate_password(PasswordPolicy(length=3))
    with pytest.raises(ValueError):
        generate_password(PasswordPolicy(include_uppercase=False, include_numbers=False,
                                         include_special=False, length=0))


def test_gives_up_after_max_attempts(monkeypatch):
    monkeypatch.setattr(generator, "MAX_ATTEMPTS", 5)
    monkeypatch.setattr(generator.secrets, "choice", lambda seq: "a")

    with pytest.raises(GeneratorError):
        generate_password(PasswordPolicy(length=8))


def test_passwords_differ():
    passwords = {generate_password(PasswordPolicy(length=20)) for _ in range(20)}
    assert len(passwords) == 20
