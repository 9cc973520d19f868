"""
Shared pytest fixtures for the Yor test suite.

Autouse fixtures below isolate tests from the live vault:
  - Vault home   -> temp directory  (prevents test databases in ~/.yor)
  - Audit logger -> temp directory  (prevents test events in the real audit log)
"""

import pytest


@pytest.fixture(autouse=True)
def _isolate_vault_home(tmp_path, monkeypatch):
    """Point YOR_HOME at a temp directory for every test."""
    home = tmp_path / "yor_home"
    monkeypatch.setenv("YOR_HOME", str(home))
    yield home


@pytest.fixture(autouse=True)
def _isolate_audit_logs(tmp_path, monkeypatch):
    """Redirect the global AuditLogger to a temp directory for every test.

    Without this, any test that (directly or indirectly) calls
    ``get_audit_logger().log_event(...)`` appends to the audit log of the
    developer's real vault.
    """
    import yor_vault.core.audit_log as audit_mod

    # Reset the singleton so the next call to get_audit_logger() creates
    # a fresh instance pointing at the temp directory.
    old_logger = audit_mod._audit_logger
    audit_mod._audit_logger = None

    orig_init = audit_mod.AuditLogger.__init__

    def patched_init(self, log_dir=None):
        orig_init(self, log_dir=log_dir or tmp_path / "audit_logs")

    monkeypatch.setattr(audit_mod.AuditLogger, "__init__", patched_init)

    yield

    audit_mod._audit_logger = old_logger


@pytest.fixture
def config(tmp_path):
    from yor_vault.core.config import VaultConfig

    return VaultConfig(home=tmp_path / "vault")


@pytest.fixture
def db(tmp_path):
    from yor_vault.core.store import DictStore

    return DictStore.open_or_create(tmp_path / "vault" / "db" / "default")


class ScriptedPasswords:
    """Password source that replays a fixed list and records prompts."""

    def __init__(self, *passwords):
        self.passwords = list(passwords)
        self.prompts = []

    def __call__(self, label):
        self.prompts.append(label)
        if not self.passwords:
            raise AssertionError("password source exhausted")
        return self.passwords.pop(0)


@pytest.fixture
def scripted_passwords():
    return ScriptedPasswords
