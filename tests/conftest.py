import os

import pytest

from passvault import config
from passvault.keygate import KeyGate
from passvault.storage import VaultStore

MASTER_KEY = "Master#Key2025"


class ScriptedInput:
    """Input source that replays canned answers and records prompts."""

    def __init__(self, *answers):
        self.answers = list(answers)
        self.prompts = []

    def __call__(self, prompt):
        self.prompts.append(prompt)
        return self.answers.pop(0)


@pytest.fixture
def root(tmp_path):
    return str(tmp_path / "vault-root")


@pytest.fixture
def session(root):
    """Unlocked session on a freshly bootstrapped root."""
    return KeyGate(root).ensure_unlocked(ScriptedInput(MASTER_KEY))


@pytest.fixture
def store(session):
    return VaultStore(session)


@pytest.fixture
def write_vault(session):
    """Replace the vault file with raw lines and return a fresh store."""
    def _write(*lines):
        with open(session.vault_path, "w", encoding="utf-8") as f:
            f.write("".join(line + "\n" for line in lines))
        return VaultStore(session)
    return _write


def read_lines(path):
    with open(path, encoding="utf-8") as f:
        return f.read().splitlines()


def file_mode(path):
    return os.stat(path).st_mode & 0o777


@pytest.fixture(autouse=True)
def _isolated_home(monkeypatch, tmp_path):
    monkeypatch.delenv(config.CONFIG_ROOT_ENV, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
