"""Tests for passvault.keygate: bootstrap, verification, permissions."""

import os
import sys

import pytest

from conftest import MASTER_KEY, ScriptedInput, file_mode
from passvault import config
from passvault.errors import InvalidField, KeyFileError, KeyRejected, PolicyViolation
from passvault.keygate import GateState, KeyGate
from passvault.policy import PolicyRule

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")


class TestBootstrap:
    def test_first_run_creates_key_and_vault(self, root):
        gate = KeyGate(root)
        assert gate.state is GateState.UNINITIALIZED

        source = ScriptedInput(MASTER_KEY)
        session = gate.ensure_unlocked(source)

        assert session.unlocked
        assert source.prompts == [config.PROMPT_NEW_KEY]
        assert gate.state is GateState.INITIALIZED
        with open(session.key_path, "rb") as f:
            assert f.read() == (MASTER_KEY + "\n").encode()
        with open(session.vault_path, "rb") as f:
            assert f.read() == b""

    def test_weak_key_is_not_persisted(self, root):
        gate = KeyGate(root)
        with pytest.raises(PolicyViolation) as exc_info:
            gate.ensure_unlocked(ScriptedInput("weak"))
        assert exc_info.value.rule is PolicyRule.LENGTH
        assert exc_info.value.label == "key"
        assert gate.state is GateState.UNINITIALIZED
        assert not os.path.exists(gate.key_path)

    @posix_only
    def test_owner_only_permissions(self, root):
        session = KeyGate(root).ensure_unlocked(ScriptedInput(MASTER_KEY))
        assert file_mode(root) == 0o700
        assert file_mode(session.key_path) == 0o600
        assert file_mode(session.vault_path) == 0o600

    @pytest.mark.parametrize("suffix", ["\r", "\n", "\r\n"])
    def test_key_with_line_break_is_not_persisted(self, root, suffix):
        gate = KeyGate(root)
        with pytest.raises(InvalidField):
            gate.ensure_unlocked(ScriptedInput(MASTER_KEY + suffix))
        assert gate.state is GateState.UNINITIALIZED

    def test_stored_key_is_read_back_exactly(self, root):
        gate = KeyGate(root)
        gate.ensure_unlocked(ScriptedInput(MASTER_KEY))
        # A carriage return is part of the key, only the final newline is format
        with open(gate.key_path, "wb") as f:
            f.write((MASTER_KEY + "\r\n").encode())
        assert gate.ensure_unlocked(ScriptedInput(MASTER_KEY + "\r")).unlocked
        with pytest.raises(KeyRejected):
            gate.ensure_unlocked(ScriptedInput(MASTER_KEY))

    def test_existing_root_is_reused(self, tmp_path):
        root = str(tmp_path)
        KeyGate(root).ensure_unlocked(ScriptedInput(MASTER_KEY))
        assert sorted(os.listdir(root)) == [config.KEY_FILE, config.VAULT_FILE]


class TestVerify:
    @pytest.fixture
    def gate(self, root):
        gate = KeyGate(root)
        gate.ensure_unlocked(ScriptedInput(MASTER_KEY))
        return gate

    def test_correct_key_unlocks_repeatedly(self, gate):
        for _ in range(3):
            source = ScriptedInput(MASTER_KEY)
            assert gate.ensure_unlocked(source).unlocked
            assert source.prompts == [config.PROMPT_KEY]

    @pytest.mark.parametrize("attempt", [
        "", "master#key2025", MASTER_KEY + " ", MASTER_KEY[:-1], MASTER_KEY + "\n",
    ])
    def test_wrong_key_is_rejected(self, gate, attempt):
        with open(gate.key_path, "rb") as f:
            before = f.read()
        with pytest.raises(KeyRejected):
            gate.ensure_unlocked(ScriptedInput(attempt))
        with open(gate.key_path, "rb") as f:
            assert f.read() == before

    def test_stored_key_is_not_revalidated(self, root):
        # A key file written by hand that would fail today's policy still unlocks
        os.makedirs(root)
        with open(os.path.join(root, config.KEY_FILE), "w") as f:
            f.write("legacy\n")
        session = KeyGate(root).ensure_unlocked(ScriptedInput("legacy"))
        assert session.unlocked
        assert os.path.exists(session.vault_path)

    def test_missing_vault_file_is_recreated(self, gate):
        os.remove(gate.vault_path)
        gate.ensure_unlocked(ScriptedInput(MASTER_KEY))
        assert os.path.exists(gate.vault_path)

    @posix_only
    def test_key_permissions_are_reasserted(self, gate):
        os.chmod(gate.key_path, 0o644)
        gate.ensure_unlocked(ScriptedInput(MASTER_KEY))
        assert file_mode(gate.key_path) == 0o600

    @pytest.mark.parametrize("content", [b"", b"\n"])
    def test_empty_key_file_never_unlocks(self, gate, content):
        with open(gate.key_path, "wb") as f:
            f.write(content)
        source = ScriptedInput("")
        with pytest.raises(KeyFileError):
            gate.ensure_unlocked(source)
        # Checked before the user is prompted
        assert source.prompts == []
