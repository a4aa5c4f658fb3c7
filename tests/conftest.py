"""Pytest configuration and fixtures for portboard tests."""

import threading
from contextlib import contextmanager
from pathlib import Path

import pytest

from portboard.config import SettingsManager
from portboard.storage.db import close_db, init_db, set_db_path
from portboard.storage.repositories import CustomNameRepository, SettingsRepository


FIXTURE_DIR = Path(__file__).parent / "fixtures" / "remote"


class FakeSession:
    """Stands in for SSHSession; replies from a command -> output map."""

    def __init__(self, remote: "FakeRemote") -> None:
        self._remote = remote

    def execute(self, command: str) -> str:
        with self._remote.lock:
            self._remote.commands.append(command)
        result = self._remote.outputs.get(command, "")
        if isinstance(result, Exception):
            raise result
        return result


class FakeRemote:
    """Session factory that records commands and session open/close counts."""

    def __init__(self, outputs: dict | None = None) -> None:
        self.outputs = dict(outputs or {})
        self.commands: list[str] = []
        self.opened = 0
        self.closed = 0
        self.configs: list = []
        self.lock = threading.Lock()

    @contextmanager
    def __call__(self, config):
        with self.lock:
            self.opened += 1
            self.configs.append(config)
        try:
            yield FakeSession(self)
        finally:
            with self.lock:
                self.closed += 1


@pytest.fixture
def ufw_output():
    """Sample `ufw status numbered` output."""
    return (FIXTURE_DIR / "ufw_status_numbered.txt").read_text()


@pytest.fixture
def ss_output():
    """Sample `ss -tulpn` output."""
    return (FIXTURE_DIR / "ss_tulpn.txt").read_text()


@pytest.fixture
def fake_remote(ufw_output, ss_output):
    """A fake remote host with typical ufw and ss output."""
    return FakeRemote({
        "ufw status numbered": ufw_output,
        "ss -tulpn": ss_output,
    })


@pytest.fixture(autouse=True)
def memory_keyring(monkeypatch):
    """Keep tests away from the real OS keyring."""
    store: dict[tuple[str, str], str] = {}

    def set_password(service, key, value):
        store[(service, key)] = value

    def get_password(service, key):
        return store.get((service, key))

    def delete_password(service, key):
        store.pop((service, key), None)

    monkeypatch.setattr("portboard.config.keyring.set_password", set_password)
    monkeypatch.setattr("portboard.config.keyring.get_password", get_password)
    monkeypatch.setattr("portboard.config.keyring.delete_password", delete_password)
    return store


@pytest.fixture
def db_path(tmp_path):
    """Fresh, seeded SQLite database for one test."""
    path = tmp_path / "portboard.db"
    set_db_path(path)
    init_db()
    SettingsRepository().seed_defaults()
    yield path
    close_db()


@pytest.fixture
def settings_manager(db_path):
    manager = SettingsManager()
    manager.update({
        "host_ip": "10.0.0.5",
        "ssh_username": "root",
        "ssh_password": "s3cret",
        "portainer_url": "",
    })
    return manager


@pytest.fixture
def custom_names(db_path):
    return CustomNameRepository()


@pytest.fixture
def make_remote():
    """Factory for FakeRemote with custom command outputs."""
    return FakeRemote
