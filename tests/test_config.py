"""Tests for settings loading and keyring-backed secrets."""

import pytest
from keyring.errors import NoKeyringError

from portboard.config import KEYRING_MARKER, SECRET_MASK, Settings, SettingsManager


def test_secrets_go_to_keyring(db_path, memory_keyring):
    manager = SettingsManager()
    manager.update({"ssh_password": "s3cret", "portainer_token": "ptr_abc"})

    assert manager.repo.get("ssh_password") == KEYRING_MARKER
    assert memory_keyring[("portboard", "ssh_password")] == "s3cret"

    settings = manager.load()
    assert settings.ssh_password == "s3cret"
    assert settings.portainer_token == "ptr_abc"


def test_public_dict_masks_secrets(db_path):
    manager = SettingsManager()
    manager.update({"ssh_password": "s3cret"})

    public = manager.to_public_dict()
    assert public["ssh_password"] == SECRET_MASK
    assert public["portainer_token"] == ""
    assert public["host_ip"] == "172.17.0.1"


def test_masked_secret_echo_is_ignored(db_path):
    manager = SettingsManager()
    manager.update({"ssh_password": "s3cret"})
    manager.update({"ssh_password": SECRET_MASK, "host_ip": "10.0.0.9"})

    settings = manager.load()
    assert settings.ssh_password == "s3cret"
    assert settings.host_ip == "10.0.0.9"


def test_clearing_secret_removes_keyring_entry(db_path, memory_keyring):
    manager = SettingsManager()
    manager.update({"ssh_password": "s3cret"})
    manager.update({"ssh_password": ""})

    assert ("portboard", "ssh_password") not in memory_keyring
    assert manager.load().ssh_password is None


def test_plaintext_fallback_without_keyring_backend(db_path, monkeypatch):
    def no_backend(*args):
        raise NoKeyringError("No recommended backend")

    monkeypatch.setattr("portboard.config.keyring.set_password", no_backend)
    manager = SettingsManager()
    manager.update({"portainer_token": "ptr_abc"})

    assert manager.repo.get("portainer_token") == "ptr_abc"
    assert manager.load().portainer_token == "ptr_abc"


def test_unknown_keys_are_rejected(db_path):
    with pytest.raises(ValueError, match="jwt_secret"):
        SettingsManager().update({"jwt_secret": "x"})


def test_empty_strings_mean_unset():
    settings = Settings.from_mapping({
        "host_ip": " 10.0.0.5 ",
        "ssh_username": "root",
        "ssh_password": "",
        "ssh_key_path": "/root/.ssh/id_ed25519",
        "portainer_url": "",
        "ssh_port": "2222",
    })
    config = settings.ssh_config()

    assert config.host == "10.0.0.5"
    assert config.port == 2222
    assert config.password is None
    assert config.key_path == "/root/.ssh/id_ed25519"
    assert settings.portainer_url is None


def test_invalid_port_setting():
    with pytest.raises(ValueError, match="ssh_port"):
        Settings.from_mapping({"ssh_port": "twenty-two"})
