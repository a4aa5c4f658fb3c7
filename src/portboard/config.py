"""Configuration management for the managed host and the container API.

Plain values live in the SQLite settings table. Secrets (SSH password,
Portainer token) go to the OS keyring when a backend is available; the
table then only holds a marker.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import keyring
from keyring.errors import KeyringError

from portboard.connector.ssh import SSHConfig
from portboard.storage.models import DEFAULT_SETTINGS
from portboard.storage.repositories import SettingsRepository

logger = logging.getLogger(__name__)

KEYRING_MARKER = "__keyring__"
SECRET_MASK = "********"
SECRET_KEYS = frozenset({"ssh_password", "portainer_token"})
KNOWN_KEYS = frozenset(DEFAULT_SETTINGS)


@dataclass
class Settings:
    """Settings snapshot read at the start of an operation."""

    host_ip: str = ""
    ssh_port: int = 22
    ssh_username: str = ""
    ssh_password: str | None = None
    ssh_key_path: str | None = None
    portainer_url: str | None = None
    portainer_token: str | None = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Settings":
        """Build from raw key/values; empty strings mean unset."""

        def opt(key: str) -> str | None:
            value = values.get(key)
            if value is None:
                return None
            return str(value).strip() or None

        try:
            ssh_port = int(values.get("ssh_port") or 22)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid ssh_port: {values.get('ssh_port')!r}") from None

        return cls(
            host_ip=opt("host_ip") or "",
            ssh_port=ssh_port,
            ssh_username=opt("ssh_username") or "",
            ssh_password=opt("ssh_password"),
            ssh_key_path=opt("ssh_key_path"),
            portainer_url=opt("portainer_url"),
            portainer_token=opt("portainer_token"),
        )

    def ssh_config(self) -> SSHConfig:
        return SSHConfig(
            host=self.host_ip,
            user=self.ssh_username,
            port=self.ssh_port,
            password=self.ssh_password,
            key_path=self.ssh_key_path,
        )


class SettingsManager:
    """Reads and writes settings with keyring-backed secrets."""

    def __init__(self, repo: SettingsRepository | None = None, service_id: str = "portboard") -> None:
        self.repo = repo or SettingsRepository()
        self.service_id = service_id

    def raw(self) -> dict[str, str]:
        """All settings with secrets resolved."""
        values = self.repo.get_all()
        for key in SECRET_KEYS:
            if values.get(key) == KEYRING_MARKER:
                values[key] = self._read_secret(key) or ""
        return values

    def load(self) -> Settings:
        return Settings.from_mapping(self.raw())

    def update(self, values: Mapping[str, Any]) -> None:
        """Persist a batch of settings.

        Raises:
            ValueError: If a key is not a known setting.
        """
        unknown = sorted(set(values) - KNOWN_KEYS)
        if unknown:
            raise ValueError(f"Unknown setting(s): {', '.join(unknown)}")

        for key, value in values.items():
            text = "" if value is None else str(value)
            if key in SECRET_KEYS and text == SECRET_MASK:
                continue  # unchanged secret echoed back by a client
            if key in SECRET_KEYS and text:
                text = self._store_secret(key, text)
            elif key in SECRET_KEYS:
                self._clear_secret(key)
            self.repo.set(key, text)

    def to_public_dict(self) -> dict[str, str]:
        """Settings for display, with secrets masked."""
        values = self.repo.get_all()
        for key in SECRET_KEYS:
            if values.get(key):
                values[key] = SECRET_MASK
        return values

    def _store_secret(self, key: str, value: str) -> str:
        try:
            keyring.set_password(self.service_id, key, value)
            return KEYRING_MARKER
        except KeyringError:
            # Headless hosts often have no keyring backend
            logger.warning("No keyring backend available, storing %s in the settings table", key)
            return value

    def _read_secret(self, key: str) -> str | None:
        try:
            return keyring.get_password(self.service_id, key)
        except KeyringError:
            logger.warning("Could not read %s from keyring", key)
            return None

    def _clear_secret(self, key: str) -> None:
        if self.repo.get(key) != KEYRING_MARKER:
            return
        try:
            keyring.delete_password(self.service_id, key)
        except KeyringError:
            logger.debug("No keyring entry to delete for %s", key)
