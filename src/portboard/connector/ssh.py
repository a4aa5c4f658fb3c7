"""SSH Connector - Short-lived sessions to the managed host.

Every logical operation (one status query, one mutation) opens its own
session and closes it on the way out. Sessions are plain values passed to
`execute` and `disconnect`; nothing is shared between callers.
"""

import io
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import paramiko
from paramiko.ssh_exception import AuthenticationException, SSHException

from portboard.errors import CommandError, ConfigurationError, RemoteConnectionError

logger = logging.getLogger(__name__)

# Key types tried in order when loading a private key file.
_KEY_CLASSES: tuple[type[paramiko.PKey], ...] = (
    paramiko.RSAKey,
    paramiko.Ed25519Key,
    paramiko.ECDSAKey,
)


@dataclass
class SSHConfig:
    """SSH connection configuration."""

    host: str
    user: str = "root"
    port: int = 22
    password: str | None = None  # Takes precedence over key_path
    key_path: str | None = None
    connect_timeout: float = 10.0
    command_timeout: float = 30.0


class SSHSession:
    """An open SSH session bound to one command sequence.

    Example:
        >>> with open_session(SSHConfig(host="10.0.0.5", password="s3cret")) as session:
        ...     print(session.execute("ufw status numbered"))
    """

    def __init__(self, config: SSHConfig, client: paramiko.SSHClient) -> None:
        self.config = config
        self._client: paramiko.SSHClient | None = client

    @property
    def closed(self) -> bool:
        return self._client is None

    def execute(self, command: str) -> str:
        """Run a command and return its stdout.

        Raises:
            CommandError: If the command exits non-zero.
            RemoteConnectionError: If the session is closed or the channel fails.
        """
        if self._client is None:
            raise RemoteConnectionError("Not connected to SSH")

        logger.debug("Executing on %s: %s", self.config.host, command)
        try:
            _stdin, stdout, stderr = self._client.exec_command(
                command, timeout=self.config.command_timeout
            )
            out = stdout.read().decode("utf-8", errors="replace")
            err = stderr.read().decode("utf-8", errors="replace")
            exit_code = stdout.channel.recv_exit_status()
        except (SSHException, OSError) as e:
            raise RemoteConnectionError(f"SSH execution error on {self.config.host}: {e}") from e

        if exit_code != 0:
            # ufw writes some failures to stdout, others to stderr
            raise CommandError(command, exit_code, err if err.strip() else out)
        return out

    def close(self) -> None:
        """Close the session. Safe to call more than once."""
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> "SSHSession":
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


def _load_private_key(key_path: str) -> paramiko.PKey:
    path = Path(key_path).expanduser()
    try:
        key_text = path.read_text()
    except OSError as e:
        raise ConfigurationError(f"Failed to read SSH key at {key_path}") from e

    for key_class in _KEY_CLASSES:
        try:
            return key_class.from_private_key(io.StringIO(key_text))
        except SSHException:
            continue
    raise ConfigurationError(f"Unsupported or encrypted SSH key at {key_path}")


def _auth_kwargs(config: SSHConfig) -> dict[str, Any]:
    if not config.host or not config.user:
        raise ConfigurationError("SSH settings incomplete: Host IP and Username are required")
    if config.password:
        return {"password": config.password, "look_for_keys": False, "allow_agent": False}
    if config.key_path:
        return {"pkey": _load_private_key(config.key_path), "look_for_keys": False, "allow_agent": False}
    raise ConfigurationError("SSH settings incomplete: Password or Key Path missing")


def connect(config: SSHConfig) -> SSHSession:
    """Open a new SSH session.

    Credentials are resolved before any network activity: password first,
    then private key file, otherwise the call fails fast.

    Raises:
        ConfigurationError: Missing host/username/credentials or unreadable key.
        RemoteConnectionError: Handshake, authentication or timeout failure.
    """
    auth = _auth_kwargs(config)

    client = paramiko.SSHClient()
    client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
    try:
        client.connect(
            hostname=config.host,
            port=config.port,
            username=config.user,
            timeout=config.connect_timeout,
            banner_timeout=config.connect_timeout,
            auth_timeout=config.connect_timeout,
            **auth,
        )
    except AuthenticationException as e:
        client.close()
        raise RemoteConnectionError(f"Authentication failed: {e}") from e
    except (SSHException, OSError) as e:
        client.close()
        raise RemoteConnectionError(f"SSH error: {e}") from e

    logger.debug("SSH session opened to %s@%s:%s", config.user, config.host, config.port)
    return SSHSession(config, client)


def execute(session: SSHSession, command: str) -> str:
    """Run `command` on `session` and return stdout."""
    return session.execute(command)


def disconnect(session: SSHSession) -> None:
    """Release `session`."""
    session.close()


@contextmanager
def open_session(config: SSHConfig) -> Iterator[SSHSession]:
    """Connect, yield the session and always disconnect afterwards."""
    session = connect(config)
    try:
        yield session
    finally:
        disconnect(session)
