"""Connector package - SSH access to the managed host."""

from portboard.connector.ssh import SSHConfig, SSHSession, connect, disconnect, execute, open_session

__all__ = ["SSHConfig", "SSHSession", "connect", "disconnect", "execute", "open_session"]
