"""Error types raised by portboard.

Parsers never raise: unrecognized tool output is skipped and counted.
Everything that talks to a remote host or API raises one of these.
"""


class PortboardError(Exception):
    """Base class for all portboard errors."""


class ConfigurationError(PortboardError):
    """Host, username or credential material is missing or unreadable."""


class RemoteExecutionError(PortboardError):
    """Base for failures while talking to the remote host over SSH."""


class RemoteConnectionError(RemoteExecutionError, ConnectionError):
    """Transport, authentication or timeout failure on the SSH channel."""


class CommandError(RemoteExecutionError):
    """A remote command exited with a non-zero status."""

    def __init__(self, command: str, exit_code: int, output: str) -> None:
        self.command = command
        self.exit_code = exit_code
        self.output = output
        detail = output.strip() or "no output"
        super().__init__(f"Command failed with code {exit_code}: {detail}")


class ExternalServiceError(PortboardError):
    """The container management API could not be queried."""
