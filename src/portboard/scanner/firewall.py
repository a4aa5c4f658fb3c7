"""Firewall Scanner - Fetches the numbered UFW rule listing."""

import logging
from collections.abc import Callable
from contextlib import AbstractContextManager

from portboard.connector.ssh import SSHConfig, SSHSession, open_session
from portboard.model.ports import FirewallStatus
from portboard.parser.ufw_status import parse_ufw_status

logger = logging.getLogger(__name__)

UFW_STATUS_COMMAND = "ufw status numbered"

SessionFactory = Callable[[SSHConfig], AbstractContextManager[SSHSession]]


class FirewallScanner:
    """Scanner for UFW status and rules.

    Opens its own session per scan; rule ids in the result are only valid
    until the next mutation on the host.
    """

    def __init__(self, config: SSHConfig, session_factory: SessionFactory = open_session) -> None:
        self.config = config
        self._session_factory = session_factory

    def scan(self) -> FirewallStatus:
        with self._session_factory(self.config) as session:
            output = session.execute(UFW_STATUS_COMMAND)
        status = parse_ufw_status(output)
        if status.unmatched_lines:
            logger.debug("Skipped %d unrecognized ufw status lines", status.unmatched_lines)
        return status
