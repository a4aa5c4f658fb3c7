"""Network Surface Scanner - Collects listening sockets on the host."""

import logging

from portboard.connector.ssh import SSHConfig, open_session
from portboard.model.ports import SocketInventory
from portboard.parser.ss_listing import parse_ss_listing
from portboard.scanner.firewall import SessionFactory

logger = logging.getLogger(__name__)

SOCKET_LIST_COMMAND = "ss -tulpn"


class NetworkSurfaceScanner:
    """Scanner for live TCP/UDP listeners."""

    def __init__(self, config: SSHConfig, session_factory: SessionFactory = open_session) -> None:
        self.config = config
        self._session_factory = session_factory

    def scan(self) -> SocketInventory:
        """Collect listening TCP/UDP endpoints."""
        with self._session_factory(self.config) as session:
            output = session.execute(SOCKET_LIST_COMMAND)
        inventory = parse_ss_listing(output)
        if inventory.unmatched_lines:
            logger.debug("Skipped %d unrecognized ss lines", inventory.unmatched_lines)
        return inventory
