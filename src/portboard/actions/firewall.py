"""Firewall Action - Allow ports and delete numbered UFW rules.

CONTRACT:
- read_only: False (MODIFIES SERVER)
- idempotent: False (never retried automatically)
- rule ids: positional, valid only against the latest status snapshot

⚠️  WARNING: This action modifies the remote firewall!

Deleting rule N renumbers every rule after it. `remove_many` therefore
deletes in descending id order inside one session, so each pending id
still points at the rule it pointed at when the snapshot was taken.
Concurrent mutations from other callers are not serialized.
"""

import logging
from collections.abc import Iterable

from portboard.connector.ssh import SSHConfig, open_session
from portboard.model.ports import Protocol, RuleId, normalize_protocol, parse_port_number
from portboard.scanner.firewall import SessionFactory

logger = logging.getLogger(__name__)


def build_allow_command(port: int, protocol: str = Protocol.ANY.value) -> str:
    """Build `ufw allow <port>[/<protocol>]`.

    Raises:
        ValueError: If the port or protocol is invalid.
    """
    number = parse_port_number(port)
    if number is None:
        raise ValueError(f"Invalid port: {port!r}")
    protocol = normalize_protocol(protocol)
    suffix = "" if protocol == Protocol.ANY.value else f"/{protocol}"
    return f"ufw allow {number}{suffix}"


def build_delete_command(rule_id: RuleId | int) -> str:
    """Build a forced, non-interactive `ufw delete`."""
    if isinstance(rule_id, bool) or int(rule_id) < 1:
        raise ValueError(f"Invalid rule id: {rule_id!r}")
    return f"ufw --force delete {int(rule_id)}"


class FirewallController:
    """Issues UFW mutations, one SSH session per call."""

    def __init__(self, config: SSHConfig, session_factory: SessionFactory = open_session) -> None:
        self.config = config
        self._session_factory = session_factory

    def allow(self, port: int, protocol: str = Protocol.ANY.value) -> None:
        """Add an allow rule for the port.

        Raises:
            ValueError: Invalid port or protocol (raised before connecting).
            RemoteExecutionError: Connection or command failure.
        """
        command = build_allow_command(port, protocol)
        with self._session_factory(self.config) as session:
            session.execute(command)
        logger.info("Allowed %s on %s", command.removeprefix("ufw allow "), self.config.host)

    def remove(self, rule_id: RuleId) -> None:
        """Delete one rule by its positional id.

        Raises:
            ValueError: Invalid rule id (raised before connecting).
            RemoteExecutionError: Connection or command failure.
        """
        command = build_delete_command(rule_id)
        with self._session_factory(self.config) as session:
            session.execute(command)
        logger.info("Deleted ufw rule %s on %s", rule_id, self.config.host)

    def remove_many(self, rule_ids: Iterable[RuleId]) -> list[RuleId]:
        """Delete several rules from the same snapshot.

        Ids are deduplicated and deleted highest first. Stops at the first
        failure, leaving the remaining (lower) ids still valid.

        Returns:
            The ids deleted, in deletion order.
        """
        ordered = sorted({RuleId(int(r)) for r in rule_ids}, reverse=True)
        commands = [build_delete_command(rule_id) for rule_id in ordered]
        if not commands:
            return []

        with self._session_factory(self.config) as session:
            for rule_id, command in zip(ordered, commands):
                session.execute(command)
                logger.info("Deleted ufw rule %s on %s", rule_id, self.config.host)
        return ordered
