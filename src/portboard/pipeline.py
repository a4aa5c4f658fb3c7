"""Port service - The operation surface used by the CLI and the web API.

IMPORTANT: This module only ORCHESTRATES. Parsing lives in the parsers,
merging in the engine, mutations in the actions.

Settings are read fresh at the start of every operation and each remote
call opens its own SSH session, so a PortService instance holds no
connection state and may be shared between threads.
"""

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

from portboard.actions.firewall import FirewallController
from portboard.config import Settings, SettingsManager
from portboard.connector.ssh import open_session
from portboard.engine.reconcile import ReconciliationEngine
from portboard.errors import ExternalServiceError
from portboard.model.ports import (
    ContainerSourceResult,
    FirewallRule,
    FirewallStatus,
    PortsView,
    Protocol,
    RuleId,
    SocketInventory,
    normalize_protocol,
    parse_port_number,
)
from portboard.scanner.firewall import FirewallScanner, SessionFactory
from portboard.scanner.network_surface import NetworkSurfaceScanner
from portboard.scanner.portainer import PortainerSource
from portboard.storage.repositories import CustomNameRepository

logger = logging.getLogger(__name__)


def select_rules_for_port(rules: list[FirewallRule], port: int, protocol: str) -> list[FirewallRule]:
    """Rules in a snapshot that keep `port`/`protocol` open.

    Blocking "any" removes every rule on the port; blocking tcp or udp
    removes rules for that protocol and rules that apply to both.
    IPv6 twins match like their IPv4 rule.
    """
    protocol = normalize_protocol(protocol)
    selected = []
    for rule in rules:
        if rule.numeric_port != port:
            continue
        if protocol == Protocol.ANY.value or rule.protocol in (protocol, Protocol.ANY.value):
            selected.append(rule)
    return selected


class PortService:
    """Lists, allows and blocks ports on the configured host."""

    def __init__(
        self,
        settings_manager: SettingsManager | None = None,
        custom_names: CustomNameRepository | None = None,
        session_factory: SessionFactory = open_session,
        container_source_factory: Callable[[Settings], PortainerSource] | None = None,
    ) -> None:
        self.settings_manager = settings_manager or SettingsManager()
        self.custom_names = custom_names or CustomNameRepository()
        self._session_factory = session_factory
        self._container_source_factory = container_source_factory or (
            lambda s: PortainerSource(s.portainer_url, s.portainer_token)
        )
        self._engine = ReconciliationEngine()

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    def list_ports(self) -> PortsView:
        """Fetch all three sources concurrently and reconcile them.

        Raises:
            ConfigurationError / RemoteExecutionError: If the socket or
                firewall query fails. Container API failures only add a warning.
        """
        settings = self.settings_manager.load()
        ssh_config = settings.ssh_config()
        firewall_scanner = FirewallScanner(ssh_config, self._session_factory)
        surface_scanner = NetworkSurfaceScanner(ssh_config, self._session_factory)
        container_source = self._container_source_factory(settings)

        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="port-scan") as pool:
            firewall_future = pool.submit(firewall_scanner.scan)
            sockets_future = pool.submit(surface_scanner.scan)
            containers_future = pool.submit(self._fetch_containers, container_source)

            # Wait for every source before raising, so no session is left behind
            containers: ContainerSourceResult = containers_future.result()
            firewall_error = firewall_future.exception()
            sockets_error = sockets_future.exception()

        if firewall_error is not None:
            raise firewall_error
        if sockets_error is not None:
            raise sockets_error
        firewall: FirewallStatus = firewall_future.result()
        inventory: SocketInventory = sockets_future.result()

        ports = self._engine.reconcile(
            inventory.sockets,
            firewall.rules,
            containers.mappings,
            self.custom_names.get_all(),
        )
        return PortsView(ufw_active=firewall.active, ports=ports, warnings=list(containers.warnings))

    def firewall_status(self) -> FirewallStatus:
        """Fresh UFW snapshot; rule ids are valid until the next mutation."""
        ssh_config = self.settings_manager.load().ssh_config()
        return FirewallScanner(ssh_config, self._session_factory).scan()

    @staticmethod
    def _fetch_containers(source: PortainerSource) -> ContainerSourceResult:
        try:
            return source.fetch()
        except ExternalServiceError as e:
            logger.warning("Failed to get Portainer containers: %s", e)
            return ContainerSourceResult(warnings=[str(e)])

    # =========================================================================
    # WRITE OPERATIONS - Modify the remote firewall
    # =========================================================================

    def _controller(self) -> FirewallController:
        ssh_config = self.settings_manager.load().ssh_config()
        return FirewallController(ssh_config, self._session_factory)

    def allow_port(self, port: int, protocol: str = Protocol.ANY.value) -> None:
        self._controller().allow(port, protocol)

    def remove_rule(self, rule_id: RuleId | int) -> None:
        """Delete one rule by id from the most recent status the caller saw."""
        self._controller().remove(RuleId(int(rule_id)))

    def block_port(self, port: int, protocol: str = Protocol.ANY.value) -> list[RuleId]:
        """Delete every rule that opens the port, using a fresh snapshot.

        Returns:
            Deleted rule ids (highest first). Empty if nothing matched.
        """
        number = parse_port_number(port)
        if number is None:
            raise ValueError(f"Invalid port: {port!r}")
        status = self.firewall_status()
        matching = select_rules_for_port(status.rules, number, protocol)
        if not matching:
            return []
        return self._controller().remove_many(rule.rule_id for rule in matching)

    # =========================================================================
    # LABELS
    # =========================================================================

    def set_custom_name(self, port: int, protocol: str, name: str | None) -> None:
        """Set a display label; an empty name removes it."""
        if parse_port_number(port) is None:
            raise ValueError(f"Invalid port: {port!r}")
        if name and name.strip():
            self.custom_names.set(port, protocol, name.strip())
        else:
            self.custom_names.delete(port, protocol)
