"""Reconciliation engine - Merges sockets, firewall rules and containers.

Each source is keyed by (port, protocol). The first source to mention a
key decides the entry's state; later sources only augment it:

1. listening sockets seed entries as OPEN_ON_HOST,
2. published tcp/udp container ports create OPEN_IN_CONTAINER entries or attach
   the container to an existing one (last container wins),
3. firewall rules create FIREWALL_ONLY entries or are appended to an
   existing one; protocol "any" applies to both tcp and udp and "(v6)"
   rules join the entry of their IPv4 twin,
4. custom names are attached, exact protocol first, then "any".

Inputs are never mutated. Output order is the order in which entries were
first created.
"""

from collections.abc import Iterable

from portboard.model.ports import (
    CONCRETE_PROTOCOLS,
    ContainerPortMapping,
    ContainerRef,
    CustomName,
    FirewallRule,
    ListeningSocket,
    PortKey,
    PortState,
    Protocol,
    UnifiedPortEntry,
)


class ReconciliationEngine:
    """Builds the unified port view from independently fetched sources."""

    def reconcile(
        self,
        sockets: Iterable[ListeningSocket],
        firewall_rules: Iterable[FirewallRule],
        container_mappings: Iterable[ContainerPortMapping],
        custom_names: Iterable[CustomName],
    ) -> list[UnifiedPortEntry]:
        entries: dict[PortKey, UnifiedPortEntry] = {}

        for sock in sockets:
            # IPv4 and IPv6 listeners on the same port collapse into one entry
            if sock.key not in entries:
                entries[sock.key] = UnifiedPortEntry(
                    port=sock.port,
                    protocol=sock.protocol,
                    state=PortState.OPEN_ON_HOST,
                    process=sock.process,
                )

        for mapping in container_mappings:
            if not mapping.public_port:
                continue
            protocol = (mapping.type or Protocol.TCP.value).lower()
            if protocol not in CONCRETE_PROTOCOLS:
                continue
            entry = self._get_or_create(
                entries, PortKey(mapping.public_port, protocol), PortState.OPEN_IN_CONTAINER
            )
            entry.container = ContainerRef(
                id=mapping.container_id,
                name=mapping.container_name,
                endpoint_name=mapping.endpoint_name,
            )

        for rule in firewall_rules:
            port = rule.numeric_port
            if port is None:
                continue
            for protocol in rule.protocols:
                entry = self._get_or_create(entries, PortKey(port, protocol), PortState.FIREWALL_ONLY)
                entry.firewall_rules.append(rule)

        labels = self._index_labels(custom_names)
        for entry in entries.values():
            entry.label = labels.get((entry.port, entry.protocol)) or labels.get(
                (entry.port, Protocol.ANY.value)
            )

        return list(entries.values())

    @staticmethod
    def _get_or_create(
        entries: dict[PortKey, UnifiedPortEntry], key: PortKey, state: PortState
    ) -> UnifiedPortEntry:
        entry = entries.get(key)
        if entry is None:
            entry = UnifiedPortEntry(port=key.port, protocol=key.protocol, state=state)
            entries[key] = entry
        return entry

    @staticmethod
    def _index_labels(custom_names: Iterable[CustomName]) -> dict[tuple[int, str], str]:
        index: dict[tuple[int, str], str] = {}
        for name in custom_names:
            if name.label:
                index[(name.port, name.protocol.lower())] = name.label
        return index


def reconcile(
    sockets: Iterable[ListeningSocket],
    firewall_rules: Iterable[FirewallRule],
    container_mappings: Iterable[ContainerPortMapping],
    custom_names: Iterable[CustomName],
) -> list[UnifiedPortEntry]:
    """Module-level shortcut for ReconciliationEngine().reconcile()."""
    return ReconciliationEngine().reconcile(sockets, firewall_rules, container_mappings, custom_names)
