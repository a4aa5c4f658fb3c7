"""Port model dataclasses - Records produced by parsers and the reconciler."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, NewType


class Protocol(str, Enum):
    """Transport protocol of a port, firewall rule or custom name."""

    TCP = "tcp"
    UDP = "udp"
    ANY = "any"


# Protocols a derived entry can carry. "any" only ever appears on rules
# and custom names and is expanded at lookup time.
CONCRETE_PROTOCOLS: tuple[str, ...] = (Protocol.TCP.value, Protocol.UDP.value)


class PortState(Enum):
    """Which source first reported a reconciled port."""

    OPEN_ON_HOST = "open on host"
    OPEN_IN_CONTAINER = "open in container"
    FIREWALL_ONLY = "firewall only"


# Positional index from one `ufw status numbered` snapshot. Any insertion
# or deletion on the host invalidates it, so it must never be cached.
RuleId = NewType("RuleId", int)


def normalize_protocol(value: str | None) -> str:
    """Lowercase a protocol token, mapping empty values to "any".

    Raises:
        ValueError: If the token is not tcp, udp or any.
    """
    if not value:
        return Protocol.ANY.value
    lowered = value.strip().lower()
    try:
        return Protocol(lowered).value
    except ValueError:
        raise ValueError(f"Unsupported protocol: {value!r}") from None


def parse_port_number(token: str | int | None) -> int | None:
    """Return the token as a port number, or None when it is not one."""
    if isinstance(token, int):
        return token if 1 <= token <= 65535 else None
    if token is None:
        return None
    text = token.strip()
    if not text.isdigit():
        return None
    port = int(text)
    return port if 1 <= port <= 65535 else None


@dataclass(frozen=True)
class PortKey:
    """Identity of a reconciled entry."""

    port: int
    protocol: str  # tcp or udp


@dataclass
class ListeningSocket:
    """A LISTEN (tcp) or UNCONN (udp) row of the socket inventory."""

    protocol: str
    port: int
    process: str | None = None  # users:(("nginx",pid=123,fd=4))
    local_address: str = ""  # 0.0.0.0, [::], 127.0.0.53%lo

    @property
    def key(self) -> PortKey:
        return PortKey(self.port, self.protocol)


@dataclass
class SocketInventory:
    """Parsed socket listing plus the count of lines that were not understood."""

    sockets: list[ListeningSocket] = field(default_factory=list)
    unmatched_lines: int = 0


@dataclass
class FirewallRule:
    """A single numbered UFW rule.

    `rule_id` is only meaningful against the status snapshot it came from.
    """

    rule_id: RuleId
    port: str  # raw token: "22", "6000:6007", "OpenSSH"
    protocol: str = Protocol.ANY.value
    action: str = ""  # ALLOW IN, DENY IN, LIMIT IN
    source: str = ""  # Anywhere, 10.0.0.0/8, Anywhere (v6)
    v6: bool = False  # "(v6)" twin that ufw adds for IPv6

    @property
    def numeric_port(self) -> int | None:
        return parse_port_number(self.port)

    @property
    def protocols(self) -> tuple[str, ...]:
        """Concrete protocols this rule applies to."""
        if self.protocol == Protocol.ANY.value:
            return CONCRETE_PROTOCOLS
        return (self.protocol,)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": int(self.rule_id),
            "to": self.port,
            "protocol": self.protocol,
            "action": self.action,
            "from": self.source,
            "v6": self.v6,
        }


@dataclass
class FirewallStatus:
    """Parsed `ufw status numbered` output."""

    active: bool = False
    rules: list[FirewallRule] = field(default_factory=list)
    unmatched_lines: int = 0


@dataclass
class ContainerPortMapping:
    """One published (or merely exposed) port of a container."""

    container_id: str
    container_name: str
    endpoint_id: int
    endpoint_name: str
    private_port: int | None
    public_port: int | None = None  # None when not published on the host
    type: str = Protocol.TCP.value
    ip: str | None = None
    container_state: str | None = None


@dataclass
class ContainerSourceResult:
    """Container mappings plus one warning per endpoint that was skipped."""

    mappings: list[ContainerPortMapping] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class CustomName:
    """User-chosen display label for a port."""

    port: int
    protocol: str  # tcp, udp or any
    label: str


@dataclass
class ContainerRef:
    """Container that publishes a reconciled port."""

    id: str
    name: str
    endpoint_name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "endpoint": self.endpoint_name}


@dataclass
class UnifiedPortEntry:
    """Reconciled state of one (port, protocol) pair."""

    port: int
    protocol: str
    state: PortState
    process: str | None = None
    container: ContainerRef | None = None
    firewall_rules: list[FirewallRule] = field(default_factory=list)
    label: str | None = None

    @property
    def key(self) -> PortKey:
        return PortKey(self.port, self.protocol)

    def to_dict(self) -> dict[str, Any]:
        return {
            "port": self.port,
            "protocol": self.protocol,
            "state": self.state.value,
            "process": self.process,
            "docker": self.container.to_dict() if self.container else None,
            "ufwRules": [rule.to_dict() for rule in self.firewall_rules],
            "customName": self.label,
        }


@dataclass
class PortsView:
    """Result of a full list operation."""

    ufw_active: bool
    ports: list[UnifiedPortEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "ufwActive": self.ufw_active,
            "ports": [entry.to_dict() for entry in self.ports],
            "warnings": list(self.warnings),
        }
