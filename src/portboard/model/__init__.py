"""Model package - Core data structures for portboard."""

from portboard.model.ports import (
    ContainerPortMapping,
    ContainerRef,
    ContainerSourceResult,
    CustomName,
    FirewallRule,
    FirewallStatus,
    ListeningSocket,
    PortKey,
    PortState,
    PortsView,
    Protocol,
    RuleId,
    SocketInventory,
    UnifiedPortEntry,
)

__all__ = [
    "ContainerPortMapping",
    "ContainerRef",
    "ContainerSourceResult",
    "CustomName",
    "FirewallRule",
    "FirewallStatus",
    "ListeningSocket",
    "PortKey",
    "PortState",
    "PortsView",
    "Protocol",
    "RuleId",
    "SocketInventory",
    "UnifiedPortEntry",
]
