"""portboard - Unified view of host ports, UFW rules and container bindings."""

__version__ = "1.0.0"
