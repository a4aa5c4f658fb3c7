"""Scanner package - Data collection from the host and the container API.

Scanners run commands or API calls and hand raw output to the parsers.
They do NOT merge or reason - that's the engine's job.
"""

from portboard.scanner.firewall import FirewallScanner
from portboard.scanner.network_surface import NetworkSurfaceScanner
from portboard.scanner.portainer import PortainerSource

__all__ = ["FirewallScanner", "NetworkSurfaceScanner", "PortainerSource"]
