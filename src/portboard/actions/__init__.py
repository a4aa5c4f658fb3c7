"""Actions package - Firewall mutations and terminal reports.

Each action declares its contract (read_only, idempotent) in its module
docstring.
"""

from portboard.actions.firewall import FirewallController, build_allow_command, build_delete_command
from portboard.actions.report import ReportAction

__all__ = ["FirewallController", "ReportAction", "build_allow_command", "build_delete_command"]
