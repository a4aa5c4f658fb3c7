"""Parser package - Converts raw tool output into structured records.

Parsers do NOT run commands and never raise on unrecognized lines.
"""

from portboard.parser.ss_listing import parse_ss_listing
from portboard.parser.ufw_status import parse_ufw_status

__all__ = ["parse_ss_listing", "parse_ufw_status"]
