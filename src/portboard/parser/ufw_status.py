"""UFW status parser - Structures `ufw status numbered` output.

Example input:

    Status: active

         To                         Action      From
         --                         ------      ----
    [ 1] 22/tcp                     ALLOW IN    Anywhere
    [ 2] 80                         ALLOW IN    Anywhere
    [ 3] 22/tcp (v6)                ALLOW IN    Anywhere (v6)

IPv6 twins of a rule carry their own id and are kept with `v6` set.
Only rules on a single numeric port are kept. Everything else is skipped
and counted in `unmatched_lines` so format drift across ufw versions can
be noticed without failing the whole query.
"""

import re

from portboard.model.ports import FirewallRule, FirewallStatus, Protocol, RuleId, parse_port_number

ACTIVE_MARKER = "Status: active"

PROTOCOL_VALUES = frozenset(p.value for p in Protocol)

RULE_PATTERN = re.compile(r"^\[\s*(\d+)\]\s+(\S+)(\s+\(v6\))?\s+([A-Z]+(?: [A-Z]+)*)\s+(.*)$")


def _is_chrome(line: str) -> bool:
    """Header, separator and status lines that never carry a rule."""
    lower = line.lower()
    return (
        lower.startswith("status:")
        or lower.startswith("to ")
        or line.startswith("--")
    )


def parse_rule_line(line: str) -> FirewallRule | None:
    """Parse one numbered rule line, or return None if it is not a usable rule."""
    match = RULE_PATTERN.match(line.strip())
    if not match:
        return None

    rule_number, token, v6_marker, action, source = match.groups()
    port, _, protocol = token.partition("/")
    if parse_port_number(port) is None:
        return None

    protocol = protocol.lower() or Protocol.ANY.value
    if protocol not in PROTOCOL_VALUES:
        return None

    return FirewallRule(
        rule_id=RuleId(int(rule_number)),
        port=port,
        protocol=protocol,
        action=action.strip(),
        source=source.strip(),
        v6=v6_marker is not None,
    )


def parse_ufw_status(output: str) -> FirewallStatus:
    """Parse the full status output into a FirewallStatus."""
    status = FirewallStatus()

    for raw in output.splitlines():
        line = raw.strip()
        if ACTIVE_MARKER in line:
            status.active = True
        if not line or _is_chrome(line):
            continue

        rule = parse_rule_line(line)
        if rule is None:
            status.unmatched_lines += 1
            continue
        status.rules.append(rule)

    return status
