"""Socket listing parser - Structures `ss -tulpn` output.

Example input:

    Netid State  Recv-Q Send-Q Local Address:Port Peer Address:Port Process
    tcp   LISTEN 0      4096   0.0.0.0:80         0.0.0.0:*         users:(("nginx",pid=123,fd=4))
    udp   UNCONN 0      0      127.0.0.53%lo:53   0.0.0.0:*         users:(("systemd-resolve",pid=99,fd=13))
"""

from portboard.model.ports import ListeningSocket, SocketInventory, parse_port_number

LISTENING_STATES = {"LISTEN", "UNCONN"}
MIN_FIELDS = 6

# Column positions in ss output
_PROTO, _STATE, _LOCAL = 0, 1, 4
_PROCESS_START = 6


def parse_ss_listing(output: str) -> SocketInventory:
    """Parse the socket inventory into listening sockets."""
    inventory = SocketInventory()

    for raw in output.splitlines():
        line = raw.strip()
        if not line or line.startswith("Netid"):
            continue

        parts = line.split()
        if len(parts) < MIN_FIELDS:
            inventory.unmatched_lines += 1
            continue

        protocol = parts[_PROTO].lower()
        if protocol not in ("tcp", "udp"):
            inventory.unmatched_lines += 1
            continue

        if parts[_STATE] not in LISTENING_STATES:
            continue

        address, sep, port_token = parts[_LOCAL].rpartition(":")
        port = parse_port_number(port_token) if sep else None
        if port is None:
            inventory.unmatched_lines += 1
            continue

        process = " ".join(parts[_PROCESS_START:]) or None
        inventory.sockets.append(
            ListeningSocket(protocol=protocol, port=port, process=process, local_address=address)
        )

    return inventory
