"""Schema DDL and default values for the storage layer."""

SCHEMA_SETTINGS = """
CREATE TABLE IF NOT EXISTS settings (
    key TEXT PRIMARY KEY,
    value TEXT
);
"""

SCHEMA_CUSTOM_NAMES = """
CREATE TABLE IF NOT EXISTS custom_names (
    port INTEGER NOT NULL,
    protocol TEXT NOT NULL,
    name TEXT NOT NULL,
    PRIMARY KEY (port, protocol)
);
"""

ALL_SCHEMAS = [SCHEMA_SETTINGS, SCHEMA_CUSTOM_NAMES]

# Seeded on first start; existing values are never overwritten.
DEFAULT_SETTINGS: dict[str, str] = {
    "host_ip": "172.17.0.1",
    "ssh_port": "22",
    "ssh_username": "root",
    "ssh_password": "",
    "ssh_key_path": "/root/.ssh/id_rsa",
    "portainer_url": "http://localhost:9000",
    "portainer_token": "",
}
