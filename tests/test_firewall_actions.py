"""Tests for the UFW mutation controller."""

import pytest

from portboard.actions.firewall import FirewallController, build_allow_command, build_delete_command
from portboard.connector.ssh import SSHConfig
from portboard.errors import CommandError
from portboard.model.ports import RuleId

CONFIG = SSHConfig(host="10.0.0.5", user="root", password="x")


def test_allow_any_has_no_protocol_suffix():
    assert build_allow_command(8080, "any") == "ufw allow 8080"


def test_allow_tcp_appends_protocol():
    assert build_allow_command(8080, "tcp") == "ufw allow 8080/tcp"
    assert build_allow_command(53, "UDP") == "ufw allow 53/udp"


@pytest.mark.parametrize("port", [0, 65536, -1])
def test_allow_rejects_invalid_ports(port):
    with pytest.raises(ValueError):
        build_allow_command(port, "tcp")


def test_allow_rejects_unknown_protocol():
    with pytest.raises(ValueError, match="Unsupported protocol"):
        build_allow_command(80, "icmp")


def test_delete_is_forced():
    assert build_delete_command(RuleId(3)) == "ufw --force delete 3"
    with pytest.raises(ValueError):
        build_delete_command(0)


def test_allow_runs_in_its_own_session(make_remote):
    remote = make_remote()
    FirewallController(CONFIG, remote).allow(8080, "tcp")

    assert remote.commands == ["ufw allow 8080/tcp"]
    assert remote.opened == remote.closed == 1
    assert remote.configs == [CONFIG]


def test_invalid_allow_never_connects(make_remote):
    remote = make_remote()
    with pytest.raises(ValueError):
        FirewallController(CONFIG, remote).allow(70000, "tcp")
    assert remote.opened == 0


def test_remove_runs_forced_delete(make_remote):
    remote = make_remote()
    FirewallController(CONFIG, remote).remove(RuleId(4))
    assert remote.commands == ["ufw --force delete 4"]


def test_command_failure_propagates_and_closes_session(make_remote):
    remote = make_remote({"ufw --force delete 9": CommandError("ufw --force delete 9", 1, "Could not delete")})

    with pytest.raises(CommandError):
        FirewallController(CONFIG, remote).remove(RuleId(9))
    assert remote.opened == remote.closed == 1


def test_remove_many_deletes_highest_first_in_one_session(make_remote):
    remote = make_remote()
    deleted = FirewallController(CONFIG, remote).remove_many([RuleId(2), RuleId(7), RuleId(4), RuleId(7)])

    assert deleted == [7, 4, 2]
    assert remote.commands == [
        "ufw --force delete 7",
        "ufw --force delete 4",
        "ufw --force delete 2",
    ]
    assert remote.opened == 1


def test_remove_many_stops_at_first_failure(make_remote):
    remote = make_remote({"ufw --force delete 4": CommandError("ufw --force delete 4", 1, "boom")})

    with pytest.raises(CommandError):
        FirewallController(CONFIG, remote).remove_many([RuleId(2), RuleId(4), RuleId(7)])
    assert remote.commands == ["ufw --force delete 7", "ufw --force delete 4"]
    assert remote.closed == 1


def test_remove_many_with_nothing_to_do(make_remote):
    remote = make_remote()
    assert FirewallController(CONFIG, remote).remove_many([]) == []
    assert remote.opened == 0
