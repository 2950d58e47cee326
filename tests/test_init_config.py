import yaml
import pytest

from k0sctl.init_config import (
    HostList,
    InitHost,
    SSHConnection,
    build_hosts,
    default_hosts,
    host_from_address,
    render_config,
)


def test_build_hosts():
    addresses = ["10.0.0.1", "", "10.0.0.2", "10.0.0.3"]
    hosts = build_hosts(addresses, 1, "test", "foo")
    assert len(hosts) == 3
    assert len(hosts.controllers()) == 1
    assert len(hosts.workers()) == 2
    assert hosts.first().ssh.user == "test"
    assert hosts.first().ssh.key_path == "foo"

    hosts = build_hosts(addresses, 2, "", "")
    assert len(hosts) == 3
    assert len(hosts.controllers()) == 2
    assert len(hosts.workers()) == 1
    assert hosts.first().ssh.user == "root"
    assert hosts.first().ssh.key_path is None


def test_build_hosts_with_comments():
    addresses = [
        "# controllers",
        "10.0.0.1",
        "# workers",
        "10.0.0.2# second worker",
        "10.0.0.3 # last worker",
    ]
    hosts = build_hosts(addresses, 1, "", "")
    assert len(hosts) == 3
    assert len(hosts.controllers()) == 1
    assert len(hosts.workers()) == 2
    assert [h.ssh.address for h in hosts] == ["10.0.0.1", "10.0.0.2", "10.0.0.3"]


def test_build_hosts_empty_falls_back_to_defaults():
    hosts = build_hosts(["", "# nothing"], 1)
    assert [h.ssh.address for h in hosts] == ["10.0.0.1", "10.0.0.2"]
    assert [h.role for h in hosts] == ["controller", "worker"]


def test_default_hosts_are_fresh_copies():
    first = default_hosts()
    first[0].ssh.address = "changed"
    assert default_hosts()[0].ssh.address == "10.0.0.1"


@pytest.mark.parametrize(
    "addr, address, user, port",
    [
        ("10.0.0.5", "10.0.0.5", "root", 22),
        ("admin@10.0.0.5", "10.0.0.5", "admin", 22),
        ("admin@10.0.0.5:2222", "10.0.0.5", "admin", 2222),
        ("node:abc", "node", "root", 22),
    ],
)
def test_host_from_address(addr, address, user, port):
    host = host_from_address(addr, "", "", "")
    assert host.ssh.address == address
    assert host.ssh.user == user
    assert host.ssh.port == port
    assert host.role == "worker"


def test_host_from_address_user_in_address_wins():
    host = host_from_address("ops@h1", "controller", "other", "/keys/id")
    assert host.ssh.user == "ops"
    assert host.role == "controller"
    assert host.ssh.key_path == "/keys/id"


def test_host_list_first_empty():
    assert HostList().first() is None


def test_render_config_round_trip():
    hosts = HostList([InitHost(ssh=SSHConnection(address="1.2.3.4", key_path="k"), role="controller")])
    doc = yaml.safe_load(render_config(hosts, "demo", False))
    assert doc["apiVersion"] == "k0sctl.k0sproject.io/v1beta1"
    assert doc["kind"] == "Cluster"
    assert doc["metadata"] == {"name": "demo"}
    assert doc["spec"]["hosts"] == [
        {"ssh": {"address": "1.2.3.4", "user": "root", "port": 22, "keyPath": "k"}, "role": "controller"}
    ]
    assert "k0s" not in doc["spec"]


def test_render_config_with_k0s():
    doc = yaml.safe_load(render_config(default_hosts(), "k0s-cluster", True))
    config = doc["spec"]["k0s"]["config"]
    assert config["spec"]["api"]["port"] == 6443
    assert config["spec"]["podSecurityPolicy"]["defaultPolicy"] == "00-k0s-privileged"
    assert "keyPath" not in doc["spec"]["hosts"][0]["ssh"]