"""Generation of a starter cluster configuration from host addresses."""

from __future__ import annotations

from dataclasses import dataclass, field

import yaml

API_VERSION = "k0sctl.k0sproject.io/v1beta1"
DEFAULT_SSH_PORT = 22
DEFAULT_SSH_USER = "root"
DEFAULT_CLUSTER_NAME = "k0s-cluster"

# Close to what "k0s default-config" prints.
DEFAULT_K0S_YAML = """\
apiVersion: k0s.k0sproject.io/v1beta1
kind: Cluster
metadata:
  name: k0s
spec:
  api:
    port: 6443
    k0sApiPort: 9443
  storage:
    type: etcd
  network:
    podCIDR: 10.244.0.0/16
    serviceCIDR: 10.96.0.0/12
    provider: kuberouter
    kuberouter:
      mtu: 0
      peerRouterIPs: ""
      peerRouterASNs: ""
      autoMTU: true
    kubeProxy:
      disabled: false
      mode: iptables
  podSecurityPolicy:
    defaultPolicy: 00-k0s-privileged
  telemetry:
    enabled: true
  installConfig:
    users:
      etcdUser: etcd
      kineUser: kube-apiserver
      konnectivityUser: konnectivity-server
      kubeAPIserverUser: kube-apiserver
      kubeSchedulerUser: kube-scheduler
  konnectivity:
    agentPort: 8132
    adminPort: 8133
"""


@dataclass
class SSHConnection:
    """SSH connection settings of a host."""

    address: str
    port: int = DEFAULT_SSH_PORT
    user: str = DEFAULT_SSH_USER
    key_path: str | None = None


@dataclass
class InitHost:
    """A host entry in a generated configuration."""

    ssh: SSHConnection
    role: str = "worker"


class HostList(list):
    """A list of hosts with role based selection."""

    def controllers(self) -> HostList:
        return HostList(h for h in self if h.role != "worker")

    def workers(self) -> HostList:
        return HostList(h for h in self if h.role == "worker")

    def first(self) -> InitHost | None:
        return self[0] if self else None


def host_from_address(
    addr: str, role: str = "", user: str = "", key_path: str = ""
) -> InitHost:
    """Build a host from ``[user@]address[:port]``."""
    port = DEFAULT_SSH_PORT

    at = addr.find("@")
    if at > 0:
        user = addr[:at]
        addr = addr[at + 1 :]

    colon = addr.find(":")
    if colon > 0:
        try:
            port = int(addr[colon + 1 :])
        except ValueError:
            pass
        addr = addr[:colon]

    return InitHost(
        ssh=SSHConnection(
            address=addr,
            port=port,
            user=user or DEFAULT_SSH_USER,
            key_path=key_path or None,
        ),
        role=role or "worker",
    )


def default_hosts() -> HostList:
    """Return the example hosts used when no addresses are given."""
    return HostList(
        [
            InitHost(ssh=SSHConnection(address="10.0.0.1"), role="controller"),
            InitHost(ssh=SSHConnection(address="10.0.0.2"), role="worker"),
        ]
    )


def build_hosts(
    addresses, controller_count: int = 1, user: str = "", key_path: str = ""
) -> HostList:
    """Build hosts from address lines; the first *controller_count* are controllers.

    Empty lines and comments are skipped. Falls back to :func:`default_hosts`.
    """
    hosts = HostList()
    role = "controller"
    for line in addresses:
        hash_at = line.find("#")
        if hash_at > 0:
            line = line[:hash_at]
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if len(hosts) >= controller_count:
            role = "worker"
        hosts.append(host_from_address(line, role, user, key_path))

    return hosts or default_hosts()


def _host_dict(host: InitHost) -> dict:
    ssh = {"address": host.ssh.address, "user": host.ssh.user, "port": host.ssh.port}
    if host.ssh.key_path is not None:
        ssh["keyPath"] = host.ssh.key_path
    return {"ssh": ssh, "role": host.role}


def render_config(
    hosts, cluster_name: str = DEFAULT_CLUSTER_NAME, include_k0s: bool = False
) -> str:
    """Render a cluster configuration document as YAML."""
    spec: dict = {"hosts": [_host_dict(h) for h in hosts]}
    if include_k0s:
        spec["k0s"] = {"config": yaml.safe_load(DEFAULT_K0S_YAML)}
    document = {
        "apiVersion": API_VERSION,
        "kind": "Cluster",
        "metadata": {"name": cluster_name},
        "spec": spec,
    }
    return yaml.safe_dump(document, sort_keys=False, default_flow_style=False)