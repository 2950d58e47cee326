"""Linux distribution specific configurers and lookup by OS release data."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from k0sctl.configurer import CommandError, Host, LinuxConfigurer


@dataclass(frozen=True)
class OSVersion:
    """Identification of a host's operating system, as in os-release."""

    id: str
    id_like: str = ""
    name: str = ""
    version: str = ""


class UnsupportedOSError(Exception):
    """Raised when an operating system or an operation on it is not supported."""


Matcher = Callable[[OSVersion], bool]
Factory = Callable[[], Any]

_REGISTRY: list[tuple[Matcher, Factory]] = []


def register(matcher: Matcher, factory: Factory) -> Factory:
    """Register *factory* to build a configurer for systems *matcher* accepts."""
    _REGISTRY.append((matcher, factory))
    return factory


def resolve(os_version: OSVersion) -> Any:
    """Build the configurer of the first registered module matching *os_version*."""
    for matcher, factory in _REGISTRY:
        if matcher(os_version):
            return factory()
    raise UnsupportedOSError(
        f"os support module not found for {os_version.name or os_version.id}"
    )


class Alpine(LinuxConfigurer):
    """Alpine Linux."""

    def install_package(self, host: Host, *args: str) -> None:
        """Install packages with apk."""
        host.exec(f"apk add --update {' '.join(args)}", sudo=True)

    def prepare(self, host: Host) -> None:
        """Install the tools k0sctl expects to find on the host."""
        self.install_package(host, "findutils", "coreutils")


class Archlinux(LinuxConfigurer):
    """Arch Linux and derivatives."""


class CoreOS(LinuxConfigurer):
    """Ostree based Fedora and RHEL systems."""

    def install_package(self, host: Host, *args: str) -> None:
        raise UnsupportedOSError(
            "CoreOS does not support installing packages manually"
        )


class Debian(LinuxConfigurer):
    """Debian."""


class Ubuntu(Debian):
    """Ubuntu."""


class EnterpriseLinux(LinuxConfigurer):
    """Base for RHEL-like enterprise distributions."""


class Flatcar(LinuxConfigurer):
    """Flatcar Container Linux, where k0s lives under /opt/bin."""

    def __init__(self) -> None:
        super().__init__()
        self.set_path("K0sBinaryPath", "/opt/bin/k0s")

    def install_package(self, host: Host, *args: str) -> None:
        raise UnsupportedOSError(
            "FlatcarContainerLinux does not support installing packages manually"
        )


class SLES(LinuxConfigurer):
    """SUSE Linux Enterprise Server."""


class OpenSUSE(SLES):
    """openSUSE."""


class Slackware(LinuxConfigurer):
    """Slackware Linux."""

    def install_package(self, host: Host, *args: str) -> None:
        """Install packages with slackpkg."""
        update = host.sudo("slackpkg update")
        install = host.sudo(f"slackpkg install --priority ADD {' '.join(args)}")
        host.exec(f"{update} && {install}")


class AlmaLinux(EnterpriseLinux):
    """AlmaLinux."""


class AmazonLinux(EnterpriseLinux):
    """Amazon Linux."""

    def hostname(self, host: Host) -> str:
        """Return the full hostname, or an empty string if it cannot be read."""
        try:
            return host.exec_output("hostname")
        except CommandError:
            return ""


class CentOS(EnterpriseLinux):
    """CentOS."""


class Fedora(EnterpriseLinux):
    """Fedora."""


class OracleLinux(EnterpriseLinux):
    """Oracle Linux."""


class RHEL(EnterpriseLinux):
    """Red Hat Enterprise Linux."""


class RockyLinux(EnterpriseLinux):
    """Rocky Linux."""


def _is_coreos(v: OSVersion) -> bool:
    return "CoreOS" in v.name


register(lambda v: v.id == "alpine", Alpine)
register(lambda v: v.id == "arch" or v.id_like == "arch", Archlinux)
register(lambda v: _is_coreos(v) and v.id in ("fedora", "rhel"), CoreOS)
register(lambda v: v.id == "debian", Debian)
register(lambda v: v.id == "flatcar", Flatcar)
register(lambda v: v.id in ("opensuse", "opensuse-microos"), OpenSUSE)
register(lambda v: v.id == "slackware", Slackware)
register(lambda v: v.id == "sles", SLES)
register(lambda v: v.id == "ubuntu", Ubuntu)
register(lambda v: v.id == "almalinux", AlmaLinux)
register(lambda v: v.id == "amzn", AmazonLinux)
register(lambda v: v.id == "centos", CentOS)
register(lambda v: v.id == "fedora" and not _is_coreos(v), Fedora)
register(lambda v: v.id == "ol", OracleLinux)
register(lambda v: v.id == "rhel" and not _is_coreos(v), RHEL)
register(lambda v: v.id == "rocky", RockyLinux)