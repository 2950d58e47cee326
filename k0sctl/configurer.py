"""Base Linux host configuration: paths and shell commands run on a host."""

from __future__ import annotations

import posixpath
import re
import shlex
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from packaging.version import InvalidVersion, Version

SBIN_PATH = "PATH=/usr/local/sbin:/usr/sbin:/sbin:$PATH"

_TRAILING_NUMBER = re.compile(r"(\d+)$")
_DEV_NAME = re.compile(r"\bdev (\w+)", re.ASCII)

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "aarch64": "arm64",
    "armv7l": "arm",
    "armv8l": "arm",
    "aarch32": "arm",
    "arm32": "arm",
    "armhfp": "arm",
    "arm-32": "arm",
}


class CommandError(Exception):
    """Raised when a command run on a host fails."""

    def __init__(self, message: str, exit_code: int | None = None) -> None:
        super().__init__(message)
        self.exit_code = exit_code


class Host(ABC):
    """A remote machine that commands can be run on.

    Implementations raise :class:`CommandError` when a command fails and
    return command output with surrounding whitespace trimmed.
    """

    @abstractmethod
    def exec_output(
        self, command: str, sudo: bool = False, stdin: str | None = None
    ) -> str:
        """Run *command* and return its output."""

    def exec(self, command: str, sudo: bool = False, stdin: str | None = None) -> None:
        """Run *command*, discarding its output."""
        self.exec_output(command, sudo=sudo, stdin=stdin)

    def sudo(self, command: str) -> str:
        """Return *command* wrapped to run with elevated privileges."""
        return f"sudo -- {command}"

    def __str__(self) -> str:
        return type(self).__name__


def trailing_number(text: str) -> int | None:
    """Return the integer at the very end of *text*, or None."""
    match = _TRAILING_NUMBER.search(text)
    return int(match.group(1)) if match else None


class LinuxConfigurer:
    """Common operations for configuring Linux hosts."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._paths = {
            "K0sBinaryPath": "/usr/local/bin/k0s",
            "K0sConfigPath": "/etc/k0s/k0s.yaml",
            "K0sJoinTokenPath": "/etc/k0s/k0stoken",
            "DataDirDefaultPath": "/var/lib/k0s",
        }

    def _path(self, key: str) -> str:
        with self._lock:
            return self._paths[key]

    def k0s_binary_path(self) -> str:
        return self._path("K0sBinaryPath")

    def k0s_config_path(self) -> str:
        return self._path("K0sConfigPath")

    def k0s_join_token_path(self) -> str:
        return self._path("K0sJoinTokenPath")

    def data_dir_default_path(self) -> str:
        return self._path("DataDirDefaultPath")

    def set_path(self, key: str, value: str) -> None:
        """Override the path stored under *key*."""
        with self._lock:
            self._paths[key] = value

    def arch(self, host: Host) -> str:
        """Return the host architecture in the naming k0s uses."""
        machine = host.exec_output("uname -m")
        return _ARCH_ALIASES.get(machine, machine)

    def k0s_cmdf(self, command: str) -> str:
        """Return a k0s command line for the given arguments."""
        return f"{self.k0s_binary_path()} {command}"

    def k0s_binary_version(self, host: Host) -> Version:
        """Return the version reported by the installed k0s binary."""
        output = host.exec_output(self.k0s_cmdf("version"), sudo=True)
        try:
            return Version(output.strip())
        except InvalidVersion as err:
            raise ValueError(f"invalid k0s version {output!r}: {err}") from err

    def k0sctl_lock_file_path(self, host: Host) -> str:
        try:
            host.exec("test -d /run/lock", sudo=True)
        except CommandError:
            return "/tmp/k0sctl.lock"
        return "/run/lock/k0sctl"

    def temp_file(self, host: Host) -> str:
        return host.exec_output("mktemp")

    def temp_dir(self, host: Host) -> str:
        return host.exec_output("mktemp -d")

    def download_url(
        self, host: Host, url: str, destination: str, sudo: bool = False
    ) -> None:
        """Download *url* to *destination* on the host using curl."""
        command = f"curl -sSLf -o {shlex.quote(destination)} {shlex.quote(url)}"
        try:
            host.exec(command, sudo=sudo)
        except CommandError as err:
            if trailing_number(str(err)) == 22:
                raise CommandError(
                    f"download failed: http 404 - not found: {err}", err.exit_code
                ) from err
            raise CommandError(f"download failed: {err}", err.exit_code) from err

    def download_k0s(
        self, host: Host, path: str, version: object, arch: str, sudo: bool = False
    ) -> None:
        """Download the k0s release binary for *version* and *arch* to *path*."""
        text = str(version)
        if text.startswith("v"):
            text = text[1:]
        text = text.replace("+", "%2B")
        url = (
            "https://github.com/k0sproject/k0s/releases/download/"
            f"v{text}/k0s-v{text}-{arch}"
        )
        try:
            self.download_url(host, url, path, sudo=sudo)
        except CommandError as err:
            raise CommandError(
                "failed to download k0s - check connectivity and k0s version "
                f"validity: {err}",
                err.exit_code,
            ) from err

    def replace_k0s_token_path(self, host: Host, spath: str) -> None:
        """Replace the token path placeholder in a service stub."""
        host.exec(f"sed -i 's^REPLACEME^{self.k0s_join_token_path()}^g' {spath}")

    def file_contains(self, host: Host, path: str, text: str) -> bool:
        try:
            host.exec(f'grep -q "{text}" "{path}"', sudo=True)
        except CommandError:
            return False
        return True

    def file_exist(self, host: Host, path: str) -> bool:
        try:
            host.exec(f'test -e "{path}"', sudo=True)
        except CommandError:
            return False
        return True

    def move_file(self, host: Host, src: str, dst: str) -> None:
        host.exec(f'mv "{src}" "{dst}"', sudo=True)

    def kubeconfig_path(self, host: Host, data_dir: str) -> str:
        """Return the admin kubeconfig if present, else the kubelet one."""
        admin_conf = posixpath.join(data_dir, "pki/admin.conf")
        if self.file_exist(host, admin_conf):
            return admin_conf
        return posixpath.join(data_dir, "kubelet.conf")

    def kubectl_cmdf(self, host: Host, data_dir: str, command: str) -> str:
        """Return a kubectl command line using the host's kubeconfig."""
        kubeconfig = self.kubeconfig_path(host, data_dir)
        return f'env "KUBECONFIG={kubeconfig}" {self.k0s_cmdf(f"kubectl {command}")}'

    def http_status(self, host: Host, url: str) -> int:
        """Return the HTTP status code of a GET request made from the host."""
        output = host.exec_output(
            f'curl -kso /dev/null --connect-timeout 20 -w "%{{http_code}}" "{url}"'
        )
        try:
            return int(output)
        except ValueError as err:
            raise ValueError(f"invalid response: {err}") from err

    def private_interface(self, host: Host) -> str:
        """Find the name of a network interface on a private network."""
        command = (
            f"{SBIN_PATH}; "
            '(ip route list scope global | grep -E "\\b(172|10|192\\.168)\\.") '
            "|| (ip route list | grep -m1 default)"
        )
        try:
            output = host.exec_output(command)
        except CommandError as err:
            reason = str(err)
        else:
            match = _DEV_NAME.search(output)
            if match:
                return match.group(1)
            reason = "can't find 'dev' in output"
        raise LookupError(
            "failed to detect a private network interface, define the host "
            f"privateInterface manually ({reason})"
        )

    def private_address(self, host: Host, iface: str, public_ip: str) -> str:
        """Return the first IPv4 address on *iface* that is not *public_ip*."""
        try:
            output = host.exec_output(
                f"{SBIN_PATH} ip -o addr show dev {iface} scope global"
            )
        except CommandError as err:
            raise LookupError(
                f"failed to find private interface with name {iface}: {err}. "
                "Make sure you've set correct 'privateInterface' for the host in config"
            ) from err

        for line in output.split("\n"):
            fields = line.split()
            if len(fields) < 4:
                continue
            # A /32 address may be listed without its prefix length.
            addr = fields[3].split("/", 1)[0]
            if len(addr.split(".")) == 4 and addr != public_ip:
                return addr
        raise LookupError("not found")

    def upsert_file(self, host: Host, path: str, content: str) -> None:
        """Create *path* with *content* unless it already exists."""
        tmpf = self.temp_file(host)
        host.exec(f'cat > "{tmpf}"', sudo=True, stdin=content)
        try:
            try:
                host.exec(f'mv -n "{tmpf}" "{path}"', sudo=True)
            except CommandError as err:
                raise CommandError(f"upsert failed: {err}", err.exit_code) from err
            try:
                host.exec(f'test -f "{tmpf}"')
            except CommandError:
                return
            raise CommandError("upsert failed")
        finally:
            try:
                host.exec(f'rm -f "{tmpf}"', sudo=True)
            except CommandError:
                pass

    def delete_dir(self, host: Host, path: str, sudo: bool = False) -> None:
        host.exec(f"rmdir {shlex.quote(path)}", sudo=sudo)

    def machine_id(self, host: Host) -> str:
        return host.exec_output("cat /etc/machine-id || cat /var/lib/dbus/machine-id")

    def system_time(self, host: Host) -> datetime:
        """Return the host's clock as a UTC datetime."""
        try:
            output = host.exec_output('date -u +"%s"')
        except CommandError as err:
            raise CommandError(
                f"failed to get system time: {err}", err.exit_code
            ) from err
        try:
            seconds = int(output)
        except ValueError as err:
            raise ValueError(f"failed to parse system time: {err}") from err
        return datetime.fromtimestamp(seconds, tz=timezone.utc)