# k0sctl

A command-line tool and library for working with k0s clusters. It writes
cluster configuration templates, produces shell completion scripts, and
provides building blocks for running k0s-related commands on Linux hosts.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Command line

Global options: `--debug`/`-d`, `--trace` (both turn on debug logging) and
`--no-redact`.

### `k0sctl init`

Prints a cluster configuration template as YAML (`apiVersion:
k0sctl.k0sproject.io/v1beta1`, `kind: Cluster`). Hosts are built from
addresses given as `[user@]address[:port]`; the first `--controller-count`
addresses become controllers, the rest workers:

```
k0sctl init --controller-count 1 --user root 10.0.0.1 10.0.0.2 10.0.0.3
```

Options:

- `--cluster-name`/`-n` — cluster name, default `k0s-cluster`
- `--controller-count`/`-C` — number of controllers, default 1
- `--user`/`-u` — SSH user for hosts without one in the address (default `root`)
- `--key-path`/`-i` — SSH key path for every host
- `--k0s` — include a skeleton k0s config section under `spec.k0s.config`

When standard input is not a terminal, address lines are read from it first,
then the command-line addresses are added. Blank lines and `#` comments are
ignored, including trailing comments such as `10.0.0.2 # worker`. The SSH port
defaults to 22. Without any addresses a two-host template (controller
`10.0.0.1`, worker `10.0.0.2`) is written.

### `k0sctl completion`

Prints a completion script for `bash`, `zsh` or `fish`:

```
k0sctl completion --shell zsh
```

Without `--shell`/`-s` the shell is taken from `$SHELL`, falling back to
`bash`. The generated bash and zsh scripts call the program with a trailing
`--generate-bash-completion`, to which it answers with the matching
sub-command or flag names.

## Library

- `k0sctl.shell` — `split(text)` and `unquote(text)` handle shell-style
  quoting and escapes. Malformed input raises `MismatchedQuotesError` or
  `TrailingBackslashError`, both subclasses of `ShellQuoteError`
  (a `ValueError`).
- `k0sctl.configurer` — `LinuxConfigurer` builds and runs the commands used
  on a host: k0s paths (`k0s_binary_path`, `set_path`, ...), `arch`,
  `k0s_binary_version`, `kubeconfig_path`, `kubectl_cmdf`, `download_url`,
  `download_k0s`, `http_status`, `private_interface`, `private_address`,
  `upsert_file`, `machine_id`, `system_time` and more. It works against any
  subclass of the abstract `Host`, which must implement
  `exec_output(command, sudo=False, stdin=None)` and raise `CommandError`
  when a command fails.
- `k0sctl.distros` — per-distribution configurers (`Alpine`, `Archlinux`,
  `CoreOS`, `Debian`, `Ubuntu`, `Flatcar`, `SLES`, `OpenSUSE`, `Slackware`,
  `AlmaLinux`, `AmazonLinux`, `CentOS`, `Fedora`, `OracleLinux`, `RHEL`,
  `RockyLinux`) and `resolve(os_version)` to pick one from an `OSVersion`;
  `register(matcher, factory)` adds more. Unknown systems raise
  `UnsupportedOSError`.
- `k0sctl.github` — `latest_release(preok)` looks up the newest k0sctl
  release on the GitHub releases API, skipping prereleases unless `preok` is
  true; failures raise `ReleaseLookupError`.
- `k0sctl.init_config` — `build_hosts`, `host_from_address`, `default_hosts`
  and `render_config` create the YAML that `k0sctl init` prints.

```python
from k0sctl.init_config import build_hosts, render_config

hosts = build_hosts(["10.0.0.1", "10.0.0.2"], 1, "root", "")
print(render_config(hosts, "k0s-cluster", False))
```

```python
from k0sctl.configurer import Host
from k0sctl.distros import OSVersion, resolve


class FakeHost(Host):
    def exec_output(self, command, sudo=False, stdin=None):
        return "x86_64" if command == "uname -m" else ""


configurer = resolve(OSVersion(id="flatcar"))
print(configurer.k0s_cmdf("version"))  # /opt/bin/k0s version
print(configurer.arch(FakeHost()))     # amd64
```

## What it does not do

The command line offers only `init` and `completion`. It does not install,
upgrade, reset or back up clusters, fetch kubeconfigs, or edit the dynamic
cluster config. The package contains no SSH or other remote transport: to
run commands on real machines you supply your own `Host` implementation.