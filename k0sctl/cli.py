"""Command line entry point."""

from __future__ import annotations

import argparse
import logging
import os
import posixpath
import sys
from dataclasses import dataclass, field

from k0sctl.init_config import DEFAULT_CLUSTER_NAME, build_hosts, render_config

PROG = "k0sctl"
COMPLETION_FLAG = "--generate-bash-completion"

log = logging.getLogger("k0sctl")


class _CommandFailed(Exception):
    """A command could not complete."""


@dataclass(frozen=True)
class _Flag:
    long: str
    short: str | None
    help: str
    options: dict = field(default_factory=dict)


_GLOBAL_FLAGS = (
    _Flag("debug", "d", "Enable debug logging", {"action": "store_true"}),
    _Flag("trace", None, "Enable trace logging", {"action": "store_true"}),
    _Flag("no-redact", None, "Do not hide sensitive information in the output",
          {"action": "store_true"}),
)

_COMMANDS = {
    "init": (
        "Create a configuration template",
        (
            _Flag("k0s", None, "Include a skeleton k0s config section", {"action": "store_true"}),
            _Flag("cluster-name", "n", "Cluster name", {"default": DEFAULT_CLUSTER_NAME}),
            _Flag("controller-count", "C", "The number of controllers to create when addresses are given",
                  {"type": int, "default": 1}),
            _Flag("user", "u", "Host user when addresses given", {"default": ""}),
            _Flag("key-path", "i", "Host key path when addresses given", {"default": ""}),
        ),
    ),
    "completion": (
        "Generates a shell auto-completion script",
        (
            _Flag("shell", "s", "Shell to generate the script for", {"default": None}),
        ),
    ),
}


def no_drain(flag: bool | None, drain_enabled: bool) -> bool:
    """Return the no-drain setting: the flag when given, else the config's."""
    if flag is not None:
        return flag
    return not drain_enabled


def program_name() -> str:
    """Return the name the program was started as."""
    path = sys.argv[0] if sys.argv else ""
    if not path or path.endswith("main") or path.endswith(".py"):
        return PROG
    return posixpath.basename(path.replace(os.sep, "/"))


def bash_completion(prog: str) -> str:
    """Return a bash completion script for *prog*."""
    return f"""#! /bin/bash

_k0sctl_bash_autocomplete() {{
  if [[ "${{COMP_WORDS[0]}}" != "source" ]]; then
    local cur opts base
    COMPREPLY=()
    cur="${{COMP_WORDS[COMP_CWORD]}}"
    if [[ "$cur" == "-"* ]]; then
      opts=$( ${{COMP_WORDS[@]:0:$COMP_CWORD}} ${{cur}} --generate-bash-completion )
    else
      opts=$( ${{COMP_WORDS[@]:0:$COMP_CWORD}} --generate-bash-completion )
    fi
    COMPREPLY=( $(compgen -W "${{opts}}" -- ${{cur}}) )
    return 0
  fi
}}

complete -o bashdefault -o default -o nospace -F _k0sctl_bash_autocomplete {prog}
"""


def zsh_completion(prog: str) -> str:
    """Return a zsh completion script for *prog*."""
    return f"""#compdef {prog}

_k0sctl_zsh_autocomplete() {{
  local -a opts
  local cur
  cur=${{words[-1]}}
  if [[ "$cur" == "-"* ]]; then
    opts=("${{(@f)$(_CLI_ZSH_AUTOCOMPLETE_HACK=1 ${{words[@]:0:#words[@]-1}} ${{cur}} --generate-bash-completion)}}")
  else
    opts=("${{(@f)$(_CLI_ZSH_AUTOCOMPLETE_HACK=1 ${{words[@]:0:#words[@]-1}} --generate-bash-completion)}}")
  fi

  if [[ "${{opts[1]}}" != "" ]]; then
    _describe 'values' opts
  else
    _files
  fi

  return
}}

compdef _k0sctl_zsh_autocomplete {prog}
"""


def _fish_flag_line(prog: str, condition: str, flag: _Flag) -> str:
    parts = [f"complete -c {prog} -n '{condition}'", f"-l {flag.long}"]
    if flag.short:
        parts.append(f"-s {flag.short}")
    parts.append(f"-d '{flag.help}'")
    return " ".join(parts)


def _fish_completion(prog: str) -> str:
    lines = [f"# {prog} fish shell completion", ""]
    for flag in _GLOBAL_FLAGS:
        lines.append(_fish_flag_line(prog, "__fish_use_subcommand", flag))
    for name, (summary, flags) in _COMMANDS.items():
        lines.append(
            f"complete -c {prog} -n '__fish_use_subcommand' -f -a '{name}' -d '{summary}'"
        )
        for flag in flags:
            lines.append(_fish_flag_line(prog, f"__fish_seen_subcommand_from {name}", flag))
    return "\n".join(lines) + "\n"


def _flag_names(flags) -> list[str]:
    names = []
    for flag in flags:
        names.append(f"--{flag.long}")
        if flag.short:
            names.append(f"-{flag.short}")
    return names


def _completion_candidates(words: list[str]) -> list[str]:
    command = next((w for w in words if w in _COMMANDS), None)
    wants_flags = bool(words) and words[-1].startswith("-")
    if command is None:
        return _flag_names(_GLOBAL_FLAGS) if wants_flags else list(_COMMANDS)
    return _flag_names(_COMMANDS[command][1]) if wants_flags else []


def read_addresses(stream) -> list[str]:
    """Read address lines from *stream* unless it is missing or a terminal."""
    if stream is None:
        return []
    isatty = getattr(stream, "isatty", None)
    if isatty is not None and isatty():
        return []
    return [line.rstrip("\r\n") for line in stream]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, description="k0s cluster management tool")
    for flag in _GLOBAL_FLAGS:
        _add_flag(parser, flag)
    subparsers = parser.add_subparsers(dest="command")
    for name, (summary, flags) in _COMMANDS.items():
        sub = subparsers.add_parser(name, help=summary, description=summary)
        for flag in flags:
            _add_flag(sub, flag)
        if name == "init":
            sub.add_argument("addresses", nargs="*", metavar="[user@]address[:port]")
    return parser


def _add_flag(parser: argparse.ArgumentParser, flag: _Flag) -> None:
    names = [f"--{flag.long}"]
    if flag.short:
        names.append(f"-{flag.short}")
    parser.add_argument(*names, help=flag.help, **flag.options)


def _init_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if args.trace or args.debug else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(message)s", stream=sys.stderr)


def _run_init(args: argparse.Namespace) -> None:
    addresses = read_addresses(sys.stdin) + list(args.addresses)
    hosts = build_hosts(addresses, args.controller_count, args.user, args.key_path)
    sys.stdout.write(render_config(hosts, args.cluster_name, args.k0s))


def _run_completion(args: argparse.Namespace) -> None:
    shell = args.shell or os.environ.get("SHELL") or "bash"
    prog = program_name()
    scripts = {"bash": bash_completion, "zsh": zsh_completion, "fish": _fish_completion}
    render = scripts.get(posixpath.basename(shell))
    if render is None:
        raise _CommandFailed(f"no completion script available for {shell}")
    sys.stdout.write(render(prog))


def main(argv=None) -> int:
    """Run the command line; return the exit status."""
    args_list = list(sys.argv[1:] if argv is None else argv)

    if args_list and args_list[-1] == COMPLETION_FLAG:
        for candidate in _completion_candidates(args_list[:-1]):
            print(candidate)
        return 0

    parser = _build_parser()
    args = parser.parse_args(args_list)
    if args.command is None:
        parser.print_help()
        return 0

    _init_logging(args)
    handlers = {"init": _run_init, "completion": _run_completion}
    try:
        handlers[args.command](args)
    except KeyboardInterrupt:
        log.error("Forced exit")
        return 130
    except (_CommandFailed, OSError, ValueError) as err:
        print(f"{PROG}: {err}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())