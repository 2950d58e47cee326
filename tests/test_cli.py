import io

import pytest
import yaml

from k0sctl.cli import (
    bash_completion,
    main,
    no_drain,
    program_name,
    read_addresses,
    zsh_completion,
)


def test_no_drain_flag_or_config():
    assert no_drain(None, True) is False
    assert no_drain(None, False) is True
    assert no_drain(True, False) is True
    assert no_drain(False, False) is False


def test_bash_completion_names_program():
    script = bash_completion("myprog")
    assert script.startswith("#! /bin/bash\n")
    assert script.endswith("-F _k0sctl_bash_autocomplete myprog\n")
    assert '${COMP_WORDS[COMP_CWORD]}' in script


def test_zsh_completion_names_program():
    script = zsh_completion("myprog")
    assert script.startswith("#compdef myprog\n")
    assert script.endswith("compdef _k0sctl_zsh_autocomplete myprog\n")
    assert "${words[-1]}" in script


def test_program_name_falls_back(monkeypatch):
    monkeypatch.setattr("sys.argv", ["/tmp/build/main"])
    assert program_name() == "k0sctl"
    monkeypatch.setattr("sys.argv", ["/usr/local/bin/kctl"])
    assert program_name() == "kctl"


def test_read_addresses_from_pipe():
    assert read_addresses(io.StringIO("10.0.0.1\nroot@10.0.0.2\r\n")) == [
        "10.0.0.1",
        "root@10.0.0.2",
    ]


class _Tty(io.StringIO):
    def isatty(self):
        return True


def test_read_addresses_ignores_terminal():
    assert read_addresses(_Tty("10.0.0.1\n")) == []
    assert read_addresses(None) == []


def test_completion_command_zsh(capsys):
    assert main(["completion", "--shell", "/bin/zsh"]) == 0
    assert capsys.readouterr().out == zsh_completion(program_name())


def test_completion_command_bash(capsys):
    assert main(["completion", "-s", "bash"]) == 0
    assert capsys.readouterr().out == bash_completion(program_name())


def test_completion_command_fish(capsys):
    assert main(["completion", "--shell", "fish"]) == 0
    out = capsys.readouterr().out
    assert "-a 'init'" in out
    assert "-l cluster-name" in out


def test_completion_unknown_shell(capsys):
    assert main(["completion", "--shell", "tcsh"]) == 1
    assert "no completion script available for tcsh" in capsys.readouterr().err


def test_generate_bash_completion_lists_commands(capsys):
    assert main(["--generate-bash-completion"]) == 0
    assert capsys.readouterr().out.split() == ["init", "completion"]


def test_generate_bash_completion_lists_flags(capsys):
    assert main(["completion", "-", "--generate-bash-completion"]) == 0
    assert capsys.readouterr().out.split() == ["--shell", "-s"]


def test_init_command_from_args(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main(["init", "-n", "demo", "10.0.0.1", "10.0.0.2"]) == 0
    doc = yaml.safe_load(capsys.readouterr().out)
    assert doc["metadata"]["name"] == "demo"
    assert [h["role"] for h in doc["spec"]["hosts"]] == ["controller", "worker"]
    assert "k0s" not in doc["spec"]


def test_init_command_reads_stdin_first(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("10.0.0.9\n"))
    assert main(["init", "--k0s", "-C", "2", "-u", "ops", "10.0.0.1", "10.0.0.2"]) == 0
    doc = yaml.safe_load(capsys.readouterr().out)
    hosts = doc["spec"]["hosts"]
    assert [h["ssh"]["address"] for h in hosts] == ["10.0.0.9", "10.0.0.1", "10.0.0.2"]
    assert [h["role"] for h in hosts] == ["controller", "controller", "worker"]
    assert hosts[0]["ssh"]["user"] == "ops"
    assert doc["spec"]["k0s"]["config"]["spec"]["api"]["port"] == 6443


def test_init_command_defaults(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    assert main(["init"]) == 0
    doc = yaml.safe_load(capsys.readouterr().out)
    assert doc["metadata"]["name"] == "k0s-cluster"
    assert [h["ssh"]["address"] for h in doc["spec"]["hosts"]] == ["10.0.0.1", "10.0.0.2"]


def test_invalid_controller_count_rejected():
    with pytest.raises(SystemExit) as exc:
        main(["init", "-C", "many"])
    assert exc.value.code == 2