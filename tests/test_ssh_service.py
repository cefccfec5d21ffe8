from __future__ import annotations

import subprocess
from pathlib import Path

from cubectl.services import SSHService


def test_destination_with_and_without_user():
    assert SSHService("deploy").destination("web1") == "deploy@web1"
    assert SSHService("").destination("web1") == "web1"


def test_build_ssh_command_places_options_before_destination():
    ssh = SSHService("deploy", ssh_options=["-p", "2222"])
    assert ssh.build_ssh_command("web1", ". ~/cubectl/cube_exec.sh") == [
        "ssh",
        "-p",
        "2222",
        "deploy@web1",
        ". ~/cubectl/cube_exec.sh",
    ]


def test_build_transfer_command_defaults():
    ssh = SSHService("deploy")
    cmd = ssh.build_transfer_command("web1", [Path("cube_exec.sh"), Path("deploy")], "~/cubectl/")
    assert cmd == ["rsync", "-rlpt", "cube_exec.sh", "deploy", "deploy@web1:~/cubectl/"]


def test_build_transfer_command_passes_ssh_options():
    ssh = SSHService("deploy", ssh_options=["-p", "2222"], rsync_options=["--delete"])
    cmd = ssh.build_transfer_command("web1", [Path("cube_exec.sh")], "~/cubectl/")
    assert cmd == [
        "rsync",
        "-rlpt",
        "--delete",
        "-e",
        "ssh -p 2222",
        "cube_exec.sh",
        "deploy@web1:~/cubectl/",
    ]


def test_missing_binary_is_exit_127(monkeypatch):
    def missing(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "ssh")

    monkeypatch.setattr(subprocess, "Popen", missing)
    lines = []
    result = SSHService("deploy").execute_command("web1", "true", on_output=lines.append)

    assert result.returncode == 127
    assert result.is_failure
    assert result.host == "web1"
    assert lines and lines[0].startswith("Could not run ssh")


def test_on_command_receives_host_and_command_line(monkeypatch):
    seen = []

    def missing(*args, **kwargs):
        raise FileNotFoundError(2, "No such file or directory", "ssh")

    monkeypatch.setattr(subprocess, "Popen", missing)
    SSHService("deploy", on_command=lambda host, line: seen.append((host, line))).execute_command(
        "web1", "echo hi"
    )
    assert seen == [("web1", "ssh deploy@web1 'echo hi'")]


def test_output_is_streamed_line_by_line(monkeypatch):
    real_popen = subprocess.Popen

    def local_popen(cmd, **kwargs):
        return real_popen(["sh", "-c", "echo one; echo two 1>&2; exit 3"], **kwargs)

    monkeypatch.setattr(subprocess, "Popen", local_popen)
    lines = []
    result = SSHService("deploy").execute_command("web1", "ignored", on_output=lines.append)

    assert result.returncode == 3
    assert lines == ["one", "two"]
    assert result.output == "one\ntwo"
