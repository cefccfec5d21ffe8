from __future__ import annotations

from pathlib import Path

import pytest

from cubectl.core.remote_runner import RemoteRunner
from cubectl.models import HostStep

HOSTS = ["a", "b", "c"]


@pytest.fixture
def uploads(tmp_path: Path):
    script = tmp_path / "cube_exec.sh"
    script.write_text("#!/bin/sh\n")
    return [script]


def test_bootstrap_and_execute_commands(fake_ssh, logger):
    runner = RemoteRunner(fake_ssh, logger, "~/cubectl/")
    assert runner.bootstrap_command() == "[ -d ~/cubectl ] || mkdir -p ~/cubectl"
    assert runner.execute_command("cube_exec.sh") == ". ~/cubectl/cube_exec.sh"


def test_all_hosts_run_every_phase(fake_ssh, logger, uploads):
    report = RemoteRunner(fake_ssh, logger, "~/cubectl").run(HOSTS, uploads, "cube_exec.sh")

    assert fake_ssh.calls_of("bootstrap") == HOSTS
    assert fake_ssh.calls_of("transfer") == HOSTS
    assert fake_ssh.calls_of("execute") == HOSTS
    assert report.is_success
    assert report.executed_hosts == HOSTS


def test_phases_run_host_by_host_in_order(fake_ssh, logger, uploads):
    RemoteRunner(fake_ssh, logger, "~/cubectl").run(["a", "b"], uploads, "cube_exec.sh")
    assert [(kind, host) for kind, host, _ in fake_ssh.calls] == [
        ("bootstrap", "a"),
        ("bootstrap", "b"),
        ("transfer", "a"),
        ("transfer", "b"),
        ("execute", "a"),
        ("execute", "b"),
    ]


def test_transfer_targets_remote_dir(fake_ssh, logger, uploads):
    RemoteRunner(fake_ssh, logger, "~/cubectl").run(["a"], uploads, "cube_exec.sh")
    transfers = [payload for kind, _, payload in fake_ssh.calls if kind == "transfer"]
    assert transfers == [(uploads, "~/cubectl/")]


def test_skip_init_skips_bootstrap(fake_ssh, logger, uploads):
    RemoteRunner(fake_ssh, logger, "~/cubectl").run(HOSTS, uploads, "cube_exec.sh", skip_init=True)
    assert fake_ssh.calls_of("bootstrap") == []
    assert fake_ssh.calls_of("execute") == HOSTS


@pytest.mark.parametrize("step", ["bootstrap", "transfer", "execute"])
def test_failure_on_one_host_does_not_stop_others(ssh_factory, logger, uploads, step):
    ssh = ssh_factory({("b", step): 255})
    report = RemoteRunner(ssh, logger, "~/cubectl").run(HOSTS, uploads, "cube_exec.sh")

    assert report.failed_hosts == ["b"]
    assert not report.is_success
    assert "a" in report.executed_hosts and "c" in report.executed_hosts
    assert ssh.calls_of("execute")[-1] == "c"


def test_failed_host_skips_later_phases(ssh_factory, logger, uploads):
    ssh = ssh_factory({("b", "transfer"): 23})
    report = RemoteRunner(ssh, logger, "~/cubectl").run(HOSTS, uploads, "cube_exec.sh")

    assert ssh.calls_of("execute") == ["a", "c"]
    failures = [r for r in report.for_host("b") if not r.is_success]
    assert [(r.step, r.returncode) for r in failures] == [(HostStep.TRANSFER, 23)]


def test_failure_is_written_to_log(ssh_factory, logger, uploads):
    ssh = ssh_factory({("a", "execute"): 1})
    RemoteRunner(ssh, logger, "~/cubectl").run(["a"], uploads, "cube_exec.sh")
    logger.close()

    text = logger.log_path.read_text()
    assert "Last command failed with return code 1" in text
    assert "Host: a, Step: execute" in text
    assert "Status: FAILED" in text


def test_remote_output_is_logged(fake_ssh, logger, uploads):
    RemoteRunner(fake_ssh, logger, "~/cubectl").run(["a"], uploads, "cube_exec.sh")
    logger.close()
    assert "  [a] execute on a" in logger.log_path.read_text()


def test_remote_output_is_echoed_with_host_label(fake_ssh, logger, uploads, capsys):
    RemoteRunner(fake_ssh, logger, "~/cubectl").run(["a", "b"], uploads, "cube_exec.sh")

    out = capsys.readouterr().out.splitlines()
    assert "[a] execute on a" in out
    assert "[b] execute on b" in out
