from __future__ import annotations

import shutil
import stat
import subprocess
from pathlib import Path

import pytest

from cubectl.core.script_assembler import ScriptAssembler
from cubectl.models import DirectoryCube, EnvarScript, FileCube, StepKind
from cubectl.utils import get_library_path


@pytest.fixture
def assembler() -> ScriptAssembler:
    return ScriptAssembler("~/cubectl")


@pytest.fixture
def cubes(tmp_path: Path):
    return [
        DirectoryCube(token="deploy", path=tmp_path / "deploy"),
        FileCube(token="backup.sh", path=tmp_path / "backup.sh"),
    ]


@pytest.fixture
def envars(tmp_path: Path):
    return [
        EnvarScript(source=tmp_path / "base.env", path=tmp_path / "base.env"),
        EnvarScript(
            source=tmp_path / "prod.env.enc",
            path=tmp_path / "prod.env.dec",
            decrypted=True,
        ),
    ]


def test_header_sources_library_first(assembler):
    lines = assembler.assemble([], [], "uptime").text.splitlines()
    assert lines[:7] == [
        "#!/bin/sh",
        ". ~/cubectl/cube_api.sh",
        "if [ $? -ne 0 ] ; then",
        '  echo "Could not source ~/cubectl/cube_api.sh script" 1>&2',
        "  exit 1",
        "fi",
        "cube_initial_directory=${PWD}",
    ]
    assert lines[7:] == ['cd "${cube_initial_directory}"', "uptime"]


def test_steps_are_ordered_env_cube_inline(assembler, envars, cubes):
    script = assembler.assemble(envars, cubes, "uptime")
    assert [step.kind for step in script.steps] == [
        StepKind.ENV,
        StepKind.ENV,
        StepKind.CUBE,
        StepKind.CUBE,
        StepKind.INLINE,
    ]
    assert [step.identifier for step in script.steps_of(StepKind.CUBE)] == ["deploy", "backup"]


def test_every_env_step_precedes_every_cube_in_text(assembler, envars, cubes):
    text = assembler.assemble(envars, cubes, "uptime").text
    last_env = max(text.index(". ~/cubectl/base.env"), text.index(". ~/cubectl/prod.env.dec"))
    first_cube = text.index(". ~/cubectl/deploy/deploy.sh")
    assert last_env < first_cube < text.index(". ~/cubectl/backup.sh") < text.rindex("uptime")


def test_directory_cube_runs_inside_its_directory(assembler, cubes):
    lines = assembler.assemble([], cubes[:1]).text.splitlines()[7:]
    assert lines == [
        "cd ~/cubectl/deploy/ || cube_check_return",
        ". ~/cubectl/deploy/deploy.sh || cube_check_return",
        'cd "${cube_initial_directory}"',
    ]


def test_file_cube_runs_from_remote_dir(assembler, cubes):
    lines = assembler.assemble([], cubes[1:]).text.splitlines()[7:]
    assert lines == [
        "cd ~/cubectl/ || cube_check_return",
        ". ~/cubectl/backup.sh || cube_check_return",
        'cd "${cube_initial_directory}"',
    ]


def test_only_decrypted_envars_are_removed(assembler, envars):
    text = assembler.assemble(envars, []).text
    assert "rm -f ~/cubectl/prod.env.dec || cube_check_return" in text
    assert "rm -f ~/cubectl/base.env" not in text


def test_no_inline_step_without_commands(assembler, cubes):
    script = assembler.assemble([], cubes, "")
    assert script.steps_of(StepKind.INLINE) == ()


def test_inline_text_is_verbatim(assembler):
    script = assembler.assemble([], [], 'echo "a b" && cube_echo done')
    assert script.text.endswith('echo "a b" && cube_echo done\n')


def test_rendering_is_deterministic(assembler, envars, cubes):
    first = assembler.assemble(envars, cubes, "uptime")
    second = ScriptAssembler("~/cubectl/").assemble(envars, cubes, "uptime")
    assert first.text == second.text
    assert first.steps == second.steps


def test_remote_names_are_quoted(assembler, tmp_path):
    cube = FileCube(token="odd name.sh", path=tmp_path / "odd name.sh")
    text = assembler.assemble([], [cube]).text
    assert ". ~/cubectl/'odd name.sh' || cube_check_return" in text


def test_write_makes_script_executable(assembler, tmp_path):
    script = assembler.assemble([], [], "uptime")
    path = assembler.write(script, tmp_path / "cube_exec.sh")
    assert path.read_text() == script.text
    mode = stat.S_IMODE(path.stat().st_mode)
    assert mode == 0o755


def test_inline_commands_run_from_initial_directory(assembler, envars):
    lines = assembler.assemble(envars, [], "pwd").text.splitlines()
    restore = lines.index('cd "${cube_initial_directory}"')
    assert restore > max(i for i, line in enumerate(lines) if line.startswith("cd ~/cubectl/"))
    assert lines[restore + 1:] == ["pwd"]


@pytest.mark.skipif(shutil.which("sh") is None, reason="sh not available")
def test_envar_only_script_returns_to_initial_directory(tmp_path):
    remote = tmp_path / "remote"
    home = tmp_path / "home"
    remote.mkdir()
    home.mkdir()
    shutil.copy(get_library_path(), remote / "cube_api.sh")
    env = remote / "base.env"
    env.write_text("STAGE=prod\n")

    local_assembler = ScriptAssembler(str(remote))
    script = local_assembler.assemble([EnvarScript(source=env, path=env)], [], 'echo "$STAGE" && pwd')
    local_assembler.write(script, remote / "cube_exec.sh")

    result = subprocess.run(
        ["sh", str(remote / "cube_exec.sh")], cwd=home.resolve(), capture_output=True, text=True
    )

    assert result.returncode == 0, result.stderr
    assert result.stdout.splitlines() == ["prod", str(home.resolve())]
