from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import ValidationError
import pytest

from texwatch.adapters import container as container_mod
from texwatch.core.config import RunConfig, resolve_project_dir
from texwatch.core.exceptions import (
    ConfigurationError,
    ContainerEngineNotFoundError,
    ContainerExecutionError,
)


class _StubResult:
    def __init__(self, returncode: int = 0) -> None:
        self.returncode = returncode


def _fake_which(available: dict[str, str]):
    def which(name: str) -> str | None:
        return available.get(name)

    return which


def _config(tmp_path: Path, **overrides: Any) -> RunConfig:
    project = tmp_path / "thesis"
    project.mkdir(exist_ok=True)
    document = project / "main.tex"
    document.write_text("", encoding="utf-8")
    return RunConfig(project_dir=project, main_document=document, **overrides)


def test_detect_prefers_podman(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        container_mod.shutil,
        "which",
        _fake_which({"podman": "/usr/bin/podman", "docker": "/usr/bin/docker"}),
    )

    engine = container_mod.detect_container_engine()

    assert engine == container_mod.ContainerEngine("podman", "/usr/bin/podman")


def test_detect_falls_back_to_docker(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        container_mod.shutil, "which", _fake_which({"docker": "/usr/local/bin/docker"})
    )

    engine = container_mod.detect_container_engine()

    assert engine.name == "docker"
    assert engine.executable == "/usr/local/bin/docker"


def test_detect_honours_forced_preference(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(container_mod.shutil, "which", _fake_which({"podman": "/usr/bin/podman"}))

    with pytest.raises(ContainerEngineNotFoundError, match="docker"):
        container_mod.detect_container_engine(("docker",))


def test_detect_without_engine(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(container_mod.shutil, "which", _fake_which({}))

    with pytest.raises(ContainerEngineNotFoundError) as excinfo:
        container_mod.detect_container_engine()

    assert excinfo.value.exit_code == 1


def test_docker_command_passes_host_user(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(container_mod.os, "getuid", lambda: 501, raising=False)
    monkeypatch.setattr(container_mod.os, "getgid", lambda: 20, raising=False)
    engine = container_mod.ContainerEngine("docker", "/usr/bin/docker")
    config = _config(tmp_path, image="example/tex")

    command = container_mod.build_container_command(engine, config, "latexmk -pdf main.tex")

    assert command == [
        "/usr/bin/docker",
        "run",
        "--interactive",
        "--tty",
        "--rm",
        "--user",
        "501:20",
        "--volume",
        f"{config.project_dir.resolve()}:/thesis",
        "--workdir",
        "/thesis",
        "example/tex",
        "bash",
        "-i",
        "-c",
        "cd /thesis || exit 1; latexmk -pdf main.tex",
    ]


def test_podman_command_skips_host_user(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(container_mod.os, "getuid", lambda: 501, raising=False)
    monkeypatch.setattr(container_mod.os, "getgid", lambda: 20, raising=False)
    engine = container_mod.ContainerEngine("podman", "/usr/bin/podman")

    command = container_mod.build_container_command(engine, _config(tmp_path), "true")

    assert "--user" not in command
    assert command[:5] == ["/usr/bin/podman", "run", "--interactive", "--tty", "--rm"]


def test_container_dir_with_spaces_is_quoted(tmp_path: Path) -> None:
    project = tmp_path / "my paper"
    project.mkdir()
    document = project / "main.tex"
    document.write_text("", encoding="utf-8")
    config = RunConfig(project_dir=project, main_document=document)
    engine = container_mod.ContainerEngine("podman", "podman")

    command = container_mod.build_container_command(engine, config, "true")

    assert f"{project.resolve()}:/my paper" in command
    assert command[-1] == "cd '/my paper' || exit 1; true"


def test_project_dir_with_colon_is_rejected(tmp_path: Path) -> None:
    project = tmp_path / "draft:v2"
    project.mkdir()
    document = project / "main.tex"
    document.write_text("", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="cannot bind-mount") as excinfo:
        resolve_project_dir(project)
    assert excinfo.value.exit_code == 2

    with pytest.raises(ValidationError, match="must not contain ':'"):
        RunConfig(project_dir=project.resolve(), main_document=document.resolve())


def test_mount_with_colon_in_source_is_refused(tmp_path: Path) -> None:
    source = tmp_path / "draft:v2"
    source.mkdir()
    runner = container_mod.ContainerRunner(container_mod.ContainerEngine("podman", "podman"))
    request = container_mod.ContainerRunRequest(
        image="example/image",
        mounts=[container_mod.VolumeMount(source, "/draft")],
    )

    with pytest.raises(ContainerExecutionError, match="draft:v2"):
        runner.build_run_command(request)


def test_mount_with_colon_in_target_is_refused(tmp_path: Path) -> None:
    runner = container_mod.ContainerRunner(container_mod.ContainerEngine("podman", "podman"))
    request = container_mod.ContainerRunRequest(
        image="example/image",
        mounts=[container_mod.VolumeMount(tmp_path, "/draft:v2")],
    )

    with pytest.raises(ContainerExecutionError, match="/draft:v2"):
        runner.build_run_command(request)


def test_volume_spec_has_two_fields(tmp_path: Path) -> None:
    engine = container_mod.ContainerEngine("docker", "/usr/bin/docker")
    config = _config(tmp_path)

    command = container_mod.build_container_command(engine, config, "true")

    volume = command[command.index("--volume") + 1]
    assert volume.split(":") == [str(config.project_dir), config.container_dir]


def test_run_request_missing_mount(tmp_path: Path) -> None:
    runner = container_mod.ContainerRunner(container_mod.ContainerEngine("docker", "docker"))
    request = container_mod.ContainerRunRequest(
        image="example/image",
        mounts=[container_mod.VolumeMount(tmp_path / "missing", "/data")],
    )

    with pytest.raises(ContainerExecutionError):
        runner.build_run_command(request)


def test_run_returns_exit_status(monkeypatch: pytest.MonkeyPatch) -> None:
    recorded: dict[str, Any] = {}

    def fake_run(cmd: list[str], **kwargs: Any) -> _StubResult:
        recorded["command"] = cmd
        recorded["kwargs"] = kwargs
        return _StubResult(returncode=12)

    monkeypatch.setattr(container_mod.subprocess, "run", fake_run)
    runner = container_mod.ContainerRunner(container_mod.ContainerEngine("podman", "podman"))

    assert runner.run(["podman", "run", "image"]) == 12
    assert recorded["command"] == ["podman", "run", "image"]
    assert recorded["kwargs"] == {"check": False}


def test_run_converts_interrupt(monkeypatch: pytest.MonkeyPatch) -> None:
    def interrupted(cmd: list[str], **kwargs: Any) -> _StubResult:
        raise KeyboardInterrupt

    monkeypatch.setattr(container_mod.subprocess, "run", interrupted)
    runner = container_mod.ContainerRunner(container_mod.ContainerEngine("podman", "podman"))

    assert runner.run(["podman"]) == container_mod.INTERRUPTED_EXIT_CODE


def test_run_missing_executable(monkeypatch: pytest.MonkeyPatch) -> None:
    def missing(cmd: list[str], **kwargs: Any) -> _StubResult:
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(container_mod.subprocess, "run", missing)
    runner = container_mod.ContainerRunner(container_mod.ContainerEngine("docker", "docker"))

    with pytest.raises(ContainerExecutionError, match="could not be located"):
        runner.run(["docker", "run"])
