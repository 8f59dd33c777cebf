"""Abstractions for detecting and invoking the host container engine."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging
import os
from pathlib import Path
import shlex
import shutil
import subprocess

from texwatch.core.config import MOUNT_SEPARATOR, RunConfig
from texwatch.core.exceptions import ContainerEngineNotFoundError, ContainerExecutionError


logger = logging.getLogger(__name__)

# Detection order, most preferred first.
CONTAINER_ENGINES: tuple[str, ...] = ("podman", "docker")

# Rootless podman already maps the invoking user into the container.
HOST_USER_ENGINES: frozenset[str] = frozenset({"docker"})

INTERRUPTED_EXIT_CODE = 130

SHELL_COMMAND: tuple[str, ...] = ("bash", "-i", "-c")

# The build loop owns the terminal and the container is disposable.
RUN_FLAGS: tuple[str, ...] = ("--interactive", "--tty", "--rm")


@dataclass(slots=True, frozen=True)
class ContainerEngine:
    """A container engine located on the host."""

    name: str
    executable: str

    @property
    def needs_host_user(self) -> bool:
        return self.name in HOST_USER_ENGINES


@dataclass(slots=True)
class VolumeMount:
    """Bind mount of a host directory."""

    source: Path | str
    target: str


@dataclass(slots=True)
class ContainerRunRequest:
    """Interactive, self-removing container run."""

    image: str
    args: Sequence[str] = field(default_factory=tuple)
    mounts: Sequence[VolumeMount] = field(default_factory=tuple)
    workdir: str | None = None


def detect_container_engine(preference: Sequence[str] = CONTAINER_ENGINES) -> ContainerEngine:
    """Return the first engine of ``preference`` found on PATH."""
    for name in preference:
        try:
            executable = shutil.which(name)
        except (OSError, ValueError):
            executable = None
        if executable:
            logger.debug("container engine %s found at %s", name, executable)
            return ContainerEngine(name=name, executable=executable)

    wanted = " or ".join(preference)
    raise ContainerEngineNotFoundError(
        f"No container engine available: install {wanted} and make sure it is on PATH."
    )


class ContainerRunner:
    """Utility class encapsulating container engine invocations."""

    def __init__(self, engine: ContainerEngine) -> None:
        self.engine = engine

    def build_run_command(self, request: ContainerRunRequest) -> list[str]:
        """Return the argv launching ``request`` with the bound engine."""
        command: list[str] = [self.engine.executable, "run", *RUN_FLAGS]

        user = self._resolve_host_user() if self.engine.needs_host_user else None
        if user:
            command.extend(["--user", user])

        command.extend(self._build_mounts(request.mounts))

        if request.workdir:
            command.extend(["--workdir", request.workdir])

        command.append(request.image)
        command.extend(request.args)
        return command

    def run(self, command: Sequence[str]) -> int:
        """Execute ``command`` attached to the terminal and return its exit status."""
        logger.debug("running %s", shlex.join(command))
        try:
            result = subprocess.run(list(command), check=False)
        except KeyboardInterrupt:
            return INTERRUPTED_EXIT_CODE
        except FileNotFoundError as exc:
            raise ContainerExecutionError(
                f"{self.engine.name} executable could not be located."
            ) from exc
        except OSError as exc:
            raise ContainerExecutionError(f"Failed to invoke {self.engine.name}: {exc}") from exc
        return result.returncode

    def _build_mounts(self, mounts: Sequence[VolumeMount]) -> list[str]:
        flags: list[str] = []
        for mount in mounts:
            host = Path(mount.source).expanduser()
            if not host.exists():
                raise ContainerExecutionError(f"Mount source '{host}' does not exist.")
            try:
                resolved = host.resolve(strict=True)
            except (OSError, RuntimeError):
                resolved = host.absolute()

            for path in (str(resolved), mount.target):
                if MOUNT_SEPARATOR in path:
                    raise ContainerExecutionError(
                        f"Cannot mount '{path}': paths containing '{MOUNT_SEPARATOR}' "
                        "are not supported."
                    )
            flags.extend(["--volume", f"{resolved}{MOUNT_SEPARATOR}{mount.target}"])
        return flags

    def _resolve_host_user(self) -> str | None:
        getuid = getattr(os, "getuid", None)
        getgid = getattr(os, "getgid", None)

        if callable(getuid) and callable(getgid):
            try:
                uid = getuid()
                gid = getgid()
            except OSError:
                return None
            return f"{uid}:{gid}"

        return None


def build_container_command(engine: ContainerEngine, config: RunConfig, script: str) -> list[str]:
    """Mount the project at a path named after it and run ``script`` from there."""
    workdir = config.container_dir
    request = ContainerRunRequest(
        image=config.image,
        args=[*SHELL_COMMAND, f"cd {shlex.quote(workdir)} || exit 1; {script}"],
        mounts=[VolumeMount(config.project_dir, workdir)],
        workdir=workdir,
    )
    return ContainerRunner(engine).build_run_command(request)


__all__ = [
    "CONTAINER_ENGINES",
    "ContainerEngine",
    "ContainerRunRequest",
    "ContainerRunner",
    "VolumeMount",
    "build_container_command",
    "detect_container_engine",
]
