"""Watch orchestration utilities for CLI and embedding integrations."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from texwatch.adapters.container import (
    CONTAINER_ENGINES,
    ContainerEngine,
    ContainerRunner,
    build_container_command,
    detect_container_engine,
)
from texwatch.adapters.git import COMMIT_MESSAGE, commit_changes, is_work_tree
from texwatch.core.config import (
    DEFAULT_ENGINE,
    DEFAULT_IMAGE,
    LatexEngine,
    ProjectDefaults,
    RunConfig,
    RuntimeName,
    load_project_defaults,
    resolve_main_document,
    resolve_project_dir,
)
from texwatch.core.diagnostics import DiagnosticEmitter, NullEmitter
from texwatch.core.documents import resolve_main_document_guess
from texwatch.core.exceptions import ConfigurationError, VersionControlError
from texwatch.core.script import build_script


__all__ = [
    "PreparedRun",
    "WatchRequest",
    "WatchService",
]


@dataclass(slots=True)
class WatchRequest:
    """Raw settings collected from the command line."""

    project_dir: Path = field(default_factory=lambda: Path("."))
    main_document: Path | None = None
    engine: LatexEngine | None = None
    image: str | None = None
    commit_on_exit: bool | None = None
    build_once: bool = False
    extra_args: Sequence[str] = field(default_factory=tuple)
    runtime: RuntimeName | None = None
    use_project_defaults: bool = True
    emitter: DiagnosticEmitter | None = None


@dataclass(slots=True)
class PreparedRun:
    """Fully validated run, ready to be launched."""

    config: RunConfig
    engine: ContainerEngine
    script: str
    command: list[str]
    emitter: DiagnosticEmitter


class WatchService:
    """High-level façade resolving configuration and launching the container."""

    def select_engine(self, request: WatchRequest) -> ContainerEngine:
        """Locate the container engine, honouring a forced runtime."""
        preference = (request.runtime,) if request.runtime else CONTAINER_ENGINES
        return detect_container_engine(preference)

    def resolve_config(self, request: WatchRequest) -> RunConfig:
        """Merge defaults, project settings and CLI values into a validated config."""
        emitter = request.emitter or NullEmitter()
        project_dir = resolve_project_dir(request.project_dir)
        defaults = (
            load_project_defaults(project_dir)
            if request.use_project_defaults
            else ProjectDefaults()
        )

        document: Path | None = None
        if request.main_document is not None:
            document = resolve_main_document(project_dir, request.main_document)
        elif defaults.main is not None:
            document = resolve_main_document(project_dir, project_dir / defaults.main)

        commit = request.commit_on_exit
        if commit is None:
            commit = bool(defaults.commit)
        if commit:
            self._ensure_work_tree(project_dir)

        try:
            config = RunConfig(
                engine=request.engine or defaults.engine or DEFAULT_ENGINE,
                image=request.image or defaults.image or DEFAULT_IMAGE,
                main_document=document,
                commit_on_exit=commit,
                build_once=request.build_once,
                project_dir=project_dir,
                extra_args=(*defaults.extra_args, *request.extra_args),
                runtime=request.runtime,
            )
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid configuration: {exc}") from exc

        if config.main_document is None:
            guessed = resolve_main_document_guess(project_dir, emitter=emitter)
            config = config.with_main_document(guessed)
        return config

    def prepare(self, request: WatchRequest) -> PreparedRun:
        """Run every fail-fast check and build the container command."""
        emitter = request.emitter or NullEmitter()
        engine = self.select_engine(request)
        emitter.event(
            "container_engine_selected", {"name": engine.name, "path": engine.executable}
        )
        config = self.resolve_config(request)
        emitter.event(
            "run_settings",
            {
                "engine": config.engine.value,
                "image": config.image,
                "build_once": config.build_once,
            },
        )
        script = build_script(config)
        command = build_container_command(engine, config, script)
        return PreparedRun(
            config=config,
            engine=engine,
            script=script,
            command=command,
            emitter=emitter,
        )

    def execute(self, prepared: PreparedRun) -> int:
        """Launch the container and return its exit status."""
        runner = ContainerRunner(prepared.engine)
        try:
            return runner.run(prepared.command)
        finally:
            if prepared.config.commit_on_exit:
                self._commit(prepared.config.project_dir, prepared.emitter)

    @staticmethod
    def _ensure_work_tree(project_dir: Path) -> None:
        try:
            tracked = is_work_tree(project_dir)
        except VersionControlError as exc:
            raise ConfigurationError(str(exc)) from exc
        if not tracked:
            raise ConfigurationError(
                f"Cannot commit on exit: '{project_dir}' is not inside a git work tree."
            )

    @staticmethod
    def _commit(project_dir: Path, emitter: DiagnosticEmitter) -> None:
        try:
            committed = commit_changes(project_dir)
        except VersionControlError as exc:
            emitter.warning(f"Commit on exit failed: {exc}", exc)
            return
        if committed:
            emitter.event(
                "changes_committed",
                {"repository": str(project_dir), "message": COMMIT_MESSAGE},
            )
