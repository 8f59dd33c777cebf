"""Configuration models used by the watch orchestrator.

RunConfig

`engine` (`LatexEngine`)
: LaTeX processor handed to latexmk. Each engine maps to a fixed latexmk flag
  (see `ENGINE_FLAGS`).

`image` (`str`)
: Container image providing TeX Live, latexmk and entr.

`main_document` (`Path | None`)
: Absolute path of the root document. Must be a regular file inside
  `project_dir` so the container can see it.

`commit_on_exit` (`bool`)
: Stage tracked modifications and commit them once the container exits.

`build_once` (`bool`)
: Run a single build instead of the watch loop.

`project_dir` (`Path`)
: Absolute project root, bind-mounted into the container.

`extra_args` (`tuple[str, ...]`)
: Raw arguments appended verbatim to the latexmk invocation.

`runtime` (`"podman" | "docker" | None`)
: Force a container engine instead of detecting one.

ProjectDefaults

Optional `.texwatch.yml` at the project root. Keys mirror the command line
(`engine`, `image`, `main`, `commit`, `extra_args`); command line values win.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
import os
from pathlib import Path, PurePosixPath
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
import yaml

from .exceptions import ConfigurationError


class LatexEngine(str, Enum):
    """LaTeX processors supported by the build loop."""

    LATEX = "latex"
    LUALATEX = "lualatex"
    PDFLATEX = "pdflatex"
    XELATEX = "xelatex"

    @property
    def latexmk_flag(self) -> str:
        return ENGINE_FLAGS[self]


ENGINE_FLAGS: dict[LatexEngine, str] = {
    LatexEngine.LATEX: "-pdfdvi",
    LatexEngine.LUALATEX: "-pdflua",
    LatexEngine.PDFLATEX: "-pdf",
    LatexEngine.XELATEX: "-pdfxe",
}

DEFAULT_ENGINE = LatexEngine.PDFLATEX
DEFAULT_IMAGE = "texlive/texlive:latest"
PROJECT_DEFAULTS_FILENAME = ".texwatch.yml"
FALLBACK_CONTAINER_DIR = "/project"
# Field separator of `--volume SRC:DST`; paths holding it cannot be mounted.
MOUNT_SEPARATOR = ":"

RuntimeName = Literal["podman", "docker"]


def resolve_project_dir(path: str | Path) -> Path:
    """Return the absolute project directory, ensuring it exists."""
    candidate = Path(path).expanduser()
    try:
        resolved = candidate.resolve(strict=True)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Project directory '{candidate}' does not exist.") from exc
    except (OSError, RuntimeError) as exc:
        raise ConfigurationError(f"Cannot resolve project directory '{candidate}': {exc}") from exc
    if not resolved.is_dir():
        raise ConfigurationError(f"Project directory '{candidate}' is not a directory.")
    if MOUNT_SEPARATOR in str(resolved):
        raise ConfigurationError(
            f"Project directory '{resolved}' contains '{MOUNT_SEPARATOR}', "
            "which container engines cannot bind-mount."
        )
    return resolved


def resolve_main_document(project_dir: Path, path: str | Path) -> Path:
    """Validate an explicit main document and return its absolute path.

    A relative path is looked up in the project directory first, then in the
    current directory.
    """
    candidate = Path(path).expanduser()
    if not candidate.is_absolute():
        in_project = project_dir / candidate
        candidate = in_project if in_project.exists() else Path.cwd() / candidate
    try:
        resolved = candidate.resolve(strict=True)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Main document '{path}' does not exist.") from exc
    except (OSError, RuntimeError) as exc:
        raise ConfigurationError(f"Cannot resolve main document '{path}': {exc}") from exc

    if not resolved.is_file():
        raise ConfigurationError(f"Main document '{path}' is not a regular file.")
    if not os.access(resolved, os.R_OK):
        raise ConfigurationError(f"Main document '{path}' is not readable.")
    try:
        resolved.relative_to(project_dir)
    except ValueError as exc:
        raise ConfigurationError(
            f"Main document '{path}' is outside the project directory '{project_dir}'."
        ) from exc
    return resolved


class ProjectDefaults(BaseModel):
    """Per-project defaults read from ``.texwatch.yml``."""

    model_config = ConfigDict(extra="forbid")

    engine: LatexEngine | None = None
    image: str | None = None
    main: Path | None = None
    commit: bool | None = None
    extra_args: list[str] = Field(default_factory=list)


def load_project_defaults(project_dir: Path) -> ProjectDefaults:
    """Load ``.texwatch.yml`` from the project root when present."""
    path = project_dir / PROJECT_DEFAULTS_FILENAME
    if not path.is_file():
        return ProjectDefaults()

    try:
        payload = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read '{path}': {exc}") from exc

    try:
        parsed = yaml.safe_load(payload)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in '{path}': {exc}") from exc

    if parsed is None:
        return ProjectDefaults()
    if not isinstance(parsed, Mapping):
        raise ConfigurationError(f"'{path}' must contain a mapping of settings.")

    try:
        return ProjectDefaults.model_validate(dict(parsed))
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid settings in '{path}': {exc}") from exc


class RunConfig(BaseModel):
    """Immutable description of a single texwatch run."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    engine: LatexEngine = DEFAULT_ENGINE
    image: str = DEFAULT_IMAGE
    main_document: Path | None = None
    commit_on_exit: bool = False
    build_once: bool = False
    project_dir: Path = Field(default_factory=Path.cwd)
    extra_args: tuple[str, ...] = ()
    runtime: RuntimeName | None = None

    @field_validator("image")
    @classmethod
    def _image_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("container image must not be empty")
        return value

    @field_validator("project_dir")
    @classmethod
    def _project_dir_is_absolute(cls, value: Path) -> Path:
        if not value.is_absolute():
            raise ValueError(f"project directory '{value}' must be absolute")
        if MOUNT_SEPARATOR in str(value):
            raise ValueError(f"project directory '{value}' must not contain '{MOUNT_SEPARATOR}'")
        return value

    @model_validator(mode="after")
    def _document_inside_project(self) -> RunConfig:
        if self.main_document is None:
            return self
        if not self.main_document.is_absolute():
            raise ValueError(f"main document '{self.main_document}' must be absolute")
        try:
            self.main_document.relative_to(self.project_dir)
        except ValueError as exc:
            raise ValueError(
                f"main document '{self.main_document}' is outside '{self.project_dir}'"
            ) from exc
        return self

    @property
    def container_dir(self) -> str:
        """Mount point of the project inside the container."""
        name = self.project_dir.name
        return f"/{name}" if name else FALLBACK_CONTAINER_DIR

    @property
    def document_argument(self) -> str:
        """Main document path relative to the project, in POSIX form."""
        if self.main_document is None:
            raise ConfigurationError("The main document has not been resolved yet.")
        relative = self.main_document.relative_to(self.project_dir)
        return PurePosixPath(*relative.parts).as_posix()

    def with_main_document(self, document: Path) -> RunConfig:
        """Return a copy bound to ``document``, re-running validation."""
        data: dict[str, Any] = self.model_dump()
        data["main_document"] = document
        return RunConfig.model_validate(data)


__all__ = [
    "DEFAULT_ENGINE",
    "DEFAULT_IMAGE",
    "ENGINE_FLAGS",
    "MOUNT_SEPARATOR",
    "PROJECT_DEFAULTS_FILENAME",
    "LatexEngine",
    "ProjectDefaults",
    "RunConfig",
    "RuntimeName",
    "load_project_defaults",
    "resolve_main_document",
    "resolve_project_dir",
]
