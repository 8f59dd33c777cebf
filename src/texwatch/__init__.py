"""Primary public API for texwatch."""

from __future__ import annotations

from texwatch.api import PreparedRun, WatchRequest, WatchService
from texwatch.core.config import (
    DEFAULT_ENGINE,
    DEFAULT_IMAGE,
    ENGINE_FLAGS,
    LatexEngine,
    ProjectDefaults,
    RunConfig,
)
from texwatch.core.documents import guess_main_document
from texwatch.core.exceptions import (
    ConfigurationError,
    ContainerEngineNotFoundError,
    ContainerExecutionError,
    MainDocumentNotFoundError,
    TexwatchError,
    VersionControlError,
)
from texwatch.core.script import build_latexmk_command, build_script
from texwatch.version import get_version


__version__ = get_version()

__all__ = [
    "DEFAULT_ENGINE",
    "DEFAULT_IMAGE",
    "ENGINE_FLAGS",
    "ConfigurationError",
    "ContainerEngineNotFoundError",
    "ContainerExecutionError",
    "LatexEngine",
    "MainDocumentNotFoundError",
    "PreparedRun",
    "ProjectDefaults",
    "RunConfig",
    "TexwatchError",
    "VersionControlError",
    "WatchRequest",
    "WatchService",
    "__version__",
    "build_latexmk_command",
    "build_script",
    "get_version",
    "guess_main_document",
]
