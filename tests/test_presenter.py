from __future__ import annotations

from pathlib import Path

import pytest

from texwatch.adapters.container import ContainerEngine
from texwatch.api.service import PreparedRun
from texwatch.core.config import RunConfig
from texwatch.core.diagnostics import NullEmitter
from texwatch.ui.cli.presenter import (
    consume_event_diagnostics,
    present_dry_run,
    present_run_summary,
)
from texwatch.ui.cli.state import CLIState


def _prepared(tmp_path: Path) -> PreparedRun:
    document = tmp_path / "main.tex"
    document.write_text("", encoding="utf-8")
    config = RunConfig(
        project_dir=tmp_path,
        main_document=document,
        extra_args=("-shell-escape",),
        build_once=True,
    )
    return PreparedRun(
        config=config,
        engine=ContainerEngine("podman", "/usr/bin/podman"),
        script="true",
        command=["/usr/bin/podman", "run", "image", "bash", "-i", "-c", "cd /x || exit 1; true"],
        emitter=NullEmitter(),
    )


def test_run_summary_plain_fallback(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    present_run_summary(CLIState(), _prepared(tmp_path))

    err = capsys.readouterr().err
    assert "* Runtime: podman (/usr/bin/podman)" in err
    assert "* Main document: main.tex" in err
    assert "* Mode: once" in err
    assert "* Extra arguments: -shell-escape" in err


def test_dry_run_prints_quoted_command(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    present_dry_run(CLIState(), _prepared(tmp_path))

    captured = capsys.readouterr()
    assert captured.out.strip() == (
        "/usr/bin/podman run image bash -i -c 'cd /x || exit 1; true'"
    )
    assert captured.err == ""


def test_event_diagnostics_need_verbosity() -> None:
    state = CLIState()
    state.record_event("main_document_guessed", {"document": "main.tex"})
    assert consume_event_diagnostics(state) == []
    assert state.events == {}

    state.verbosity = 2
    state.record_event(
        "main_document_guessed", {"document": "main.tex", "strategy": "*.tex", "candidates": 1}
    )
    assert consume_event_diagnostics(state) == [
        "Guessed main.tex via *.tex among 1 candidate(s)"
    ]
