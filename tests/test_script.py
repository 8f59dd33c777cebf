from pathlib import Path
import shlex

import pytest

from texwatch.core.config import LatexEngine, RunConfig
from texwatch.core.script import (
    DISMISS_MESSAGE,
    build_latexmk_command,
    build_once_script,
    build_script,
    build_watch_script,
    source_listing_command,
)


def _watcher_argv(script: str) -> list[str]:
    tokens = shlex.split(script)
    start = tokens.index("entr")
    argv = tokens[start : start + 5]
    argv[4] = argv[4].removesuffix(";")
    return argv


def _config(tmp_path: Path, document: str = "main.tex", **overrides: object) -> RunConfig:
    path = tmp_path / document
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")
    return RunConfig(project_dir=tmp_path, main_document=path, **overrides)


@pytest.mark.parametrize("engine", list(LatexEngine))
def test_latexmk_command_uses_engine_flag(engine: LatexEngine) -> None:
    command = build_latexmk_command(engine, "main.tex")

    assert command == [
        "latexmk",
        "-interaction=batchmode",
        "-g",
        "-synctex=1",
        engine.latexmk_flag,
        "main.tex",
    ]


def test_latexmk_command_appends_extra_args_in_order() -> None:
    extra = ["-shell-escape", "-jobname=draft", "--", "x y"]
    command = build_latexmk_command(LatexEngine.XELATEX, "main.tex", extra)

    assert command[-4:] == extra
    assert command[-5] == "main.tex"


def test_source_listing_covers_tracked_suffixes() -> None:
    listing = source_listing_command()

    assert listing.startswith("find . -type f")
    for suffix in ("tex", "cls", "bib"):
        assert f"'*.{suffix}'" in listing


def test_once_and_watch_scripts_differ(tmp_path: Path) -> None:
    once = build_script(_config(tmp_path, build_once=True))
    watch = build_script(_config(tmp_path, build_once=False))

    assert once != watch
    assert "while" not in once
    assert "entr" not in once
    assert watch.startswith("while true; do ")
    assert watch.endswith("; done")


def test_once_script_exits_with_build_status(tmp_path: Path) -> None:
    script = build_script(_config(tmp_path, build_once=True))

    assert "status=$?" in script
    assert script.endswith('exit "$status"')
    assert "latexmk -interaction=batchmode -g -synctex=1 -pdf main.tex" in script


def test_watch_script_relists_sources_each_iteration(tmp_path: Path) -> None:
    script = build_script(_config(tmp_path, engine=LatexEngine.LUALATEX))

    loop_body = script[len("while true; do ") : -len("; done")]
    assert loop_body.index("find . -type f") < loop_body.index("entr -d")
    assert "| entr -d sh -c " in loop_body
    assert shlex.quote(f">>> {DISMISS_MESSAGE}") in loop_body
    assert "sleep 1" in loop_body
    assert "-pdflua" in loop_body


@pytest.mark.parametrize("build_once", [True, False])
def test_passthrough_args_close_the_build_command(tmp_path: Path, build_once: bool) -> None:
    extra = ("-shell-escape", "-usepretex=\\def\\draft{}")
    config = _config(tmp_path, build_once=build_once, extra_args=extra)
    latexmk = shlex.join(build_latexmk_command(config.engine, "main.tex", extra))

    script = build_script(config)

    if build_once:
        assert latexmk in script
    else:
        watcher_argv = _watcher_argv(script)
        assert watcher_argv[:4] == ["entr", "-d", "sh", "-c"]
        assert latexmk in watcher_argv[4]
    assert latexmk.endswith(shlex.join(extra))


def test_document_path_with_spaces_is_quoted(tmp_path: Path) -> None:
    config = _config(tmp_path, document="my chapters/main file.tex", build_once=True)

    script = build_script(config)

    assert "'my chapters/main file.tex'" in script
    words = shlex.split(script.split("; ")[1])
    assert words[-1] == "my chapters/main file.tex"


def test_quotes_survive_nested_watch_quoting() -> None:
    latexmk = ["latexmk", "-pdf", "it's.tex"]
    script = build_watch_script(latexmk, "it's.tex")

    argv = _watcher_argv(script)
    assert argv[:4] == ["entr", "-d", "sh", "-c"]
    inner = argv[4]
    assert shlex.join(latexmk) in inner
    assert "it's.tex" in shlex.split(inner.split("; ")[1])


def test_once_script_reports_document() -> None:
    script = build_once_script(["latexmk", "-pdf", "main.tex"], "main.tex")

    assert script.startswith("echo '>>> Building main.tex'")
    assert "printf" in script
