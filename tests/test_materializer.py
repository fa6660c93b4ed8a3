"""Tests for scaffolding, file overlay and the build-repair loop."""

import pytest

from shipwright.errors import ScaffoldFailed
from shipwright.extract import GenerationResult, ProjectInfo, extract_code_blocks
from shipwright.scaffold import ProcessResult, scaffold_command
from shipwright.scaffold.materializer import BUILD_COMMAND, TAILWIND_COMMANDS


def test_scaffold_command_vite_react():
    assert scaffold_command(ProjectInfo()) == "npx create-vite@latest . --template react"
    assert scaffold_command(ProjectInfo(language="typescript")).endswith("--template react-ts")


def test_scaffold_command_next():
    js = scaffold_command(ProjectInfo(framework="next"))
    ts = scaffold_command(ProjectInfo(framework="next", language="typescript"))
    assert js.startswith("npx create-next-app@latest .")
    assert "--typescript" not in js
    assert "--typescript" in ts
    assert "--tailwind=false" in ts


def test_materialize_round_trip(tmp_path, materializer, runner):
    """Every extracted file exists afterwards with identical content."""
    result = extract_code_blocks(
        "```jsx\n// filename: src/App.jsx\nexport default () => null;\n```\n"
        "```json\n// filename: package.json\n{\"name\": \"generated\"}\n```"
    )
    project = tmp_path / "proj"
    materializer.materialize(project, result)

    for filename, content in result.files.items():
        assert (project / filename).read_text(encoding="utf-8") == content
    assert runner.commands[0] == "npx create-vite@latest . --template react"
    assert runner.calls[0].cwd == project
    assert (project / "vite.config.js").exists()


def test_tailwind_installed_only_for_vite(tmp_path, materializer, runner):
    materializer.scaffold(tmp_path, ProjectInfo(css_framework="tailwind"))
    assert runner.commands[1:] == list(TAILWIND_COMMANDS)

    runner.calls.clear()
    materializer.scaffold(tmp_path, ProjectInfo(framework="next", css_framework="tailwind"))
    assert len(runner.commands) == 1


def test_scaffold_failure_raises(tmp_path, materializer, runner):
    runner.responses["npx create-vite@latest"] = ProcessResult(
        command="npx create-vite@latest", returncode=1, stderr="npm ERR! network"
    )
    with pytest.raises(ScaffoldFailed, match="network"):
        materializer.materialize(tmp_path, GenerationResult(files={"a.js": "1"}))


def test_overlay_rejects_paths_outside_project(tmp_path, materializer):
    project = tmp_path / "proj"
    project.mkdir()
    with pytest.raises(ScaffoldFailed):
        materializer.overlay(project, {"../escape.js": "nope"})
    assert not (tmp_path / "escape.js").exists()


def test_overlay_replaces_scaffold_files(tmp_path, materializer):
    (tmp_path / "package.json").write_text('{"name": "scaffold"}', encoding="utf-8")
    materializer.overlay(tmp_path, {"package.json": '{"name": "generated"}'})
    assert (tmp_path / "package.json").read_text(encoding="utf-8") == '{"name": "generated"}'


def test_next_project_skips_vite_config(tmp_path, materializer):
    result = GenerationResult(files={"app/page.js": "export default 1;"}, project_info=ProjectInfo(framework="next"))
    materializer.materialize(tmp_path, result)
    assert not (tmp_path / "vite.config.js").exists()


def test_validate_build_success_first_try(tmp_path, materializer, runner):
    report = materializer.validate_build(tmp_path)
    assert report.success
    assert report.attempts == 1
    assert runner.commands == [BUILD_COMMAND]


def test_validate_build_repairs_missing_css(tmp_path, materializer, runner):
    component = tmp_path / "src" / "components" / "Card.jsx"
    component.parent.mkdir(parents=True)
    component.write_text("import './Card.css';\nexport default () => null;", encoding="utf-8")
    runner.responses[BUILD_COMMAND] = [
        ProcessResult(
            command=BUILD_COMMAND,
            returncode=1,
            stderr='error: Could not resolve "./Card.css" from "src/components/Card.jsx"',
        ),
        ProcessResult(command=BUILD_COMMAND, returncode=0),
    ]

    report = materializer.validate_build(tmp_path)

    assert report.success
    assert report.attempts == 2
    assert report.repaired == component.parent / "Card.css"
    assert "Card.jsx" in report.repaired.read_text(encoding="utf-8")


def test_validate_build_gives_up_on_other_errors(tmp_path, materializer, runner):
    runner.responses[BUILD_COMMAND] = ProcessResult(command=BUILD_COMMAND, returncode=1, stderr="SyntaxError")
    report = materializer.validate_build(tmp_path)
    assert not report.success
    assert report.attempts == 1
    assert runner.commands == [BUILD_COMMAND]
