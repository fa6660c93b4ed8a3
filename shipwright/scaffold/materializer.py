"""Scaffold a project with the ecosystem's own generator, then lay generated files over it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from shipwright.errors import ScaffoldFailed
from shipwright.extract.models import GenerationResult, ProjectInfo
from shipwright.scaffold.process import ProcessResult, ProcessRunner, SubprocessRunner
from shipwright.scaffold.repair import ensure_vite_config, reconcile_style_imports, repair_missing_css

logger = logging.getLogger(__name__)

BUILD_COMMAND = "npm run build"
TAILWIND_COMMANDS = (
    "npm install -D tailwindcss postcss autoprefixer",
    "npx tailwindcss init -p",
)


def scaffold_command(info: ProjectInfo) -> str:
    """Pick the generator for ``(framework, language)``; always targets the current directory."""
    typescript = info.language == "typescript"
    if info.framework == "next":
        template = " --typescript" if typescript else ""
        return f"npx create-next-app@latest .{template} --eslint --use-npm --src-dir --app --tailwind=false"
    template = "react-ts" if typescript else "react"
    return f"npx create-vite@latest . --template {template}"


@dataclass
class BuildReport:
    """Result of the build-validate-repair loop."""

    success: bool
    attempts: int
    repaired: Path | None = None
    output: str = ""


class ScaffoldMaterializer:
    """
    Turn a GenerationResult into a project directory.

    Scaffold and overlay failures raise ScaffoldFailed. The repair steps after
    that are best-effort: they log and carry on.
    """

    def __init__(
        self,
        runner: ProcessRunner | None = None,
        scaffold_timeout: float = 600,
        install_timeout: float = 600,
        build_timeout: float = 300,
    ):
        self.runner = runner or SubprocessRunner()
        self.scaffold_timeout = scaffold_timeout
        self.install_timeout = install_timeout
        self.build_timeout = build_timeout

    def _require(self, result: ProcessResult, what: str) -> None:
        if not result.ok:
            detail = result.output[-1000:] or f"exit code {result.returncode}"
            raise ScaffoldFailed(f"{what} failed (`{result.command}`): {detail}")

    def scaffold(self, project_dir: Path, info: ProjectInfo) -> None:
        command = scaffold_command(info)
        logger.info("Scaffolding new project with: %s", command)
        self._require(self.runner.run(command, cwd=project_dir, timeout=self.scaffold_timeout), "Scaffolding")

        if info.css_framework == "tailwind" and info.framework != "next":
            logger.info("Installing Tailwind CSS...")
            for extra in TAILWIND_COMMANDS:
                self._require(self.runner.run(extra, cwd=project_dir, timeout=self.install_timeout), "Tailwind setup")

    def overlay(self, project_dir: Path, files: dict[str, str]) -> list[Path]:
        """Write every generated file, replacing scaffold files of the same path."""
        root = Path(project_dir).resolve()
        written: list[Path] = []
        for filename, content in files.items():
            target = (root / filename).resolve()
            if not target.is_relative_to(root) or target == root:
                raise ScaffoldFailed(f"Refusing to write outside the project directory: {filename}")
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(content, encoding="utf-8")
            except OSError as e:
                raise ScaffoldFailed(f"Could not write {filename}: {e}") from e
            logger.debug("Added file: %s", filename)
            written.append(target)
        logger.info("Added %d generated files to %s", len(written), root)
        return written

    def repair(self, project_dir: Path, info: ProjectInfo) -> None:
        """Style-import reconciliation and, on the Vite path, config normalisation."""
        try:
            reconcile_style_imports(project_dir)
        except Exception as e:
            logger.warning("Style import validation failed (non-fatal): %s", e)

        if info.framework == "next":
            return
        try:
            ensure_vite_config(project_dir)
        except Exception as e:
            logger.warning("Vite config normalisation failed (non-fatal): %s", e)

    def materialize(self, project_dir: Path, result: GenerationResult) -> None:
        project_dir = Path(project_dir)
        project_dir.mkdir(parents=True, exist_ok=True)
        self.scaffold(project_dir, result.project_info)
        self.overlay(project_dir, result.files)
        self.repair(project_dir, result.project_info)

    def validate_build(self, project_dir: Path) -> BuildReport:
        """
        Run the build; on a missing-stylesheet error add the stylesheet and build once more.

        Any other failure, or a second failure, is reported as-is.
        """
        logger.info("Attempting test build to verify project...")
        first = self.runner.run(BUILD_COMMAND, cwd=project_dir, timeout=self.build_timeout)
        if first.ok:
            logger.info("Test build successful")
            return BuildReport(success=True, attempts=1, output=first.output)

        created = repair_missing_css(project_dir, first.output)
        if created is None:
            logger.error("Test build failed: %s", first.output[-1000:])
            return BuildReport(success=False, attempts=1, output=first.output)

        second = self.runner.run(BUILD_COMMAND, cwd=project_dir, timeout=self.build_timeout)
        if second.ok:
            logger.info("Second build attempt successful after fixing CSS")
        else:
            logger.error("Second build attempt still failed: %s", second.output[-1000:])
        return BuildReport(success=second.ok, attempts=2, repaired=created, output=second.output)
