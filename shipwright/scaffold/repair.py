"""Best-effort repairs for generated code laid over a scaffold.

Missing stylesheet imports and Vite config gaps are common in model output.
Everything here only adds files or appends missing settings; it never rewrites
a generated file's existing content.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

COMPONENT_SUFFIXES = (".js", ".jsx", ".ts", ".tsx")
SKIP_DIRS = {"node_modules", ".git", "dist", "build", ".next"}

_CSS_IMPORT = re.compile(
    r"""import\s+(?:[\w*{}\s,]+\s+from\s+)?['"](?P<path>\.{1,2}/[^'"]+?\.css)['"]"""
)
_UNRESOLVED_CSS = re.compile(r"""Could not resolve ["'](?P<css>[^"']+?\.css)["']""")
_IMPORTER = re.compile(r"""from ["'](?P<component>[^"']+?)["']""")

VITE_CONFIG_NAMES = ("vite.config.js", "vite.config.ts")
REACT_PLUGIN_IMPORT = "import react from '@vitejs/plugin-react';\n"
DEFAULT_VITE_CONFIG = """import { defineConfig } from 'vite';
import react from '@vitejs/plugin-react';

export default defineConfig({
  plugins: [react()],
  css: {
    modules: false,
  },
});
"""


def _component_files(src_dir: Path) -> list[Path]:
    found: list[Path] = []
    for path in sorted(src_dir.rglob("*")):
        if any(part in SKIP_DIRS for part in path.relative_to(src_dir).parts):
            continue
        if path.is_file() and path.suffix in COMPONENT_SUFFIXES:
            found.append(path)
    return found


def placeholder_stylesheet(component_name: str) -> str:
    """Minimal stylesheet with one rule scoped to the component's class name."""
    return (
        f"/* Auto-generated style file for {component_name} */\n"
        f"\n"
        f".{component_name.lower()} {{\n"
        f"  margin: 1rem 0;\n"
        f"  padding: 1rem;\n"
        f"}}\n"
    )


def reconcile_style_imports(project_dir: Path) -> list[Path]:
    """
    Create placeholder stylesheets for relative CSS imports that point nowhere.

    Scans every component file under ``src/``. Returns the stylesheets written.
    A failure on one import is logged and does not stop the rest.
    """
    project_dir = Path(project_dir).resolve()
    src_dir = project_dir / "src"
    if not src_dir.is_dir():
        logger.info("No src/ directory in %s, skipping style import validation", project_dir)
        return []

    created: list[Path] = []
    for component in _component_files(src_dir):
        try:
            content = component.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning("Could not read %s: %s", component, e)
            continue

        for match in _CSS_IMPORT.finditer(content):
            target = (component.parent / match.group("path")).resolve()
            if target.exists() or target in created:
                continue
            if not target.is_relative_to(project_dir):
                logger.warning("Ignoring CSS import outside the project: %s in %s", match.group("path"), component)
                continue
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                target.write_text(placeholder_stylesheet(component.stem), encoding="utf-8")
            except OSError as e:
                logger.warning("Failed to create missing style file %s: %s", target, e)
                continue
            logger.info("Created missing style file %s imported by %s", target, component.name)
            created.append(target)

    return created


def _add_react_plugin(config: str) -> str:
    if "@vitejs/plugin-react" in config:
        return config

    if "defineConfig({" in config:
        config = config.replace("defineConfig({", "defineConfig({\n  plugins: [react()],", 1)

    if "import react from" not in config:
        last_import = config.rfind("import")
        end_of_import = config.find("\n", last_import) if last_import != -1 else -1
        if end_of_import != -1:
            config = config[: end_of_import + 1] + REACT_PLUGIN_IMPORT + config[end_of_import + 1:]
        else:
            config = REACT_PLUGIN_IMPORT + config
    return config


def _disable_css_modules(config: str) -> str:
    if "css:" in config or "plugins: [react()]" not in config:
        return config
    return config.replace(
        "plugins: [react()]",
        "plugins: [react()],\n  css: {\n    modules: false,\n  }",
        1,
    )


def ensure_vite_config(project_dir: Path) -> Path:
    """
    Make sure a Vite config registers the React plugin and disables CSS modules.

    Writes a default ``vite.config.js`` when none exists; otherwise patches the
    existing file only where those settings are missing.
    """
    project_dir = Path(project_dir)
    existing = [project_dir / name for name in VITE_CONFIG_NAMES if (project_dir / name).exists()]

    if not existing:
        path = project_dir / "vite.config.js"
        path.write_text(DEFAULT_VITE_CONFIG, encoding="utf-8")
        logger.info("No Vite config found, created %s", path.name)
        return path

    path = existing[0]
    original = path.read_text(encoding="utf-8")
    patched = _disable_css_modules(_add_react_plugin(original))
    if patched != original:
        path.write_text(patched, encoding="utf-8")
        logger.info("Updated %s", path.name)
    return path


def find_missing_css(build_output: str) -> tuple[str, str] | None:
    """Return ``(missing_css, importing_component)`` from a bundler error, if present."""
    css = _UNRESOLVED_CSS.search(build_output)
    if not css:
        return None
    importer = _IMPORTER.search(build_output, css.end())
    if not importer:
        return None
    return css.group("css"), importer.group("component")


def locate_component(project_dir: Path, component: str) -> Path | None:
    """Find the importing component on disk, trying common source extensions."""
    project_dir = Path(project_dir)
    raw = Path(component)
    bases = [raw] if raw.is_absolute() else [project_dir / raw, project_dir / "src" / raw]

    for base in bases:
        if base.suffix in COMPONENT_SUFFIXES and base.is_file():
            return base
        for ext in (".jsx", ".js", ".tsx", ".ts"):
            candidate = base.with_name(base.name + ext)
            if candidate.is_file():
                return candidate
    return None


def repair_missing_css(project_dir: Path, build_output: str) -> Path | None:
    """
    Write an empty stylesheet beside the component named in a build error.

    Returns the stylesheet path, or None when the error is not a missing-CSS
    error or the component cannot be found.
    """
    found = find_missing_css(build_output)
    if not found:
        return None
    missing_css, component = found
    logger.info("Identified missing CSS file %s imported from %s", missing_css, component)

    component_path = locate_component(project_dir, component)
    if component_path is None:
        logger.warning("Could not locate component %s for missing CSS %s", component, missing_css)
        return None

    css_path = component_path.parent / Path(missing_css).name
    css_path.write_text(f"/* Auto-generated CSS file for {component_path.name} */\n", encoding="utf-8")
    logger.info("Created missing CSS file %s", css_path)
    return css_path
