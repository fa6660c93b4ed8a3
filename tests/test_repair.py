"""Tests for style-import reconciliation, Vite config normalisation and build-error parsing."""

from shipwright.scaffold.repair import (
    DEFAULT_VITE_CONFIG,
    ensure_vite_config,
    find_missing_css,
    locate_component,
    placeholder_stylesheet,
    reconcile_style_imports,
    repair_missing_css,
)


def _write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_missing_css_import_gets_placeholder(tmp_path):
    _write(tmp_path / "src" / "components" / "Button.jsx", "import './Button.css';\nexport default () => null;")
    _write(tmp_path / "src" / "App.jsx", "import styles from '../styles/app.css';\n")

    created = reconcile_style_imports(tmp_path)

    button_css = tmp_path / "src" / "components" / "Button.css"
    assert button_css in created
    assert ".button {" in button_css.read_text(encoding="utf-8")
    assert (tmp_path / "styles" / "app.css").exists()


def test_existing_stylesheet_left_alone(tmp_path):
    _write(tmp_path / "src" / "App.jsx", "import './App.css';\n")
    css = _write(tmp_path / "src" / "App.css", "body { color: red; }")

    assert reconcile_style_imports(tmp_path) == []
    assert css.read_text(encoding="utf-8") == "body { color: red; }"


def test_import_escaping_project_is_ignored(tmp_path):
    project = tmp_path / "proj"
    _write(project / "src" / "App.jsx", "import '../../outside.css';\n")

    assert reconcile_style_imports(project) == []
    assert not (tmp_path / "outside.css").exists()


def test_no_src_directory(tmp_path):
    assert reconcile_style_imports(tmp_path) == []


def test_placeholder_stylesheet_scoped_to_component():
    css = placeholder_stylesheet("TodoList")
    assert "TodoList" in css
    assert ".todolist {" in css


def test_vite_config_created_when_missing(tmp_path):
    path = ensure_vite_config(tmp_path)
    assert path == tmp_path / "vite.config.js"
    assert path.read_text(encoding="utf-8") == DEFAULT_VITE_CONFIG


def test_vite_config_patched_once(tmp_path):
    config = _write(
        tmp_path / "vite.config.js",
        "import { defineConfig } from 'vite'\n\nexport default defineConfig({\n  server: { port: 3000 },\n})\n",
    )

    ensure_vite_config(tmp_path)
    patched = config.read_text(encoding="utf-8")
    assert "import react from '@vitejs/plugin-react';" in patched
    assert "plugins: [react()]" in patched
    assert "modules: false" in patched
    assert "server: { port: 3000 }" in patched

    ensure_vite_config(tmp_path)
    assert config.read_text(encoding="utf-8") == patched


def test_complete_vite_config_untouched(tmp_path):
    config = _write(tmp_path / "vite.config.ts", DEFAULT_VITE_CONFIG)
    assert ensure_vite_config(tmp_path) == config
    assert config.read_text(encoding="utf-8") == DEFAULT_VITE_CONFIG


def test_find_missing_css():
    output = 'x Build failed\nerror: Could not resolve "./Header.css" from "src/Header.jsx"\n'
    assert find_missing_css(output) == ("./Header.css", "src/Header.jsx")
    assert find_missing_css("SyntaxError: Unexpected token") is None


def test_locate_component_tries_extensions(tmp_path):
    component = _write(tmp_path / "src" / "Header.tsx", "export {};")
    assert locate_component(tmp_path, "Header") == component
    assert locate_component(tmp_path, "src/Header.tsx") == component
    assert locate_component(tmp_path, "Missing") is None


def test_repair_missing_css_component_not_found(tmp_path):
    output = 'Could not resolve "./Gone.css" from "src/Gone.jsx"'
    assert repair_missing_css(tmp_path, output) is None
