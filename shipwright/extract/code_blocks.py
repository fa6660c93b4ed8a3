"""Fenced code-block parser for model output.

Grammar of a block::

    block     := "```" lang? WS* directive? WS* body "```"
    lang      := [A-Za-z0-9_+.]+
    directive := ("//" | "#") WS* "filename:" WS* path
    path      := [A-Za-z0-9_\\-./]+

Blocks without any filename signal get a synthetic ``file<N><ext>`` name.
Pure regex, no I/O.
"""

from __future__ import annotations

import re

from shipwright.extract.models import GenerationResult, ProjectInfo

_PATH = r"[A-Za-z0-9_\-./]+"

_BLOCK_PATTERN = re.compile(
    r"```(?P<lang>[A-Za-z0-9_+.]+)?[ \t]*\r?\n?"
    r"\s*(?:(?://|\#)\s*filename:\s*(?P<filename>" + _PATH + r"))?"
    r"\s*(?P<body>.*?)```",
    re.DOTALL,
)
_FIRST_LINE_DIRECTIVE = re.compile(r"^(?://|#|/\*)\s*filename:\s*(" + _PATH + r")")

DEFAULT_LANGUAGE = "txt"
DEFAULT_EXTENSION = ".txt"

LANGUAGE_EXTENSIONS: dict[str, str] = {
    "javascript": ".js",
    "js": ".js",
    "typescript": ".ts",
    "ts": ".ts",
    "jsx": ".jsx",
    "tsx": ".tsx",
    "python": ".py",
    "py": ".py",
    "ruby": ".rb",
    "java": ".java",
    "c": ".c",
    "cpp": ".cpp",
    "csharp": ".cs",
    "cs": ".cs",
    "go": ".go",
    "html": ".html",
    "css": ".css",
    "json": ".json",
    "yaml": ".yml",
    "shell": ".sh",
    "bash": ".sh",
    "php": ".php",
    "swift": ".swift",
    "rust": ".rs",
    "kotlin": ".kt",
    "sql": ".sql",
}


def extension_for_language(language: str) -> str:
    """Map a fence language tag to a file extension (``.txt`` when unknown)."""
    return LANGUAGE_EXTENSIONS.get(language.lower(), DEFAULT_EXTENSION)


def _fallback_filename(language: str, files: dict[str, str]) -> str:
    n = len(files) + 1
    ext = extension_for_language(language)
    while f"file{n}{ext}" in files:
        n += 1
    return f"file{n}{ext}"


def infer_project_info(text: str, files: dict[str, str]) -> ProjectInfo:
    """Detect framework, language and CSS framework from text and package.json."""
    info = ProjectInfo()
    lower = text.lower()
    package_json = files.get("package.json", "")

    if "typescript" in lower or any(name.endswith((".ts", ".tsx")) for name in files):
        info.language = "typescript"
    if "tailwind" in lower or "tailwindcss" in package_json:
        info.css_framework = "tailwind"
    if "next.js" in lower or "next" in package_json:
        info.framework = "next"
    return info


def extract_code_blocks(raw_text: str) -> GenerationResult:
    """
    Parse every fenced code block in ``raw_text`` into a filename -> content map.

    A filename directive right after the opening fence wins; otherwise the first
    body line is checked for the same directive; otherwise a name is synthesised
    from the language tag. A filename seen twice keeps the later block's content.
    Returns an empty mapping (and default metadata) when no block is present.
    """
    files: dict[str, str] = {}

    for match in _BLOCK_PATTERN.finditer(raw_text):
        language = match.group("lang") or DEFAULT_LANGUAGE
        code = match.group("body").strip()

        filename = match.group("filename")
        if not filename:
            first_line = _FIRST_LINE_DIRECTIVE.match(code)
            if first_line:
                filename = first_line.group(1)
            else:
                filename = _fallback_filename(language, files)

        files[filename] = code

    return GenerationResult(files=files, project_info=infer_project_info(raw_text, files))
