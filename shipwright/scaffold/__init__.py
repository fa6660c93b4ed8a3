"""Scaffold materialisation: external generators, file overlay, repairs and build check."""

from shipwright.scaffold.listing import is_text_file, list_project_files, read_text_contents
from shipwright.scaffold.materializer import BuildReport, ScaffoldMaterializer, scaffold_command
from shipwright.scaffold.process import ProcessResult, ProcessRunner, SubprocessRunner

__all__ = [
    "BuildReport",
    "ProcessResult",
    "ProcessRunner",
    "ScaffoldMaterializer",
    "SubprocessRunner",
    "is_text_file",
    "list_project_files",
    "read_text_contents",
    "scaffold_command",
]
