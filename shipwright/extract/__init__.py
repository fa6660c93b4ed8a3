"""Code-block extraction from generated text to files plus project metadata."""

from shipwright.extract.code_blocks import extension_for_language, extract_code_blocks, infer_project_info
from shipwright.extract.models import GenerationResult, ProjectInfo

__all__ = [
    "GenerationResult",
    "ProjectInfo",
    "extension_for_language",
    "extract_code_blocks",
    "infer_project_info",
]
