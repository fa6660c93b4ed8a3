"""Extraction result schema: generated files plus inferred project metadata."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ProjectInfo(BaseModel):
    """What kind of project the generated code targets.

    Fields start at their defaults and are only ever switched on by a positive
    signal in the generated text or its package.json.
    """

    framework: Literal["react", "next"] = "react"
    language: Literal["javascript", "typescript"] = "javascript"
    css_framework: Literal["tailwind"] | None = None
    features: set[str] = Field(default_factory=set)


class GenerationResult(BaseModel):
    """Filename -> content in first-seen order, plus project metadata."""

    files: dict[str, str] = Field(default_factory=dict)
    project_info: ProjectInfo = Field(default_factory=ProjectInfo)
