"""Project-generation job schema, status graph and the public status view."""

from __future__ import annotations

import time
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def now_ms() -> int:
    return int(time.time() * 1000)


class JobStatus(str, Enum):
    PENDING = "pending"
    GENERATING = "generating"
    SCAFFOLDING = "scaffolding"
    DEPLOYING = "deploying"
    COMPLETED = "completed"
    COMPLETED_WITHOUT_DEPLOYMENT = "completed_without_deployment"
    DEPLOYMENT_FAILED = "deployment_failed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES

    def can_transition_to(self, target: "JobStatus") -> bool:
        if self.is_terminal:
            return False
        if target is JobStatus.FAILED:
            return True
        return target in _TRANSITIONS.get(self, ())


TERMINAL_STATES = frozenset({
    JobStatus.COMPLETED,
    JobStatus.COMPLETED_WITHOUT_DEPLOYMENT,
    JobStatus.DEPLOYMENT_FAILED,
    JobStatus.FAILED,
})

_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.GENERATING}),
    JobStatus.GENERATING: frozenset({JobStatus.SCAFFOLDING}),
    JobStatus.SCAFFOLDING: frozenset({JobStatus.DEPLOYING, JobStatus.COMPLETED_WITHOUT_DEPLOYMENT}),
    JobStatus.DEPLOYING: frozenset({
        JobStatus.COMPLETED,
        JobStatus.DEPLOYMENT_FAILED,
        JobStatus.COMPLETED_WITHOUT_DEPLOYMENT,
    }),
}


class Job(BaseModel):
    """One prompt-to-project request, kept in the job store for polling."""

    id: str
    prompt: str
    provider: str
    status: JobStatus = JobStatus.PENDING
    created: int = Field(default_factory=now_ms)
    last_updated: int = Field(default_factory=now_ms)
    completed: bool = False
    output_dir: str = ""
    files: list[str] | None = None
    file_contents: dict[str, str] | None = None
    deployment_url: str | None = None
    deployment_output: str | None = None
    error: str | None = None


class JobStatusView(BaseModel):
    """Externally visible projection of a Job (camelCase on the wire).

    Result fields stay unset until the job is completed.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    job_id: str
    status: str
    created: int
    last_updated: int
    output_dir: str | None = None
    error: str | None = None
    files: list[str] | None = None
    deployment_url: str | None = None
    file_contents: dict[str, str] | None = None

    @classmethod
    def from_job(cls, job: Job, include_files: bool = False) -> "JobStatusView":
        view = cls(
            job_id=job.id,
            status=job.status.value,
            created=job.created,
            last_updated=job.last_updated,
        )
        if job.completed:
            view.output_dir = job.output_dir
            view.error = job.error or None
            view.files = job.files
            view.deployment_url = job.deployment_url
            if include_files and job.file_contents:
                view.file_contents = job.file_contents
        return view
