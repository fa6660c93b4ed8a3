"""Job storage: one lock-guarded in-memory map from job id to Job."""

from __future__ import annotations

import threading
from typing import Any, Protocol

from shipwright.jobs.models import Job, JobStatus, now_ms

_IMMUTABLE_FIELDS = ("id", "prompt", "provider", "created", "completed")


class InvalidTransition(ValueError):
    """A status update that would move a job backwards or off the status graph."""


class JobStore(Protocol):
    def create(self, job: Job) -> Job: ...
    def get(self, job_id: str) -> Job | None: ...
    def update(self, job_id: str, **fields: Any) -> Job: ...


class InMemoryJobStore:
    """
    Jobs live for the life of the process; nothing here deletes them.

    ``get`` and ``update`` hand out deep copies, so callers never hold a
    reference another thread is mutating. Every mutation goes through
    ``update`` under the lock.
    """

    def __init__(self) -> None:
        self._jobs: dict[str, Job] = {}
        self._lock = threading.Lock()

    def create(self, job: Job) -> Job:
        with self._lock:
            if job.id in self._jobs:
                raise ValueError(f"Job already exists: {job.id}")
            self._jobs[job.id] = job.model_copy(deep=True)
        return job

    def get(self, job_id: str) -> Job | None:
        with self._lock:
            job = self._jobs.get(job_id)
            return job.model_copy(deep=True) if job else None

    def update(self, job_id: str, **fields: Any) -> Job:
        """Apply ``fields`` to a job, bump ``last_updated`` and keep ``completed`` in step with status."""
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise KeyError(job_id)

            status = fields.pop("status", None)
            for name in fields:
                if name not in Job.model_fields or name in _IMMUTABLE_FIELDS:
                    raise AttributeError(f"Job field cannot be updated: {name}")

            if status is not None:
                status = JobStatus(status)
                if not job.status.can_transition_to(status):
                    raise InvalidTransition(f"Job {job_id}: {job.status.value} -> {status.value} not allowed")
                job.status = status
                if status.is_terminal:
                    job.completed = True

            for name, value in fields.items():
                setattr(job, name, value)

            job.last_updated = max(now_ms(), job.last_updated)
            return job.model_copy(deep=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)
