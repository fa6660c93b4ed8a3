"""Project-generation jobs: schema, storage and the background orchestrator."""

from shipwright.jobs.models import Job, JobStatus, JobStatusView, TERMINAL_STATES
from shipwright.jobs.orchestrator import (
    NO_DEPLOYMENT_MESSAGE,
    JobOrchestrator,
    get_orchestrator,
    shutdown_orchestrator,
)
from shipwright.jobs.store import InMemoryJobStore, InvalidTransition, JobStore

__all__ = [
    "NO_DEPLOYMENT_MESSAGE",
    "TERMINAL_STATES",
    "InMemoryJobStore",
    "InvalidTransition",
    "Job",
    "JobOrchestrator",
    "JobStatus",
    "JobStatusView",
    "JobStore",
    "get_orchestrator",
    "shutdown_orchestrator",
]
