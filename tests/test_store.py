"""Tests for the job status graph and the in-memory job store."""

import pytest

from shipwright.jobs import InMemoryJobStore, InvalidTransition, Job, JobStatus, JobStatusView


def _job(job_id="abc123"):
    return Job(id=job_id, prompt="counter app", provider="openai", output_dir=f"generated_projects/{job_id}")


def test_forward_transitions():
    assert JobStatus.PENDING.can_transition_to(JobStatus.GENERATING)
    assert JobStatus.SCAFFOLDING.can_transition_to(JobStatus.COMPLETED_WITHOUT_DEPLOYMENT)
    assert JobStatus.DEPLOYING.can_transition_to(JobStatus.DEPLOYMENT_FAILED)
    assert JobStatus.GENERATING.can_transition_to(JobStatus.FAILED)


def test_no_regression_or_skips():
    assert not JobStatus.SCAFFOLDING.can_transition_to(JobStatus.GENERATING)
    assert not JobStatus.PENDING.can_transition_to(JobStatus.SCAFFOLDING)
    assert not JobStatus.GENERATING.can_transition_to(JobStatus.DEPLOYMENT_FAILED)
    for terminal in (JobStatus.COMPLETED, JobStatus.FAILED):
        assert terminal.is_terminal
        assert not terminal.can_transition_to(JobStatus.FAILED)


def test_update_bumps_last_updated_and_completed():
    store = InMemoryJobStore()
    created = store.create(_job())

    store.update("abc123", status=JobStatus.GENERATING)
    job = store.update("abc123", status=JobStatus.FAILED, error="boom")

    assert job.completed
    assert job.error == "boom"
    assert job.last_updated >= created.last_updated
    assert store.get("abc123").status is JobStatus.FAILED


def test_invalid_transition_rejected():
    store = InMemoryJobStore()
    store.create(_job())
    with pytest.raises(InvalidTransition):
        store.update("abc123", status=JobStatus.DEPLOYING)
    assert store.get("abc123").status is JobStatus.PENDING


def test_immutable_and_unknown_fields_rejected():
    store = InMemoryJobStore()
    store.create(_job())
    with pytest.raises(AttributeError):
        store.update("abc123", prompt="something else")
    with pytest.raises(AttributeError):
        store.update("abc123", status=JobStatus.GENERATING, colour="blue")
    assert store.get("abc123").status is JobStatus.PENDING


def test_unknown_job_and_duplicate_id():
    store = InMemoryJobStore()
    store.create(_job())
    with pytest.raises(KeyError):
        store.update("missing", error="x")
    with pytest.raises(ValueError):
        store.create(_job())
    assert store.get("missing") is None
    assert len(store) == 1


def test_get_returns_snapshot():
    store = InMemoryJobStore()
    store.create(_job())
    snapshot = store.get("abc123")
    snapshot.error = "local edit"
    assert store.get("abc123").error is None


def test_status_view_hides_results_until_completed():
    job = _job()
    job.files = ["package.json"]
    job.file_contents = {"package.json": "{}"}
    view = JobStatusView.from_job(job, include_files=True)
    assert view.files is None
    assert view.output_dir is None

    job.status = JobStatus.COMPLETED_WITHOUT_DEPLOYMENT
    job.completed = True
    job.error = "not deployed"
    data = JobStatusView.from_job(job).model_dump(by_alias=True, exclude_none=True)
    assert data["jobId"] == "abc123"
    assert data["outputDir"] == "generated_projects/abc123"
    assert data["files"] == ["package.json"]
    assert "fileContents" not in data
    assert JobStatusView.from_job(job, include_files=True).file_contents == {"package.json": "{}"}
