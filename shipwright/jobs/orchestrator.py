"""Job orchestrator: submit a prompt, advance it through the pipeline in the background, report status.

Pipeline per job::

    generating   -> backend.generate(prompt) -> extract_code_blocks
    scaffolding  -> scaffold, overlay files, repairs, list files
    deploying    -> Vercel (or completed_without_deployment when no token)

Every stage's status is written before its external calls start, so a poll
never sees an earlier stage once work has begun.
"""

from __future__ import annotations

import logging
import secrets
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Iterable

from shipwright.config import Settings
from shipwright.deploy import VercelDeployer, project_name_for
from shipwright.errors import DeploymentFailed, InvalidRequest, NoFilesExtracted, NotFound, ShipwrightError
from shipwright.extract import extract_code_blocks
from shipwright.jobs.models import Job, JobStatus, JobStatusView
from shipwright.jobs.store import InMemoryJobStore, JobStore
from shipwright.llm import GenerationBackend, available_backends, check_backend, get_backend
from shipwright.scaffold import ScaffoldMaterializer, SubprocessRunner, list_project_files, read_text_contents

logger = logging.getLogger(__name__)

NO_DEPLOYMENT_MESSAGE = "Vercel token not configured. Project generated but not deployed."


def _new_job_id() -> str:
    return secrets.token_hex(8)


class JobOrchestrator:
    """
    Owns the job lifecycle. Collaborators are injected so tests can swap in fakes.

    One background future per job on a thread pool; at most one in flight per id.
    """

    def __init__(
        self,
        settings: Settings,
        store: JobStore | None = None,
        backend_factory: Callable[[str], GenerationBackend] | None = None,
        available_providers: Iterable[str] | None = None,
        materializer: ScaffoldMaterializer | None = None,
        deployer: VercelDeployer | None = None,
        executor: ThreadPoolExecutor | None = None,
    ):
        self._settings = settings
        self._store = store or InMemoryJobStore()
        self._backend_factory = backend_factory or (lambda name: get_backend(name, settings))
        self._available = list(available_providers) if available_providers is not None else None

        runner = materializer.runner if materializer else SubprocessRunner()
        self._materializer = materializer or ScaffoldMaterializer(
            runner=runner,
            scaffold_timeout=settings.shipwright_scaffold_timeout,
            install_timeout=settings.shipwright_install_timeout,
            build_timeout=settings.shipwright_build_timeout,
        )
        if deployer is None and settings.vercel_token:
            deployer = VercelDeployer(
                token=settings.vercel_token,
                runner=runner,
                materializer=self._materializer,
                install_timeout=settings.shipwright_install_timeout,
                deploy_timeout=settings.shipwright_deploy_timeout,
            )
        self._deployer = deployer

        self._executor = executor or ThreadPoolExecutor(
            max_workers=settings.shipwright_max_workers, thread_name_prefix="shipwright-job"
        )
        self._futures: dict[str, Future] = {}
        self._in_flight: set[str] = set()
        self._lock = threading.Lock()

    @property
    def store(self) -> JobStore:
        return self._store

    @property
    def default_provider(self) -> str:
        return self._settings.shipwright_default_provider

    @property
    def deployment_enabled(self) -> bool:
        return self._deployer is not None

    def providers(self) -> list[str]:
        if self._available is not None:
            return list(self._available)
        return available_backends(self._settings)

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def _validate(self, prompt: str | None, provider: str) -> None:
        if not prompt or not prompt.strip():
            raise InvalidRequest("Missing required field: prompt")
        if self._available is None:
            check_backend(provider, self._settings)
        elif provider not in self._available:
            raise InvalidRequest(
                f"Invalid apiProvider. Must be one of: {', '.join(self._available) or '(none configured)'}"
            )

    def submit(self, prompt: str | None, provider: str | None = None) -> JobStatusView:
        """Create a job and schedule it. Returns at once with the job in ``pending``."""
        provider = provider or self.default_provider
        self._validate(prompt, provider)

        job_id = _new_job_id()
        project_dir = self._settings.output_dir / job_id
        project_dir.mkdir(parents=True, exist_ok=True)

        job = Job(
            id=job_id,
            prompt=prompt,
            provider=provider,
            output_dir=f"{self._settings.output_dir.name}/{job_id}",
        )
        self._store.create(job)
        logger.info("Job %s created (provider=%s, output=%s)", job_id, provider, project_dir)

        self._schedule(job_id)
        return JobStatusView.from_job(job)

    def query(self, job_id: str | None, include_files: bool = False) -> JobStatusView:
        if not job_id:
            raise InvalidRequest("Missing required parameter: jobId")
        job = self._store.get(job_id)
        if job is None:
            raise NotFound("Job not found")
        return JobStatusView.from_job(job, include_files=include_files)

    def wait(self, job_id: str, timeout: float | None = None) -> Job:
        """Block until the job's background task has finished; return the final Job."""
        with self._lock:
            future = self._futures.get(job_id)
        if future is not None:
            future.result(timeout=timeout)
        job = self._store.get(job_id)
        if job is None:
            raise NotFound("Job not found")
        return job

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    # ------------------------------------------------------------------
    # Background processing
    # ------------------------------------------------------------------

    def _schedule(self, job_id: str) -> bool:
        with self._lock:
            if job_id in self._in_flight:
                logger.warning("Job %s is already being processed", job_id)
                return False
            self._in_flight.add(job_id)
            future = self._executor.submit(self._run, job_id)
            self._futures[job_id] = future
        return True

    def _run(self, job_id: str) -> None:
        try:
            self._advance(job_id)
        finally:
            with self._lock:
                self._in_flight.discard(job_id)

    def _fail(self, job_id: str, message: str, status: JobStatus = JobStatus.FAILED) -> None:
        job = self._store.get(job_id)
        if job is None or job.status.is_terminal:
            return
        self._store.update(job_id, status=status, error=message)

    def _advance(self, job_id: str) -> None:
        job = self._store.get(job_id)
        if job is None or job.status is not JobStatus.PENDING:
            return
        project_dir = self._settings.output_dir / job_id

        try:
            self._store.update(job_id, status=JobStatus.GENERATING)
            backend = self._backend_factory(job.provider)
            raw_text = backend.generate(job.prompt)

            result = extract_code_blocks(raw_text)
            if not result.files:
                raise NoFilesExtracted("No code files found in API response")
            logger.info("Job %s: extracted %d files (%s)", job_id, len(result.files), result.project_info)

            self._store.update(job_id, status=JobStatus.SCAFFOLDING)
            self._materializer.materialize(project_dir, result)

            files = list_project_files(project_dir)
            contents = read_text_contents(project_dir, files, self._settings.shipwright_max_file_bytes)
            self._store.update(job_id, files=files, file_contents=contents)

            if self._deployer is None:
                logger.info("Job %s: deployment disabled, project kept at %s", job_id, project_dir)
                self._store.update(
                    job_id, status=JobStatus.COMPLETED_WITHOUT_DEPLOYMENT, error=NO_DEPLOYMENT_MESSAGE
                )
                return

            self._store.update(job_id, status=JobStatus.DEPLOYING)
            deployment = self._deployer.deploy(project_dir, project_name_for(job_id))
            self._store.update(
                job_id,
                status=JobStatus.COMPLETED,
                deployment_url=deployment.url,
                deployment_output=deployment.output,
            )
            logger.info("Job %s completed: %s", job_id, deployment.url)

        except DeploymentFailed as e:
            logger.error("Job %s deployment failed: %s", job_id, e)
            self._fail(job_id, str(e), status=JobStatus.DEPLOYMENT_FAILED)
        except ShipwrightError as e:
            logger.error("Job %s failed: %s", job_id, e)
            self._fail(job_id, str(e))
        except Exception as e:
            logger.exception("Job %s processing failed", job_id)
            self._fail(job_id, str(e) or e.__class__.__name__)


_orchestrator: JobOrchestrator | None = None
_orchestrator_lock = threading.Lock()


def get_orchestrator() -> JobOrchestrator:
    """Return the process-wide orchestrator built from settings."""
    global _orchestrator
    with _orchestrator_lock:
        if _orchestrator is None:
            from shipwright.config import get_settings

            _orchestrator = JobOrchestrator(get_settings())
        return _orchestrator


def shutdown_orchestrator(wait: bool = False) -> None:
    global _orchestrator
    with _orchestrator_lock:
        if _orchestrator is not None:
            _orchestrator.shutdown(wait=wait)
            _orchestrator = None
