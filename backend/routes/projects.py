"""Project generation API: async generation with job polling.

POST /generateProject
  → Creates a Job, returns { jobId, status: "pending", statusUrl } immediately.
  → Background task runs generation → scaffolding → deployment.

GET /getDeploymentStatus?jobId=<id>&includeFiles=<bool>
  → Returns status; output directory, files and deployment URL once completed.
"""

import logging

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shipwright.jobs import JobOrchestrator, JobStatusView, get_orchestrator

logger = logging.getLogger(__name__)
router = APIRouter()


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerateProjectRequest(_CamelModel):
    """Body for POST /generateProject. ``apiProvider`` defaults to the configured backend."""

    prompt: str | None = None
    api_provider: str | None = None


class GenerateProjectResponse(_CamelModel):
    success: bool = True
    message: str = "Project generation and deployment started"
    job_id: str
    status: str
    status_url: str


class ProvidersResponse(_CamelModel):
    success: bool = True
    providers: list[str]
    default_provider: str
    deployment_enabled: bool


@router.post(
    "/generateProject",
    response_model=GenerateProjectResponse,
    summary="Start project generation (async)",
    description="Creates a job and returns immediately. Poll GET /getDeploymentStatus?jobId=... for progress.",
)
async def generate_project(
    request: GenerateProjectRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    view = orchestrator.submit(request.prompt, request.api_provider)
    logger.info("Accepted job %s", view.job_id)
    return GenerateProjectResponse(
        job_id=view.job_id,
        status=view.status,
        status_url=f"/getDeploymentStatus?jobId={view.job_id}",
    )


@router.get(
    "/getDeploymentStatus",
    response_model=JobStatusView,
    response_model_exclude_none=True,
    summary="Get project job status",
    description="Result fields appear once the job is completed; fileContents only with includeFiles=true.",
)
async def get_deployment_status(
    job_id: str | None = Query(default=None, alias="jobId"),
    include_files: bool = Query(default=False, alias="includeFiles"),
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
):
    return orchestrator.query(job_id, include_files=include_files)


@router.get("/providers", response_model=ProvidersResponse, summary="List configured generation backends")
async def list_providers(orchestrator: JobOrchestrator = Depends(get_orchestrator)):
    return ProvidersResponse(
        providers=orchestrator.providers(),
        default_provider=orchestrator.default_provider,
        deployment_enabled=orchestrator.deployment_enabled,
    )
