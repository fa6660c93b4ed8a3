"""FastAPI backend for Shipwright: prompt in, generated (and deployed) project out."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from shipwright import __version__
from shipwright.config import get_settings
from shipwright.errors import InvalidRequest, NotFound, ShipwrightError
from shipwright.jobs import shutdown_orchestrator

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Generated projects directory: %s", settings.output_dir)
    if settings.vercel_token:
        logger.info("Vercel deployment is enabled")
    else:
        logger.warning("Vercel deployment is disabled (VERCEL_TOKEN not set)")
    yield
    shutdown_orchestrator(wait=False)


app = FastAPI(
    title="Shipwright API",
    description="Generates a complete web project from a prompt, scaffolds it locally and deploys it to Vercel.",
    version=__version__,
    lifespan=lifespan,
)


# ---------------------------------------------------------------------------
# Error envelope: every failure is { success: false, error }
# ---------------------------------------------------------------------------
def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "error": message})


@app.exception_handler(ShipwrightError)
async def shipwright_error_handler(request: Request, exc: ShipwrightError):
    if isinstance(exc, InvalidRequest):
        return _error(400, str(exc))
    if isinstance(exc, NotFound):
        return _error(404, str(exc))
    logger.error("Unhandled %s on %s: %s", exc.__class__.__name__, request.url.path, exc)
    return _error(500, str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = first.get("msg", "Invalid request")
    return _error(400, f"{location}: {message}" if location else message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return _error(500, str(exc) or exc.__class__.__name__)


cors_origins = settings.cors_origin_list
logger.info("CORS configured for origins: %s", cors_origins)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials="*" not in cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
class HealthResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status: str
    output_dir: str


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check endpoint."""
    return HealthResponse(status="ok", output_dir=str(settings.output_dir))


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
from backend.routes import projects  # noqa: E402

app.include_router(projects.router, tags=["projects"])
