"""Vercel deployment through the ``vercel`` CLI."""

from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path

from shipwright.errors import DeploymentFailed
from shipwright.scaffold.materializer import ScaffoldMaterializer
from shipwright.scaffold.process import ProcessRunner, SubprocessRunner

logger = logging.getLogger(__name__)

_URL = re.compile(r"https://[^\s]+")
_PREVIEW_SUFFIX = re.compile(r"-[a-z0-9]+\.vercel\.app")

VERCEL_IGNORE = "README.md\nnode_modules\n.git"
INSTALL_COMMAND = "npm install"
REACT_PLUGIN_COMMAND = "npm install @vitejs/plugin-react --save-dev"


@dataclass
class DeploymentResult:
    url: str
    output: str


def canonicalize_deployment_url(url: str, project_name: str | None = None) -> str:
    """Strip the preview-deployment hash so the stable production URL remains; add a trailing slash.

    ``https://ai-project-abc-xyz12.vercel.app`` -> ``https://ai-project-abc.vercel.app/``

    When ``project_name`` is known and the host starts with it, the host is
    rebuilt from the name so a name that itself contains dashes survives intact.
    """
    url = url.strip()
    if project_name and url.startswith(f"https://{project_name}") and ".vercel.app" in url:
        url = f"https://{project_name}.vercel.app" + url.split(".vercel.app", 1)[1]
    else:
        url = _PREVIEW_SUFFIX.sub(".vercel.app", url, count=1)
    if not url.endswith("/"):
        url += "/"
    return url


def parse_deployment_url(output: str, project_name: str | None = None) -> str | None:
    """First https URL in the CLI output, canonicalised; None when there is none."""
    match = _URL.search(output)
    if not match:
        return None
    return canonicalize_deployment_url(match.group(0), project_name)


def project_name_for(job_id: str) -> str:
    return f"ai-project-{job_id}"


class VercelDeployer:
    """Install, build-check and deploy a generated project to production."""

    def __init__(
        self,
        token: str,
        runner: ProcessRunner | None = None,
        materializer: ScaffoldMaterializer | None = None,
        install_timeout: float = 600,
        deploy_timeout: float = 600,
    ):
        if not token:
            raise ValueError("Vercel token not configured. Cannot deploy project.")
        self._token = token
        self._runner = runner or SubprocessRunner()
        self._materializer = materializer or ScaffoldMaterializer(runner=self._runner)
        self._install_timeout = install_timeout
        self._deploy_timeout = deploy_timeout

    def _install(self, project_dir: Path, command: str) -> None:
        result = self._runner.run(command, cwd=project_dir, timeout=self._install_timeout)
        if not result.ok:
            raise DeploymentFailed(f"`{command}` failed: {result.output[-500:] or result.returncode}")

    def deploy(self, project_dir: Path, project_name: str) -> DeploymentResult:
        """
        Deploy ``project_dir`` under ``project_name``.

        Raises DeploymentFailed on install or CLI failure, or when the CLI
        output holds no URL.
        """
        project_dir = Path(project_dir)
        logger.info("Installing dependencies in %s...", project_dir)
        self._install(project_dir, INSTALL_COMMAND)
        # Generated package.json files often omit the Vite React plugin.
        self._install(project_dir, REACT_PLUGIN_COMMAND)

        report = self._materializer.validate_build(project_dir)
        if not report.success:
            logger.warning("Local build check failed after %d attempt(s); deploying anyway", report.attempts)

        stale_state = project_dir / ".vercel"
        if stale_state.exists():
            logger.info("Removing existing .vercel directory: %s", stale_state)
            try:
                shutil.rmtree(stale_state)
            except OSError as e:
                logger.error("Error removing .vercel directory: %s", e)

        try:
            (project_dir / ".vercelignore").write_text(VERCEL_IGNORE, encoding="utf-8")
        except OSError as e:
            raise DeploymentFailed(f"Could not write .vercelignore: {e}") from e

        command = f"npx vercel deploy --token={self._token} --name={project_name} --yes --prod"
        logger.info("Deploying %s to Vercel...", project_name)
        result = self._runner.run(
            command, cwd=project_dir, timeout=self._deploy_timeout, redact=(self._token,)
        )
        if not result.ok:
            raise DeploymentFailed(
                f"Vercel deployment failed (exit {result.returncode}): {result.output[-500:]}"
            )

        url = parse_deployment_url(result.output, project_name)
        if not url:
            raise DeploymentFailed("Could not extract deployment URL from Vercel output")

        logger.info("Deployment successful: %s", url)
        return DeploymentResult(url=url, output=result.output)
