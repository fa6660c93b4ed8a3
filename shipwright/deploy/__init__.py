"""Deployment adapter: Vercel CLI."""

from shipwright.deploy.vercel import (
    DeploymentResult,
    VercelDeployer,
    canonicalize_deployment_url,
    parse_deployment_url,
    project_name_for,
)

__all__ = [
    "DeploymentResult",
    "VercelDeployer",
    "canonicalize_deployment_url",
    "parse_deployment_url",
    "project_name_for",
]
