"""CLI entry-point: serve the API, generate a project in-process, start a generated project."""

import logging
import subprocess
import time

import typer
from rich.console import Console
from rich.table import Table

from shipwright.config import get_settings
from shipwright.errors import ShipwrightError
from shipwright.jobs import JobOrchestrator, JobStatus
from shipwright.llm import PROVIDERS, available_backends

app = typer.Typer(help="Shipwright: generate, scaffold and deploy web projects from a prompt")

_STATUS_STYLE = {
    JobStatus.COMPLETED: "green",
    JobStatus.COMPLETED_WITHOUT_DEPLOYMENT: "yellow",
    JobStatus.DEPLOYMENT_FAILED: "red",
    JobStatus.FAILED: "red",
}


@app.command()
def serve(
    host: str = typer.Option("0.0.0.0", help="Bind address"),
    port: int = typer.Option(None, help="Port (default from PORT or 3001)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API with uvicorn."""
    import uvicorn

    uvicorn.run("backend.main:app", host=host, port=port or get_settings().port, reload=reload)


@app.command()
def generate(
    prompt: str = typer.Argument(..., help="Description of the project to build"),
    provider: str = typer.Option(None, help="Generation backend: openai | gemini | claude (default from env)"),
    poll: float = typer.Option(1.0, help="Seconds between status checks"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show pipeline logs"),
):
    """Run one project job in-process and print its status transitions."""
    console = Console()
    logging.basicConfig(level=logging.INFO if verbose else logging.WARNING)
    settings = get_settings()
    orchestrator = JobOrchestrator(settings)

    try:
        view = orchestrator.submit(prompt, provider)
    except ShipwrightError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    console.print(f"Job [bold]{view.job_id}[/bold] created")
    last_status = None
    try:
        while True:
            view = orchestrator.query(view.job_id)
            status = JobStatus(view.status)
            if status is not last_status:
                console.print(f"  {status.value}")
                last_status = status
            if status.is_terminal:
                break
            time.sleep(poll)
    finally:
        orchestrator.shutdown(wait=False)

    job = orchestrator.store.get(view.job_id)
    style = _STATUS_STYLE.get(job.status, "white")
    console.print(f"[{style}]Finished: {job.status.value}[/{style}]")
    console.print(f"Output: {settings.output_dir / job.id}")
    if job.files:
        console.print(f"Files: {len(job.files)}")
    if job.deployment_url:
        console.print(f"Deployment: {job.deployment_url}")
    if job.error:
        console.print(f"[{style}]{job.error}[/{style}]")
    if job.status in (JobStatus.FAILED, JobStatus.DEPLOYMENT_FAILED):
        raise typer.Exit(1)


@app.command()
def start(project_id: str = typer.Argument(..., help="Generated project id (job id)")):
    """Install dependencies if needed and run the generated project's dev server."""
    console = Console()
    project_dir = get_settings().output_dir / project_id

    if not project_dir.is_dir():
        console.print(f"[red]Error: Project directory not found: {project_dir}[/red]")
        raise typer.Exit(1)
    if not (project_dir / "package.json").exists():
        console.print("[red]Error: package.json not found in project directory[/red]")
        raise typer.Exit(1)

    console.print(f"Starting project: {project_id}")
    console.print(f"Project path: {project_dir}")

    if not (project_dir / "node_modules").exists():
        console.print("Installing dependencies...")
        code = subprocess.call("npm install", shell=True, cwd=str(project_dir))
        if code != 0:
            console.print(f"[red]Error: npm install failed with code {code}[/red]")
            raise typer.Exit(1)

    console.print("Starting development server...")
    try:
        subprocess.call("npm run dev", shell=True, cwd=str(project_dir))
    except KeyboardInterrupt:
        console.print("\nStopping development server...")


@app.command()
def providers():
    """List generation backends and whether their credentials are configured."""
    console = Console()
    settings = get_settings()
    configured = set(available_backends(settings))

    table = Table(title="Generation backends")
    table.add_column("Provider")
    table.add_column("Configured")
    table.add_column("Default")
    for name in PROVIDERS:
        table.add_row(
            name,
            "[green]yes[/green]" if name in configured else "[red]no[/red]",
            "*" if name == settings.shipwright_default_provider else "",
        )
    console.print(table)
    console.print(f"Vercel deployment: {'enabled' if settings.vercel_token else 'disabled'}")


if __name__ == "__main__":
    app()
