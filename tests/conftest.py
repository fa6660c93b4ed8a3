"""Pytest configuration and shared fixtures."""

from dataclasses import dataclass
from pathlib import Path

import pytest

from shipwright.config import Settings
from shipwright.jobs import InMemoryJobStore, JobOrchestrator
from shipwright.scaffold import ProcessResult, ScaffoldMaterializer

COUNTER_APP_RESPONSE = """Here is your counter app.

```json
// filename: package.json
{
  "name": "counter-app",
  "private": true,
  "scripts": { "dev": "vite", "build": "vite build" },
  "dependencies": { "react": "^18.2.0", "react-dom": "^18.2.0" }
}
```

```jsx
// filename: src/App.jsx
import { useState } from 'react';
import './App.css';

export default function App() {
  const [count, setCount] = useState(0);
  return <button onClick={() => setCount(count + 1)}>Count: {count}</button>;
}
```

```jsx
// filename: src/main.jsx
import React from 'react';
import ReactDOM from 'react-dom/client';
import App from './App';

ReactDOM.createRoot(document.getElementById('root')).render(<App />);
```
"""


@dataclass
class Call:
    command: str
    cwd: Path
    timeout: float | None
    redact: tuple


class FakeRunner:
    """
    Records every command instead of running it.

    ``responses`` maps a command prefix to a ProcessResult, a callable
    ``(command, cwd) -> ProcessResult``, or a list of either (consumed in
    order, the last one repeating). Unmatched commands succeed.
    """

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.calls: list[Call] = []

    @property
    def commands(self) -> list[str]:
        return [c.command for c in self.calls]

    def run(self, command, cwd, timeout=None, redact=()):
        cwd = Path(cwd)
        self.calls.append(Call(command, cwd, timeout, tuple(redact)))
        for prefix, response in self.responses.items():
            if not command.startswith(prefix):
                continue
            if isinstance(response, list):
                response = response.pop(0) if len(response) > 1 else response[0]
            if callable(response):
                response = response(command, cwd)
            return response
        return ProcessResult(command=command, returncode=0)


class FakeBackend:
    """Generation backend returning a canned answer."""

    def __init__(self, text: str = COUNTER_APP_RESPONSE, name: str = "openai"):
        self.text = text
        self.name = name
        self.prompts: list[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.text


class RecordingStore(InMemoryJobStore):
    """In-memory store that remembers every status a job passed through."""

    def __init__(self):
        super().__init__()
        self.history: dict[str, list[str]] = {}

    def create(self, job):
        self.history[job.id] = [job.status.value]
        return super().create(job)

    def update(self, job_id, **fields):
        job = super().update(job_id, **fields)
        if "status" in fields:
            self.history[job_id].append(job.status.value)
        return job


def write_vite_scaffold(command, cwd):
    """Stand-in for create-vite: lays down a minimal React template."""
    (cwd / "package.json").write_text('{"name": "scaffold"}', encoding="utf-8")
    (cwd / "index.html").write_text("<div id=\"root\"></div>", encoding="utf-8")
    (cwd / "node_modules" / "react").mkdir(parents=True, exist_ok=True)
    (cwd / "node_modules" / "react" / "index.js").write_text("module.exports = {};", encoding="utf-8")
    return ProcessResult(command=command, returncode=0)


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the environment: no credentials, output under tmp_path."""
    return Settings(
        _env_file=None,
        shipwright_output_dir=str(tmp_path / "generated_projects"),
        shipwright_default_provider="openai",
        openai_api_key=None,
        assistant_id=None,
        anthropic_api_key=None,
        google_api_key=None,
        vercel_token=None,
        shipwright_max_workers=2,
    )


@pytest.fixture
def runner():
    return FakeRunner({"npx create-vite@latest": write_vite_scaffold})


@pytest.fixture
def materializer(runner):
    return ScaffoldMaterializer(runner=runner)


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def store():
    return RecordingStore()


@pytest.fixture
def make_orchestrator(settings, store, materializer):
    """Build orchestrators wired to fakes; shut down their executors afterwards."""
    created: list[JobOrchestrator] = []

    def _make(backend=None, deployer=None, providers=("openai", "gemini", "claude")):
        backend = backend or FakeBackend()
        orchestrator = JobOrchestrator(
            settings,
            store=store,
            backend_factory=lambda name: backend,
            available_providers=providers,
            materializer=materializer,
            deployer=deployer,
        )
        created.append(orchestrator)
        return orchestrator

    yield _make
    for orchestrator in created:
        orchestrator.shutdown(wait=True)
