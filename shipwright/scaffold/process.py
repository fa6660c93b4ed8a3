"""External process capability used for scaffolding, install, build and deploy commands."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, Sequence

logger = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    """Outcome of one shell command."""

    command: str
    returncode: int
    stdout: str = ""
    stderr: str = ""
    timed_out: bool = False

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.timed_out

    @property
    def output(self) -> str:
        """stdout and stderr joined, for error messages and URL scraping."""
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)


class ProcessRunner(Protocol):
    def run(
        self,
        command: str,
        cwd: str | Path,
        timeout: float | None = None,
        redact: Sequence[str] = (),
    ) -> ProcessResult: ...


def mask(text: str, secrets: Sequence[str]) -> str:
    """Replace every secret in ``text`` with ``***``."""
    for secret in secrets:
        if secret:
            text = text.replace(secret, "***")
    return text


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


class SubprocessRunner:
    """Run shell commands in their own process group; on timeout the whole group is killed."""

    def __init__(self, env: dict[str, str] | None = None):
        self._env = {**os.environ, **env} if env else None

    @staticmethod
    def _kill_group(proc: subprocess.Popen) -> None:
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except ProcessLookupError:
            pass

    def run(
        self,
        command: str,
        cwd: str | Path,
        timeout: float | None = None,
        redact: Sequence[str] = (),
    ) -> ProcessResult:
        shown = mask(command, redact)
        logger.info("Running `%s` in %s", shown, cwd)
        proc = subprocess.Popen(
            command,
            shell=True,
            cwd=str(cwd),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            env=self._env,
            start_new_session=True,
        )
        try:
            stdout, stderr = proc.communicate(timeout=timeout)
        except subprocess.TimeoutExpired:
            # The group holds every child the shell started, npm and npx included.
            self._kill_group(proc)
            stdout, stderr = proc.communicate()
            logger.error("Command `%s` timed out after %ss", shown, timeout)
            return ProcessResult(
                command=shown,
                returncode=-1,
                stdout=mask(_decode(stdout), redact),
                stderr=mask(_decode(stderr), redact) + f"\nCommand timed out after {timeout}s: {shown}",
                timed_out=True,
            )
        except BaseException:
            self._kill_group(proc)
            proc.wait()
            raise

        result = ProcessResult(
            command=shown,
            returncode=proc.returncode,
            stdout=mask(stdout or "", redact),
            stderr=mask(stderr or "", redact),
        )
        if not result.ok:
            logger.error("Command `%s` exited with %d: %s", shown, result.returncode, result.stderr[-2000:])
        elif result.stderr:
            logger.warning("Command `%s` stderr: %s", shown, result.stderr[-2000:])
        return result
