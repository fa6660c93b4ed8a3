"""OpenAI Assistants backend: create thread, start run, poll until terminal."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from openai import OpenAI, OpenAIError

from shipwright.errors import GenerationFailed, GenerationTimeout
from shipwright.llm.base import build_generation_prompt

logger = logging.getLogger(__name__)

TERMINAL_RUN_STATES = ("completed", "failed", "cancelled", "expired")


class OpenAIAssistantProvider:
    """Runs the prompt through a pre-configured OpenAI Assistant.

    The run is polled every ``poll_interval`` seconds for at most
    ``max_poll_attempts`` attempts.
    """

    name = "openai"

    def __init__(
        self,
        assistant_id: str,
        api_key: str | None = None,
        poll_interval: float = 2.0,
        max_poll_attempts: int = 300,
        client: Any = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._client = client if client is not None else OpenAI(api_key=api_key)
        self._assistant_id = assistant_id
        self._poll_interval = poll_interval
        self._max_poll_attempts = max_poll_attempts
        self._sleep = sleep

    def generate(self, prompt: str) -> str:
        threads = self._client.beta.threads
        try:
            thread = threads.create()
            threads.messages.create(
                thread_id=thread.id,
                role="user",
                content=build_generation_prompt(prompt),
            )
            run = threads.runs.create(thread_id=thread.id, assistant_id=self._assistant_id)
            logger.info("Started assistant run %s on thread %s", run.id, thread.id)

            final_status = self._poll_for_run_completion(thread.id, run.id)
            if final_status != "completed":
                raise GenerationFailed(f"Assistant Run failed: {final_status}")

            return self._latest_assistant_text(thread.id)
        except OpenAIError as e:
            raise GenerationFailed(f"OpenAI API error: {str(e)[:300]}") from e

    def _poll_for_run_completion(self, thread_id: str, run_id: str) -> str:
        """Return the run's terminal status; raise GenerationTimeout past the attempt bound."""
        for attempt in range(1, self._max_poll_attempts + 1):
            run = self._client.beta.threads.runs.retrieve(run_id=run_id, thread_id=thread_id)

            if run.status in TERMINAL_RUN_STATES:
                logger.info("Run %s finished with status %s after %d polls", run_id, run.status, attempt)
                return run.status

            # Tool calls are not supported; a run waiting on one is treated as failed.
            if run.status == "requires_action":
                logger.error("Run %s requires action - not supported", run_id)
                return "failed"

            self._sleep(self._poll_interval)

        raise GenerationTimeout(
            f"Run polling timed out after {self._max_poll_attempts} attempts "
            f"({self._max_poll_attempts * self._poll_interval:.0f}s)"
        )

    def _latest_assistant_text(self, thread_id: str) -> str:
        messages = self._client.beta.threads.messages.list(thread_id=thread_id)
        for message in messages.data:
            if message.role != "assistant":
                continue
            parts = [part.text.value for part in message.content if part.type == "text"]
            return "".join(parts)
        raise GenerationFailed("No assistant message found in thread")
