"""Google Gemini backend over the Generative Language REST API."""

from __future__ import annotations

import logging

import httpx

from shipwright.errors import GenerationFailed
from shipwright.llm.base import build_generation_prompt

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class GeminiProvider:
    """Single-shot ``generateContent`` call."""

    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.0-flash",
        timeout: float = 300.0,
        base_url: str = GEMINI_API_BASE,
        transport: httpx.BaseTransport | None = None,
    ):
        self._api_key = api_key
        self._model = model
        self._timeout = timeout
        self._base_url = base_url.rstrip("/")
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(self._timeout, connect=10.0),
            transport=self._transport,
        )

    @staticmethod
    def _extract_text(data: dict) -> str:
        """Concatenate the text parts of the first candidate."""
        candidates = data.get("candidates") or []
        if not candidates:
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(p.get("text", "") for p in parts)

    def generate(self, prompt: str) -> str:
        payload = {"contents": [{"role": "user", "parts": [{"text": build_generation_prompt(prompt)}]}]}
        logger.info("Sending prompt to Gemini model %s", self._model)
        try:
            with self._client() as client:
                response = client.post(
                    f"/models/{self._model}:generateContent",
                    json=payload,
                    headers={"x-goog-api-key": self._api_key},
                )
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            raise GenerationFailed(f"Request to Gemini timed out after {self._timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise GenerationFailed(
                f"Gemini returned HTTP {e.response.status_code}: {e.response.text[:300]}"
            ) from e
        except httpx.HTTPError as e:
            raise GenerationFailed(f"Gemini request failed: {e}") from e

        text = self._extract_text(data)
        if not text:
            raise GenerationFailed("Received empty response from Gemini API")
        return text
