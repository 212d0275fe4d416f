"""OpenRouter chat client acting as the per-unit processor."""

from __future__ import annotations

import base64
from dataclasses import dataclass
import logging
import time
from typing import Any, Callable

from manualgen.generation.config import GenerationSettings, ManualConfig
from manualgen.generation.prompt import build_prompt
from manualgen.generation.replacements import apply_replacements
from manualgen.segmentation.models import Unit

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


@dataclass(slots=True)
class GenerationRequestError(RuntimeError):
    """Domain error raised for failed text generation requests."""

    model: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (model={self.model})"


def _build_default_client(settings: GenerationSettings) -> Any:
    try:
        from openai import OpenAI
    except Exception as exc:  # pragma: no cover - environment-dependent
        raise GenerationRequestError(
            model=settings.model,
            message=f"OpenAI SDK unavailable for OpenRouter client: {exc}",
        ) from exc

    return OpenAI(
        api_key=settings.api_key,
        base_url=settings.base_url,
        timeout=settings.request_timeout_seconds,
    )


def _is_retryable(exc: Exception) -> bool:
    status_code = getattr(exc, "status_code", None)
    if status_code in _RETRYABLE_STATUS_CODES:
        return True

    if isinstance(exc, (TimeoutError, ConnectionError)):
        return True

    return type(exc).__name__ in {
        "RateLimitError",
        "APITimeoutError",
        "APIConnectionError",
        "InternalServerError",
    }


def _extract_text(response: Any, *, model: str) -> str:
    choices = getattr(response, "choices", None)
    if not isinstance(choices, list) or not choices:
        raise GenerationRequestError(model=model, message="Generation response missing choices")

    first = choices[0]
    message = getattr(first, "message", None)
    content = getattr(message, "content", None) if message is not None else None
    if content is None and isinstance(first, dict):
        message_dict = first.get("message", {})
        if isinstance(message_dict, dict):
            content = message_dict.get("content")

    if isinstance(content, list):
        content = "".join(str(part.get("text", "")) for part in content if isinstance(part, dict))

    text = str(content or "").strip()
    if not text:
        raise GenerationRequestError(model=model, message="Generation response returned empty text")
    return text


def _file_part(unit: Unit) -> dict[str, Any]:
    encoded = base64.b64encode(unit.payload).decode("ascii")
    return {
        "type": "file",
        "file": {
            "filename": unit.name,
            "file_data": f"data:application/pdf;base64,{encoded}",
        },
    }


class OpenRouterUnitProcessor:
    """Send one PDF unit plus the generation prompt and return Markdown."""

    def __init__(
        self,
        settings: GenerationSettings,
        config: ManualConfig,
        *,
        client: Any | None = None,
        max_retries: int = 2,
        retry_base_seconds: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries cannot be negative")
        if retry_base_seconds < 0:
            raise ValueError("retry_base_seconds cannot be negative")

        self._settings = settings
        self._config = config
        self._prompt = build_prompt(config)
        self._client = client or _build_default_client(settings)
        self._max_retries = max_retries
        self._retry_base_seconds = retry_base_seconds
        self._sleep = sleep

    @property
    def model(self) -> str:
        return self._settings.model

    @property
    def prompt(self) -> str:
        return self._prompt

    def __call__(self, unit: Unit) -> str:
        return self.generate(unit)

    def generate(self, unit: Unit) -> str:
        if not unit.payload:
            raise ValueError("unit payload cannot be empty")

        started = time.perf_counter()
        response = self._request_generation(unit)
        text = _extract_text(response, model=self._settings.model)
        logger.info(
            "Generated %d chars for %s in %.1fs",
            len(text),
            unit.name,
            time.perf_counter() - started,
        )
        return apply_replacements(text, self._config.replacements)

    def _request_generation(self, unit: Unit) -> Any:
        attempts = self._max_retries + 1
        last_error: Exception | None = None
        messages = [
            {
                "role": "user",
                "content": [
                    _file_part(unit),
                    {"type": "text", "text": self._prompt},
                ],
            }
        ]

        for attempt in range(attempts):
            try:
                return self._client.chat.completions.create(model=self._settings.model, messages=messages)
            except Exception as exc:  # pragma: no cover - covered via tests with stubs
                last_error = exc
                should_retry = attempt < self._max_retries and _is_retryable(exc)
                if not should_retry:
                    break
                delay = self._retry_base_seconds * (2**attempt)
                logger.warning("Retrying %s in %.1fs after error: %s", unit.name, delay, exc)
                self._sleep(delay)

        detail = str(last_error) if last_error is not None else "unknown OpenRouter error"
        raise GenerationRequestError(
            model=self._settings.model,
            message=f"Generation request failed after {attempts} attempt(s): {detail}",
        ) from last_error
