"""Runtime configuration for manual generation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
import os
from typing import Any, Mapping


DEFAULT_OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_OPENROUTER_CHAT_MODEL = "google/gemini-2.5-flash"
DEFAULT_REQUEST_TIMEOUT_SECONDS = 120.0
DEFAULT_TARGET_LANGUAGE = "Slovak"


class Tone(Enum):
    PROFESSIONAL = "professional"
    TECHNICAL = "technical"
    SIMPLIFIED = "simplified"


@dataclass(frozen=True, slots=True)
class ReplacementRule:
    """Literal substring substitution applied to generated text."""

    match: str
    replace: str

    def to_dict(self) -> dict[str, str]:
        return {"original": self.match, "replacement": self.replace}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReplacementRule":
        original = data.get("original", data.get("match"))
        replacement = data.get("replacement", data.get("replace"))
        if not isinstance(original, str) or not isinstance(replacement, str):
            raise ValueError("Replacement rule needs string 'original' and 'replacement' fields")
        return cls(match=original, replace=replacement)


@dataclass(frozen=True, slots=True)
class ManualConfig:
    """Per-run generation options passed through to the unit processor."""

    target_language: str = DEFAULT_TARGET_LANGUAGE
    tone: Tone = Tone.PROFESSIONAL
    replacements: tuple[ReplacementRule, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.target_language, str) or not self.target_language.strip():
            raise ValueError("targetLanguage must be a non-empty string")

    def to_dict(self) -> dict[str, Any]:
        return {
            "targetLanguage": self.target_language,
            "tone": self.tone.value,
            "replacements": [rule.to_dict() for rule in self.replacements],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ManualConfig":
        tone_raw = data.get("tone", Tone.PROFESSIONAL.value)
        try:
            tone = Tone(tone_raw)
        except ValueError as exc:
            allowed = ", ".join(item.value for item in Tone)
            raise ValueError(f"tone must be one of: {allowed}") from exc

        rules_raw = data.get("replacements", [])
        if not isinstance(rules_raw, list):
            raise ValueError("replacements must be a list")
        rules: list[ReplacementRule] = []
        for item in rules_raw:
            if not isinstance(item, Mapping):
                raise ValueError("replacements must contain only objects")
            rules.append(ReplacementRule.from_dict(item))

        return cls(
            target_language=data.get("targetLanguage", DEFAULT_TARGET_LANGUAGE),
            tone=tone,
            replacements=tuple(rules),
        )


def _parse_positive_float(*, name: str, raw_value: str, minimum: float = 0.001) -> float:
    try:
        value = float(raw_value)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number") from exc
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


@dataclass(frozen=True, slots=True)
class GenerationSettings:
    """Validated OpenRouter settings used by the unit processor."""

    api_key: str
    model: str = DEFAULT_OPENROUTER_CHAT_MODEL
    base_url: str = DEFAULT_OPENROUTER_BASE_URL
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "GenerationSettings":
        source: Mapping[str, str] = os.environ if environ is None else environ

        api_key = source.get("OPENROUTER_API_KEY", "").strip()
        if not api_key:
            raise ValueError("Missing required generation environment variable: OPENROUTER_API_KEY")

        model = source.get("OPENROUTER_CHAT_MODEL", DEFAULT_OPENROUTER_CHAT_MODEL).strip()
        if not model:
            raise ValueError("OPENROUTER_CHAT_MODEL cannot be empty")

        base_url = source.get("OPENROUTER_BASE_URL", DEFAULT_OPENROUTER_BASE_URL).strip()
        if not base_url:
            raise ValueError("OPENROUTER_BASE_URL cannot be empty")
        if not (base_url.startswith("http://") or base_url.startswith("https://")):
            raise ValueError("OPENROUTER_BASE_URL must start with http:// or https://")

        timeout_raw = source.get("MANUALGEN_REQUEST_TIMEOUT_SECONDS", str(DEFAULT_REQUEST_TIMEOUT_SECONDS)).strip()
        if not timeout_raw:
            raise ValueError("MANUALGEN_REQUEST_TIMEOUT_SECONDS cannot be empty")
        timeout = _parse_positive_float(name="MANUALGEN_REQUEST_TIMEOUT_SECONDS", raw_value=timeout_raw, minimum=1.0)

        return cls(api_key=api_key, model=model, base_url=base_url.rstrip("/"), request_timeout_seconds=timeout)
