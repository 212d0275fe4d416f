"""Unit processor boundary: configuration, prompt and OpenRouter client."""

from .config import GenerationSettings, ManualConfig, ReplacementRule, Tone
from .openrouter import GenerationRequestError, OpenRouterUnitProcessor
from .prompt import build_prompt
from .replacements import apply_replacements, load_replacement_rules

__all__ = [
    "GenerationRequestError",
    "GenerationSettings",
    "ManualConfig",
    "OpenRouterUnitProcessor",
    "ReplacementRule",
    "Tone",
    "apply_replacements",
    "build_prompt",
    "load_replacement_rules",
]
