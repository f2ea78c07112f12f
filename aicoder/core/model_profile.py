"""
Model profiles: sampling and context parameters for a local model.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from loguru import logger

from aicoder.core.errors import InvalidConfigError


@dataclass(frozen=True)
class ModelProfile:
    """Configuration profile for a language model."""
    name: str
    context_window: int
    max_tokens: int
    temperature: float = 0.7
    top_p: float = 0.9
    top_k: int = 40
    num_keep: int = 4

    @classmethod
    def new(cls, name: str, context_window: int, max_tokens: int) -> "ModelProfile":
        return cls(name=name, context_window=context_window, max_tokens=max_tokens)

    def with_temperature(self, temperature: float) -> "ModelProfile":
        """Set temperature, clamped to [0.0, 2.0]."""
        return replace(self, temperature=min(max(temperature, 0.0), 2.0))

    def with_top_p(self, top_p: float) -> "ModelProfile":
        """Set top_p for nucleus sampling, clamped to [0.0, 1.0]."""
        return replace(self, top_p=min(max(top_p, 0.0), 1.0))

    def validate(self) -> None:
        """
        Validate that the profile is sensible.

        Raises:
            InvalidConfigError: On an empty name or inconsistent token limits
        """
        if not self.name:
            raise InvalidConfigError("Model name cannot be empty")
        if self.context_window == 0:
            raise InvalidConfigError("Context window must be > 0")
        if self.max_tokens == 0:
            raise InvalidConfigError("Max tokens must be > 0")
        if self.max_tokens > self.context_window:
            raise InvalidConfigError("Max tokens cannot exceed context window")

    def options(self) -> Dict[str, Any]:
        """Sampling options in the shape the Ollama API expects."""
        return {
            "temperature": self.temperature,
            "top_p": self.top_p,
            "top_k": self.top_k,
            "num_predict": self.max_tokens,
            "num_keep": self.num_keep,
        }


def profile_for(model: str, catalogue: Optional[Dict[str, Any]] = None) -> ModelProfile:
    """
    Build a profile for a model from the YAML catalogue.

    Args:
        model: Model identifier (e.g. "qwen2.5-coder:7b")
        catalogue: Loaded catalogue; defaults to the "models" config

    Returns:
        ModelProfile with catalogue values layered over the defaults
    """
    if catalogue is None:
        from aicoder.config import load_config
        catalogue = load_config("models")

    defaults = dict(catalogue.get("default") or {})
    models = catalogue.get("models") or {}

    entry = models.get(model)
    if entry is None and ":" in model:
        entry = models.get(model.split(":", 1)[0])
    if entry is None:
        logger.debug(f"No catalogue entry for '{model}', using defaults")
        entry = {}

    values = {**defaults, **entry}
    profile = ModelProfile(
        name=model,
        context_window=int(values.get("context_window", 8192)),
        max_tokens=int(values.get("max_tokens", 2048)),
        top_k=int(values.get("top_k", 40)),
        num_keep=int(values.get("num_keep", 4)),
    )
    return (
        profile
        .with_temperature(float(values.get("temperature", 0.7)))
        .with_top_p(float(values.get("top_p", 0.9)))
    )
