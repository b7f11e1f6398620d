"""LLM client factory: shared registry and instantiation logic."""
from __future__ import annotations

from .base import BaseLLMClient

MODEL_REGISTRY = {
    # API models - Google Gemini
    "gemini": {"class": "GeminiClient", "model": "gemini-3-flash-preview"},
    "gemini-3-flash": {"class": "GeminiClient", "model": "gemini-3-flash-preview"},
    "gemini-2.5-flash": {"class": "GeminiClient", "model": "gemini-2.5-flash"},
    "gemini-2.5-pro": {"class": "GeminiClient", "model": "gemini-2.5-pro"},

    # Offline
    "echo": {"class": "EchoMLLM", "model": None},
}

# runtime.yaml section holding each client's kwargs; aliases share their client's section
CONFIG_SECTIONS = {
    "GeminiClient": "gemini",
    "EchoMLLM": "echo",
}


def list_llm_models() -> list[str]:
    """Return sorted list of available model names."""
    return sorted(MODEL_REGISTRY.keys())


def config_section(model_name: str) -> str:
    """Name of the config section whose kwargs apply to ``model_name``."""
    model_lower = model_name.lower()
    if model_lower in MODEL_REGISTRY:
        return CONFIG_SECTIONS[MODEL_REGISTRY[model_lower]["class"]]
    if model_lower.startswith("gemini"):
        return CONFIG_SECTIONS["GeminiClient"]
    raise ValueError(f"Unknown model: {model_name}. Available: {list(MODEL_REGISTRY.keys())}")


def get_llm_client(model_name: str, model_path: str = None, **kwargs) -> BaseLLMClient:
    """Factory function to get LLM client by name.

    ``model_path`` overrides the registry's provider model id; names starting
    with ``gemini`` that are not registered are passed through as model ids.
    """
    model_lower = model_name.lower()
    model_path = model_path or kwargs.pop("model", None)

    if model_lower in MODEL_REGISTRY:
        info = MODEL_REGISTRY[model_lower]

        if info["class"] == "GeminiClient":
            from .gemini_client import GeminiClient
            return GeminiClient(model=model_path or info["model"], **kwargs)

        elif info["class"] == "EchoMLLM":
            from .echo import EchoMLLM
            return EchoMLLM(**kwargs)

    if model_lower.startswith("gemini"):
        from .gemini_client import GeminiClient
        return GeminiClient(model=model_path or model_name, **kwargs)

    raise ValueError(f"Unknown model: {model_name}. Available: {list(MODEL_REGISTRY.keys())}")
