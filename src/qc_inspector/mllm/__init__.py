"""MLLM clients for QC defect analysis."""
from .echo import EchoMLLM
from .base import (
    BaseLLMClient,
    SYSTEM_INSTRUCTION,
    build_prompt,
    build_reference_context,
)
from .factory import get_llm_client, MODEL_REGISTRY, list_llm_models

__all__ = [
    "EchoMLLM",
    "BaseLLMClient",
    "SYSTEM_INSTRUCTION",
    "build_prompt",
    "build_reference_context",
    # Factory
    "get_llm_client",
    "MODEL_REGISTRY",
    "list_llm_models",
    # Lazy-loaded clients
    "get_gemini_client",
]


# Lazy import (avoid import errors if google-generativeai is not installed)
def get_gemini_client(*args, **kwargs):
    """Get Gemini client."""
    from .gemini_client import GeminiClient
    return GeminiClient(*args, **kwargs)
