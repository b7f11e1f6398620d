"""Google Gemini client for QC defect analysis."""
from __future__ import annotations

import logging
import os
import time
from typing import Optional, TypedDict

from ..common.errors import AnalysisError
from .base import BaseLLMClient, SYSTEM_INSTRUCTION

logger = logging.getLogger(__name__)


class DefectReportSchema(TypedDict):
    """Response schema used when structured output is enabled."""
    defect_type: str
    category: str
    evidence: str
    recommendations: str


class GeminiClient(BaseLLMClient):
    """Gemini vision client.

    Sampling is kept near-deterministic (temperature 0.1, top_p 0.9) so the
    tagged reply format stays stable across calls.

    Get API key from: https://aistudio.google.com/app/apikey
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = "gemini-3-flash-preview",
        temperature: float = 0.1,
        top_p: float = 0.9,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY", "")
        self.model_name = model
        self.temperature = temperature
        self.top_p = top_p

        if not self.api_key:
            raise ValueError(
                "Google API key not provided. "
                "Set GOOGLE_API_KEY env var or pass api_key. "
                "Get a key from: https://aistudio.google.com/app/apikey"
            )

        self._model = None

    def _load_model(self):
        """Lazy load Gemini model."""
        if self._model is not None:
            return

        try:
            import google.generativeai as genai
        except ImportError:
            raise ImportError(
                "Please install google-generativeai: pip install google-generativeai"
            )

        genai.configure(api_key=self.api_key)
        self._model = genai.GenerativeModel(
            model_name=self.model_name,
            system_instruction=SYSTEM_INSTRUCTION,
        )

    def generation_config(self) -> dict:
        config = {"temperature": self.temperature, "top_p": self.top_p}
        if self.structured_output:
            config["response_mime_type"] = "application/json"
            config["response_schema"] = DefectReportSchema
        return config

    def send_request(self, payload: dict) -> str:
        """Send request to Gemini API.

        A single attempt unless ``max_retries`` > 1, then exponential backoff.
        """
        self._load_model()
        contents = [payload["image"], payload["prompt"]]

        retry_delay = 1
        retries = 0
        while True:
            try:
                before = time.time()
                response = self._model.generate_content(
                    contents,
                    generation_config=self.generation_config(),
                )
                self.api_time_cost += time.time() - before
                return _response_text(response)
            except Exception as e:
                retries += 1
                if retries >= self.max_retries:
                    raise AnalysisError(f"Gemini request failed: {e}") from e
                logger.warning("Gemini request failed (%d/%d): %s", retries, self.max_retries, e)
                time.sleep(retry_delay)
                retry_delay *= 2


def _response_text(response) -> str:
    # .text raises ValueError when the reply carries no text part (e.g. blocked)
    try:
        return response.text or ""
    except ValueError:
        return ""
