import logging
from typing import Any, Dict

from google import genai
from google.genai import types

from services.errors import AIUnavailable

logger = logging.getLogger(__name__)


class GeminiClient:
    """generate(model, prompt, params) backed by the google-genai SDK"""

    def __init__(self, api_key: str = None):
        self.client = genai.Client(api_key=api_key) if api_key else None
        if self.client is None:
            logger.warning("GOOGLE_AI_API_KEY not set; AI endpoints will report the service as unavailable")

    def generate(self, model: str, prompt: str, params: Dict[str, Any]) -> str:
        if self.client is None:
            raise AIUnavailable("AI service is not configured", detail="GOOGLE_AI_API_KEY is not set")

        response = self.client.models.generate_content(
            model=model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=params.get("temperature"),
                max_output_tokens=params.get("max_output_tokens"),
            ),
        )
        logger.info(f"Gemini response received ({len(response.text or '')} characters)")
        return response.text
