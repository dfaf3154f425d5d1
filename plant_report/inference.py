"""Gemini Inference Client Module

Handles communication with the Gemini API for plant image analysis. The
report engine only consumes the returned text.
"""
import base64
import logging
import os
from typing import Dict, Optional

import requests

from .config import (
    ANALYSIS_PROMPT,
    DEFAULT_GEMINI_MODEL,
    GEMINI_API_BASE_URL,
    INFERENCE_TIMEOUT_SECONDS,
)
from .exceptions import InferenceAuthenticationError, InferenceError

logger = logging.getLogger(__name__)


class GeminiAnalyzer:
    """Client for the Gemini generateContent endpoint."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        prompt: str = ANALYSIS_PROMPT,
        timeout: int = INFERENCE_TIMEOUT_SECONDS,
    ):
        """
        Initialize Gemini API client.

        Args:
            api_key: Gemini API key. If None, reads from GEMINI_API_KEY env var.
            model: Model name. If None, reads GEMINI_MODEL or uses gemini-1.5-flash.
            prompt: Instruction sent along with the image
            timeout: Request timeout in seconds
        """
        self.api_key = api_key or os.getenv("GEMINI_API_KEY")
        if not self.api_key:
            raise ValueError(
                "GEMINI_API_KEY not found. "
                "Set it in .env file or pass as parameter."
            )
        self.model = model or os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)
        self.prompt = prompt
        self.timeout = timeout

    @property
    def endpoint(self) -> str:
        return f"{GEMINI_API_BASE_URL}/models/{self.model}:generateContent"

    def build_payload(self, image_bytes: bytes, mime_type: str) -> Dict:
        return {
            "contents": [{
                "parts": [
                    {"text": self.prompt},
                    {
                        "inline_data": {
                            "mime_type": mime_type,
                            "data": base64.b64encode(image_bytes).decode("ascii"),
                        }
                    },
                ]
            }]
        }

    def analyze(self, image_bytes: bytes, mime_type: str) -> str:
        """
        Describe a plant photo.

        Args:
            image_bytes: Raw image payload
            mime_type: Mime type of the payload

        Returns:
            Plain-text analysis

        Raises:
            InferenceAuthenticationError: If the API key is rejected
            InferenceError: On transport errors, API errors or an empty answer
        """
        logger.info("Requesting analysis from %s (%d bytes, %s)", self.model, len(image_bytes), mime_type)
        try:
            response = requests.post(
                self.endpoint,
                params={"key": self.api_key},
                json=self.build_payload(image_bytes, mime_type),
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise InferenceError(f"Request to inference API failed: {e}") from e

        if response.status_code in (401, 403):
            raise InferenceAuthenticationError()
        if not response.ok:
            raise InferenceError(self._error_message(response), status_code=response.status_code)

        try:
            result = response.json()
        except ValueError as e:
            raise InferenceError(f"Inference API returned invalid JSON: {e}") from e

        text = self.extract_text(result)
        if not text:
            raise InferenceError(f"Inference API returned no text: {result}")
        return text

    @staticmethod
    def extract_text(result: Dict) -> str:
        """Join the text parts of the first candidate."""
        candidates = result.get("candidates") or []
        if not candidates:
            return ""
        parts = candidates[0].get("content", {}).get("parts", [])
        return "".join(part.get("text", "") for part in parts).strip()

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            return body["error"].get("message", response.text)
        return response.text
