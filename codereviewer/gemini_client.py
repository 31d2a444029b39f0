"""Gemini API client used by the review pipeline."""

import os
from typing import Optional

from google import genai
from google.genai import types

from codereviewer.config import load_config
from codereviewer.console import log, warn
from codereviewer.exceptions import GeminiConfigurationError

# The key is read once at import; a missing key is reported here and again
# when a review is attempted, never as a crash at startup.
if not os.environ.get("GEMINI_API_KEY"):
    warn("Missing Gemini API key! Set GEMINI_API_KEY in your environment or .env file.")


class GeminiClient:
    """Thin wrapper around ``google.genai`` for single-prompt reviews.

    The SDK client is created on first use, so an unconfigured client can be
    constructed and only fails when a review is actually requested.
    """

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None,
                 debug: bool = False):
        """Initialize Gemini client.

        Args:
            api_key: Gemini API key. If None, reads from GEMINI_API_KEY env var
            model_name: Name of the Gemini model to use. If None, read from config
            debug: Enable debug logging of API requests/responses
        """
        self.api_key = api_key or os.environ.get("GEMINI_API_KEY")
        self.model_name = model_name or load_config()["review"]["model"]
        self.debug = debug
        self._client: Optional[genai.Client] = None

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise GeminiConfigurationError(
                    "Gemini API key not provided. Set GEMINI_API_KEY environment variable."
                )
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    def generate(self, prompt: str) -> str:
        """Send one prompt and return the response text.

        Transport, auth and quota errors from the SDK propagate to the caller.
        """
        if self.debug:
            log(f"DEBUG: Sending {len(prompt)} characters to {self.model_name}")

        response = self.client.models.generate_content(
            model=self.model_name,
            contents=prompt,
            config=types.GenerateContentConfig(temperature=0.7, top_p=0.95),
        )

        text = response.text or ""
        if self.debug:
            usage = getattr(response, "usage_metadata", None)
            total = getattr(usage, "total_token_count", 0) or 0
            log(f"DEBUG: Received {len(text)} characters ({total} tokens)")
        return text
