# activities/classifier/generative.py
"""
Generative Text Client
======================

Thin "submit text, receive text" wrapper around the OpenAI Chat Completions
API, plus the parser that pulls a JSON object out of free-text model output.

The classifier only relies on ``generate(prompt) -> str``; any object with
that method (a fake in tests, another vendor in production) can stand in for
``OpenAITextClient``.

Initialization Behaviour:
-------------------------
The client NEVER raises during ``__init__``. A missing API key leaves it
unconfigured (``is_configured=False``) and ``generate`` then raises
``ClientNotConfiguredError``, which the classifier treats as an ordinary
AI-tier failure.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.conf import settings
from openai import OpenAI

logger = logging.getLogger(__name__)


class ClientNotConfiguredError(Exception):
    """Raised when generation is requested from an unconfigured client."""

    pass


class ScorerUnavailableError(Exception):
    """Raised when the model answers with nothing usable."""

    pass


class OpenAITextClient:
    """
    Process-wide text generation client.

    Attributes:
        model (str): Chat model identifier.
        timeout (float): Per-request timeout in seconds.
        client (OpenAI | None): SDK client, or None when unconfigured.
        is_configured (bool): Whether ``generate`` can reach the API.
        configuration_error (str | None): Why the client is unconfigured.
    """

    DEFAULT_MODEL: str = "gpt-4o-mini"
    DEFAULT_TEMPERATURE: float = 0.2
    DEFAULT_MAX_TOKENS: int = 300
    DEFAULT_TIMEOUT: float = 10.0  # Seconds

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: Optional[float] = None,
        **client_kwargs: Any,
    ) -> None:
        self.model: str = model or self.DEFAULT_MODEL
        self.timeout: float = timeout or self.DEFAULT_TIMEOUT
        self._client_kwargs: Dict[str, Any] = client_kwargs

        self.client: Optional[OpenAI] = None
        self.is_configured: bool = False
        self.configuration_error: Optional[str] = None

        self._configure(api_key)

    def _configure(self, api_key: Optional[str] = None) -> None:
        resolved_key = api_key or getattr(settings, "OPENAI_API_KEY", None) or ""
        if not resolved_key:
            self.configuration_error = (
                "OPENAI_API_KEY is not configured. "
                "Set the OPENAI_API_KEY environment variable or Django setting."
            )
            logger.warning(f"OpenAITextClient: {self.configuration_error}")
            return

        try:
            # A failed call falls back to rules right away, so no SDK retries.
            self.client = OpenAI(
                api_key=resolved_key,
                timeout=self.timeout,
                max_retries=0,
                **self._client_kwargs,
            )
            self.is_configured = True
            self.configuration_error = None
            logger.info(f"OpenAITextClient initialized with model={self.model}")
        except Exception as e:
            self.configuration_error = f"Failed to initialize OpenAI client: {str(e)}"
            logger.error(f"OpenAITextClient: {self.configuration_error}")
            self.client = None
            self.is_configured = False

    def generate(self, prompt: str) -> str:
        """
        Send ``prompt`` as a single user message and return the reply text.

        Raises:
            ClientNotConfiguredError: No usable API key / client.
            ScorerUnavailableError: The model returned an empty reply.
            openai.APIError subclasses: Transport, status and timeout failures.
        """
        if not self.is_configured or self.client is None:
            raise ClientNotConfiguredError(self.configuration_error or "Client not available")

        response = self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=self.DEFAULT_TEMPERATURE,
            max_tokens=self.DEFAULT_MAX_TOKENS,
            timeout=self.timeout,
        )
        content = response.choices[0].message.content or ""
        if not content.strip():
            raise ScorerUnavailableError("Empty response from AI")
        return content

    def health_check(self) -> Dict[str, Any]:
        return {
            "is_configured": self.is_configured,
            "model": self.model,
            "timeout": self.timeout,
            "configuration_error": self.configuration_error,
        }


def extract_json_object(text: str) -> str:
    """
    Return the first top-level balanced ``{...}`` span in ``text``.

    Model replies often wrap the JSON in prose or code fences. The scan tracks
    brace depth and skips braces inside JSON string literals, so nested
    objects and a trailing second object are handled.

    Raises:
        ValueError: No balanced object is present.
    """
    if not text:
        raise ValueError("Empty response from AI")

    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for index in range(start, len(text)):
            char = text[index]
            if in_string:
                if escaped:
                    escaped = False
                elif char == "\\":
                    escaped = True
                elif char == '"':
                    in_string = False
                continue
            if char == '"':
                in_string = True
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0:
                    return text[start:index + 1]
        # Unbalanced from here on; try the next opening brace.
        start = text.find("{", start + 1)

    raise ValueError("No JSON object found in AI response")
