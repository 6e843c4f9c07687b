"""Google Gemini API wrapper with error classification.

This module is the only place that knows about transport exceptions and HTTP
status codes. Everything raised out of ``GeminiGenerator.generate`` is an
``UpstreamError`` carrying an ``ErrorClass``.
"""

import asyncio
import logging
import socket
import threading

import httpx
from google import genai
from google.genai import errors, types

from config import settings
from services.errors import ClientInitError, ErrorClass, MissingApiKeyError, UpstreamError

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429
SERVER_ERROR_STATUSES = frozenset({500, 502, 503, 504})

_NETWORK_EXCEPTIONS = (
    httpx.TransportError,  # connect/read/write errors and httpx timeouts
    ConnectionError,  # reset, aborted, refused
    TimeoutError,
    asyncio.TimeoutError,
    socket.gaierror,  # DNS
)

_client: genai.Client | None = None
_client_lock = threading.Lock()


def get_client() -> genai.Client:
    """Return the process-wide client, building it on first use.

    Construction is guarded so concurrent first callers build it once.
    """
    global _client
    if _client is not None:
        return _client

    with _client_lock:
        if _client is None:
            if not settings.gemini_api_key:
                logger.error("No GEMINI_API_KEY or GOOGLE_API_KEY configured")
                raise MissingApiKeyError("AI service is not configured")
            try:
                _client = genai.Client(
                    api_key=settings.gemini_api_key,
                    http_options=types.HttpOptions(
                        timeout=settings.request_timeout_s * 1000,
                        # the retry executor owns retries
                        retry_options=types.HttpRetryOptions(attempts=1),
                    ),
                )
            except Exception as e:
                logger.error("Failed to initialise Gemini client: %s", e)
                raise ClientInitError("Failed to initialise AI client", details=str(e)) from e
            logger.info("Gemini client initialised (model=%s)", settings.gemini_model)
    return _client


def reset_client() -> None:
    """Drop the cached client. Useful for testing."""
    global _client
    with _client_lock:
        _client = None


def classify_error(exc: BaseException) -> ErrorClass:
    """Map a transport exception or upstream API error to an ErrorClass."""
    if isinstance(exc, UpstreamError):
        return exc.error_class
    if isinstance(exc, errors.APIError):
        if exc.code == RATE_LIMIT_STATUS:
            return ErrorClass.RATE_LIMIT
        if exc.code in SERVER_ERROR_STATUSES:
            return ErrorClass.SERVER_ERROR
        return ErrorClass.FATAL
    if isinstance(exc, _NETWORK_EXCEPTIONS):
        return ErrorClass.TRANSIENT_NETWORK
    return ErrorClass.FATAL


def strip_code_fences(text: str) -> str:
    """Remove a surrounding Markdown code fence, if present."""
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()
    return text


class GeminiGenerator:
    """Single-completion text generation against the configured Gemini model."""

    def __init__(self, model: str | None = None) -> None:
        self.model = model or settings.gemini_model

    async def generate(
        self,
        system: str,
        prompt: str,
        *,
        max_tokens: int,
        temperature: float,
        json_mode: bool = False,
    ) -> str:
        client = get_client()
        config = types.GenerateContentConfig(
            system_instruction=system,
            temperature=temperature,
            max_output_tokens=max_tokens,
            response_mime_type="application/json" if json_mode else None,
        )
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=config,
            )
        except Exception as e:
            error_class = classify_error(e)
            status = e.code if isinstance(e, errors.APIError) else None
            logger.warning(
                "Gemini API error (%s, status=%s): %s", error_class.value, status, e
            )
            raise UpstreamError(str(e) or type(e).__name__, error_class, http_status=status) from e

        return strip_code_fences(response.text or "")
