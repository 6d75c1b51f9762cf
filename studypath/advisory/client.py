"""Generative service clients and model configuration.

This keeps the transport to the remote text-generation service in one
place, so the advisory agent and the chat responder can be tested with a
fake client and pointed at either provider.

Environment variables (e.g. ``GEMINI_API_KEY``) are loaded from a ``.env``
file if present, using ``python-dotenv``.

Both clients make exactly one request per ``invoke`` and never retry;
retry policy belongs to the caller. Failures are classified into
:class:`~studypath.errors.TransportError` and :class:`~studypath.errors.AuthError`.
"""

from __future__ import annotations

import logging
import os
from typing import Optional, Protocol

import httpx
from dotenv import load_dotenv
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    AuthenticationError,
    PermissionDeniedError,
)

from ..errors import AuthError, TransportError
from .prompts import SYSTEM_INSTRUCTIONS

logger = logging.getLogger(__name__)

# Load environment variables from a .env file if it exists.
load_dotenv()


DEFAULT_PROVIDER = os.getenv("STUDYPATH_PROVIDER", "gemini")

DEFAULT_GEMINI_MODEL = os.getenv("STUDYPATH_GEMINI_MODEL", "gemini-2.0-flash")
GEMINI_BASE_URL = os.getenv(
    "STUDYPATH_GEMINI_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
)

DEFAULT_OPENROUTER_MODEL = os.getenv("STUDYPATH_OPENROUTER_MODEL", "deepseek/deepseek-r1:free")
OPENROUTER_BASE_URL = os.getenv("STUDYPATH_OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")

# Default request timeout (seconds) to avoid hanging forever.
DEFAULT_TIMEOUT_S = float(os.getenv("STUDYPATH_TIMEOUT_S", "30"))


class GenerativeClient(Protocol):
    """What the advisory agent and chat responder need from a provider."""

    async def invoke(self, prompt: str, *, timeout: Optional[float] = None) -> str:  # pragma: no cover - interface only
        ...


def _reports_invalid_key(resp: httpx.Response) -> bool:
    # Gemini answers a bad key with 400 INVALID_ARGUMENT rather than 401.
    if resp.status_code != 400:
        return False
    try:
        error = resp.json().get("error") or {}
    except (ValueError, AttributeError):
        return False
    if not isinstance(error, dict):
        return False
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and detail.get("reason") == "API_KEY_INVALID":
            return True
    return "api key not valid" in str(error.get("message", "")).lower()


def raise_for_status(resp: httpx.Response, service: str) -> None:
    """Translate a non-2xx response into AuthError or TransportError."""

    if resp.is_success:
        return
    status = resp.status_code
    if status in (401, 403) or _reports_invalid_key(resp):
        logger.warning("%s rejected the API credential (HTTP %s)", service, status)
        raise AuthError(f"{service} rejected the API key", status_code=status)
    logger.warning("%s returned HTTP %s", service, status)
    raise TransportError(f"{service} returned HTTP {status}", status_code=status)


class GeminiClient:
    """Calls the Generative Language ``generateContent`` endpoint over httpx."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else os.getenv("GEMINI_API_KEY", "")
        if not self._api_key:
            raise AuthError("GEMINI_API_KEY is not configured")
        self.model = model or DEFAULT_GEMINI_MODEL
        self.base_url = (base_url or GEMINI_BASE_URL).rstrip("/")
        self.timeout = DEFAULT_TIMEOUT_S if timeout is None else timeout
        self._transport = transport

    def __repr__(self) -> str:
        return f"GeminiClient(model={self.model!r}, base_url={self.base_url!r})"

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def invoke(self, prompt: str, *, timeout: Optional[float] = None) -> str:
        """POST one prompt and return the raw response body text."""

        timeout_s = self.timeout if timeout is None else timeout
        payload = {"contents": [{"parts": [{"text": prompt}]}]}

        logger.info("Issuing generateContent request to model %s...", self.model)
        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(timeout_s), transport=self._transport
            ) as http:
                resp = await http.post(
                    self.endpoint,
                    json=payload,
                    headers={"x-goog-api-key": self._api_key},
                )
        except httpx.TimeoutException as e:
            logger.warning("Gemini request timed out after %ss", timeout_s)
            raise TransportError(f"Gemini request timed out after {timeout_s}s", code="timeout") from e
        except httpx.HTTPError as e:
            logger.warning("Gemini request failed: %s", e.__class__.__name__)
            raise TransportError(f"Gemini request failed: {e.__class__.__name__}", code="network") from e

        raise_for_status(resp, "Gemini")
        logger.info("Received generateContent response from %s.", self.model)
        return resp.text


class OpenRouterClient:
    """OpenAI-compatible chat completions (OpenRouter) via the OpenAI SDK.

    The SDK's built-in retries are disabled so a call is a single round trip.
    The completion is returned serialized to JSON text, the same shape the
    parser sees when reading the HTTP body directly.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[AsyncOpenAI] = None,
    ) -> None:
        self.model = model or DEFAULT_OPENROUTER_MODEL
        self.timeout = DEFAULT_TIMEOUT_S if timeout is None else timeout
        if client is not None:
            self.client = client
            return

        resolved_key = api_key if api_key is not None else os.getenv("OPENROUTER_API_KEY", "")
        if not resolved_key:
            raise AuthError("OPENROUTER_API_KEY is not configured")
        self.client = AsyncOpenAI(
            api_key=resolved_key,
            base_url=base_url or OPENROUTER_BASE_URL,
            timeout=self.timeout,
            max_retries=0,
        )

    def __repr__(self) -> str:
        return f"OpenRouterClient(model={self.model!r})"

    async def invoke(self, prompt: str, *, timeout: Optional[float] = None) -> str:
        timeout_s = self.timeout if timeout is None else timeout

        logger.info("Issuing chat completion request to model %s...", self.model)
        try:
            completion = await self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_INSTRUCTIONS},
                    {"role": "user", "content": prompt},
                ],
                max_tokens=1500,
                timeout=timeout_s,
            )
        except APITimeoutError as e:
            logger.warning("OpenRouter request timed out after %ss", timeout_s)
            raise TransportError(f"OpenRouter request timed out after {timeout_s}s", code="timeout") from e
        except (AuthenticationError, PermissionDeniedError) as e:
            logger.warning("OpenRouter rejected the API credential (HTTP %s)", e.status_code)
            raise AuthError("OpenRouter rejected the API key", status_code=e.status_code) from e
        except APIStatusError as e:
            logger.warning("OpenRouter returned HTTP %s", e.status_code)
            raise TransportError(f"OpenRouter returned HTTP {e.status_code}", status_code=e.status_code) from e
        except APIConnectionError as e:
            logger.warning("OpenRouter request failed: %s", e.__class__.__name__)
            raise TransportError(f"OpenRouter request failed: {e.__class__.__name__}", code="network") from e

        logger.info("Received chat completion from %s.", self.model)
        return completion.model_dump_json()


def get_generative_client(provider: Optional[str] = None, **kwargs) -> GenerativeClient:
    """Return a client for ``provider`` (``gemini`` or ``openrouter``).

    Falls back to ``STUDYPATH_PROVIDER`` when no provider is given. Extra
    keyword arguments go to the client constructor.
    """

    name = (provider or DEFAULT_PROVIDER).strip().lower()
    if name == "gemini":
        return GeminiClient(**kwargs)
    if name == "openrouter":
        return OpenRouterClient(**kwargs)
    raise ValueError(f"Unknown generative provider: {name!r}")
