"""Turn a raw model response into a typed advisory result.

Three steps, each with its own failure:

1. :func:`extract_text` unwraps the generated text from the service
   envelope (``MalformedEnvelopeError``).
2. :func:`parse_content` reads that text as a JSON object
   (``MalformedContentError``).
3. :func:`validate` checks it against the domain result model
   (``SchemaViolationError``).

Nothing here fills in defaults for required fields or clamps scores: a
partial result is rejected as a whole.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Mapping, Union

from pydantic import ValidationError

from ..errors import MalformedContentError, MalformedEnvelopeError, SchemaViolationError
from .schemas import AdvisoryResult, Domain, RESULT_MODELS

logger = logging.getLogger(__name__)

RawModelResponse = Union[str, bytes, Mapping[str, Any]]

_FENCE_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*([\s\S]*?)\s*```\s*$")


def _snippet(text: str, limit: int = 200) -> str:
    return text[:limit].replace("\n", "\\n")


def _decode_envelope(raw: RawModelResponse) -> Any:
    if isinstance(raw, (str, bytes)):
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedEnvelopeError("Response body is not JSON") from e
    return raw


def _gemini_text(envelope: Mapping[str, Any]) -> str:
    candidates = envelope.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise MalformedEnvelopeError("Response has no candidates")
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        reason = first.get("finishReason") if isinstance(first, dict) else None
        raise MalformedEnvelopeError(f"Candidate has no content parts (finishReason={reason})")
    texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)]
    if not texts:
        raise MalformedEnvelopeError("Candidate content has no text parts")
    return "".join(texts)


def _chat_completion_text(envelope: Mapping[str, Any]) -> str:
    choices = envelope.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedEnvelopeError("Response has no choices")
    message = choices[0].get("message") if isinstance(choices[0], dict) else None
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str):
        raise MalformedEnvelopeError("Choice has no message content")
    return content


def extract_text(raw: RawModelResponse) -> str:
    """Return the generated text carried by a raw service response."""

    envelope = _decode_envelope(raw)
    if not isinstance(envelope, Mapping):
        raise MalformedEnvelopeError("Response body is not a JSON object")
    if "candidates" in envelope:
        return _gemini_text(envelope)
    if "choices" in envelope:
        return _chat_completion_text(envelope)

    feedback = envelope.get("promptFeedback")
    if isinstance(feedback, dict) and feedback.get("blockReason"):
        raise MalformedEnvelopeError(f"Prompt was blocked: {feedback['blockReason']}")
    raise MalformedEnvelopeError("Response has neither candidates nor choices")


def strip_code_fences(text: str) -> str:
    if not text:
        return ""
    fenced = _FENCE_RE.match(text)
    if fenced:
        return fenced.group(1).strip()
    return text.strip()


def parse_content(text: str) -> Dict[str, Any]:
    body = strip_code_fences(text)
    if not body:
        raise MalformedContentError("Empty model output (expected JSON)")
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise MalformedContentError(f"Model output is not valid JSON. Raw snippet: {_snippet(body)}") from e
    if not isinstance(data, dict):
        raise MalformedContentError(f"Expected a JSON object, got {type(data).__name__}")
    return data


def validate(domain: Domain, data: Mapping[str, Any]) -> AdvisoryResult:
    model = RESULT_MODELS[Domain(domain)]
    try:
        return model.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or "<root>"
        raise SchemaViolationError(field, first.get("msg", "invalid value")) from e


def parse(domain: Domain, raw: RawModelResponse) -> AdvisoryResult:
    domain = Domain(domain)
    try:
        return validate(domain, parse_content(extract_text(raw)))
    except (MalformedEnvelopeError, MalformedContentError, SchemaViolationError) as e:
        logger.warning("Could not parse %s response: %s", domain.value, e)
        raise
