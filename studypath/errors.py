"""Error taxonomy for the advisory layer.

Every failure raised by the clients, the parser and the advisory agent
derives from :class:`StudyPathError`, so callers can catch the whole family
at the boundary where they decide what to show the student.
"""

from __future__ import annotations

from typing import Optional


class StudyPathError(Exception):
    """Base class. ``code`` is machine-readable, ``message`` is for humans."""

    default_code = "STUDYPATH_ERROR"

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        self.code = code or self.default_code
        self.message = message
        super().__init__(message)


class TransportError(StudyPathError):
    """Network failure, timeout or non-2xx status from a remote endpoint."""

    default_code = "TRANSPORT_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, code=code)


class AuthError(StudyPathError):
    """The remote service rejected the configured credential."""

    default_code = "AUTH_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


class ParseError(StudyPathError):
    """Base for failures turning a raw model response into a typed result."""

    default_code = "PARSE_ERROR"


class MalformedEnvelopeError(ParseError):
    """The service's wrapping structure around the generated text is missing."""

    default_code = "MALFORMED_ENVELOPE"


class MalformedContentError(ParseError):
    """The generated text is not syntactically valid JSON."""

    default_code = "MALFORMED_CONTENT"


class SchemaViolationError(ParseError):
    """Generated data is missing a required field or has one out of range."""

    default_code = "SCHEMA_VIOLATION"

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")
