"""Error kinds raised by the style filter engine and the session layer.

Every error carries a human-readable ``message`` (surfaced as the session's
``last_error``) and the HTTP status the API maps it to.
"""

from __future__ import annotations


class StyleFilterError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InvalidInput(StyleFilterError):
    """Missing buffer or style at run time, or a rejected upload."""

    status_code = 400

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code


class UnsupportedStyle(StyleFilterError):
    status_code = 404

    def __init__(self, style_id: str) -> None:
        self.style_id = style_id
        super().__init__(f"Unsupported style: {style_id!r}")


class AcquisitionFailure(StyleFilterError):
    """Model acquisition was cancelled or aborted before a handle was stored."""

    status_code = 503


class PipelineFailure(StyleFilterError):
    """A numeric operation met a malformed buffer."""

    status_code = 422


class InvalidTransition(StyleFilterError):
    status_code = 409


class SessionNotFound(StyleFilterError):
    status_code = 404

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")
