# src/agents/tutor_agent/errors.py
"""
Exceptions raised by the tutor session and the upload helpers.

UI code catches these at the controller boundary and turns them into
short user-facing messages; the original cause is kept on __cause__.
"""


class TutorError(Exception):
    """Base class for all tutor errors."""


class InvalidInputError(TutorError):
    """The uploaded file is not a usable image (rejected before any model call)."""


class UpstreamError(TutorError):
    """The model call failed (network, quota, malformed response, ...)."""


class SessionBusyError(TutorError):
    """A model call is already pending for this session."""


class SessionNotStartedError(TutorError):
    """A follow-up question was asked before a problem image was submitted."""
