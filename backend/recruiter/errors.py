"""
Domain exceptions. Each carries the HTTP status the API layer answers with.
"""


class RecruitingError(Exception):
    """Base class for errors surfaced to API clients as ``{"error": message}``."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class PreconditionError(RecruitingError):
    """Missing role, missing files, bad export format and similar caller mistakes."""

    status_code = 400


class NotFoundError(RecruitingError):
    status_code = 404


class ConflictError(RecruitingError):
    """A batch is already running against the store."""

    status_code = 409


class LLMServiceError(RecruitingError):
    """The model API could not be reached or returned an error."""


class InvalidAIResponseError(RecruitingError):
    """The model replied with something that is not the JSON we asked for."""
