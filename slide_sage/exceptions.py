"""Error taxonomy for Slide Sage."""

from typing import Optional


class SlideSageError(Exception):
    """Base class for all Slide Sage errors."""


class ToolExecutionError(SlideSageError):
    """A tool could not run because its call context is incomplete.

    Never escapes a tool: it is converted into a failure result the model can read.
    """


class PresentationServiceError(SlideSageError):
    """Non-success response from the Google Drive / Slides REST APIs."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        if self.status_code is None:
            return self.message
        return f"{self.status_code}: {self.message}"


class ModelInvocationError(SlideSageError):
    """The language model call failed or returned output that could not be parsed."""
