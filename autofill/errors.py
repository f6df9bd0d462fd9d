"""Failure types surfaced by the autofill engine."""

from __future__ import annotations


class AutofillError(Exception):
    """Base class for failures that abort a single feature."""

    code = "error"
    user_message = "Something went wrong. Please try again."


class NotAuthenticatedError(AutofillError):
    code = "not_authenticated"
    user_message = "Please log in to AutoApply Pro to use this feature."


class NetworkFailureError(AutofillError):
    code = "network_failure"
    user_message = "Error contacting AutoApply Pro. Please try again."

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyQuestionError(AutofillError):
    code = "empty_question"
    user_message = "Please enter a question."


__all__ = [
    "AutofillError",
    "NotAuthenticatedError",
    "NetworkFailureError",
    "EmptyQuestionError",
]
