"""Exceptions raised by the code review assistant.

Each exception carries a short title and a description so the web service and
the CLI can surface it as a transient notice without inspecting the message.
"""

from typing import Optional


class CodeReviewerError(Exception):
    """Base class for all code review assistant errors."""

    title = "Error"

    def __init__(self, description: str, title: Optional[str] = None):
        super().__init__(description)
        self.description = description
        if title is not None:
            self.title = title


class EmptyCodeError(CodeReviewerError):
    """Raised when a review is requested for empty or whitespace-only code."""

    title = "No code to analyze"

    def __init__(self, description: str = "Please enter some code in the editor first."):
        super().__init__(description)


class ReviewInProgressError(CodeReviewerError):
    """Raised when a review is triggered while another one is still running."""

    title = "Analysis in progress"

    def __init__(self, description: str = "Please wait for the current analysis to finish."):
        super().__init__(description)


class GeminiConfigurationError(CodeReviewerError):
    """Raised when the Gemini client cannot be used because it is not configured."""

    title = "Analysis failed"


class AuthNotConfiguredError(CodeReviewerError):
    """Raised when an auth operation is used without Supabase settings."""

    title = "Authentication unavailable"

    def __init__(self, description: str = "Authentication is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY."):
        super().__init__(description)


class SupabaseError(CodeReviewerError):
    """Raised when a Supabase call fails; ``status`` is 0 when no response arrived."""

    def __init__(self, status: int, description: str):
        super().__init__(description)
        self.status = status


class ProfileValidationError(CodeReviewerError):
    """Raised when a profile draft fails local validation."""


class ProfileUpdateError(CodeReviewerError):
    """Raised when a profile draft could not be saved."""

    def __init__(self, description: str = "Failed to update profile. Please try again."):
        super().__init__(description)
