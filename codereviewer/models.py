"""Data models shared by the review pipeline, the presenter and the service."""

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

IssueKind = Literal["error", "warning", "info", "success"]

ISSUE_KINDS: Tuple[str, ...] = ("error", "warning", "info", "success")


class ReviewIssue(BaseModel):
    """Single finding reported by the model.

    Serialized with the model-facing names ``type`` and ``code``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    kind: IssueKind = Field(alias="type")
    message: str
    code_snippet: Optional[str] = Field(default=None, alias="code")


class ReviewResult(BaseModel):
    """Structured outcome of one review run."""

    model_config = ConfigDict(frozen=True)

    summary: str
    issues: Tuple[ReviewIssue, ...]

    @classmethod
    def failure(cls, summary: str, message: str) -> "ReviewResult":
        """Build a result carrying a single error issue."""
        return cls(summary=summary, issues=(ReviewIssue(kind="error", message=message),))

    def to_dict(self) -> Dict[str, Any]:
        """Return the wire representation: ``{summary, issues: [{type, message, code?}]}``."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EditorState(BaseModel):
    """Observable state of the code editor."""

    text: str
    detected_language: str
    cursor_offset: int
    line_numbers: List[int]


class Notice(BaseModel):
    """Transient user-facing message."""

    title: str
    description: str
    variant: Literal["default", "destructive"] = "default"
