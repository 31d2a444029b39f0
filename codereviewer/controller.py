"""Review run state shared by the web service and its page."""

from typing import Optional

from starlette.concurrency import run_in_threadpool

from codereviewer.analysis import analyze_code
from codereviewer.editor import CodeEditor
from codereviewer.exceptions import EmptyCodeError, ReviewInProgressError
from codereviewer.gemini_client import GeminiClient
from codereviewer.models import ReviewResult

STATE_LOADING = "loading"
STATE_EMPTY = "empty"
STATE_READY = "ready"


def validate_code(code: str):
    """Raise EmptyCodeError for empty or whitespace-only code."""
    if not code.strip():
        raise EmptyCodeError()


class ReviewController:
    """Owns the single in-flight review and the result currently on display.

    The code under review is captured when the review starts; edits made to
    the editor while the model is working do not affect the run.
    """

    def __init__(self, editor: CodeEditor, client: GeminiClient):
        self.editor = editor
        self.client = client
        self.loading = False
        self.review: Optional[ReviewResult] = None
        self.reviewed_code: Optional[str] = None

    def begin(self, code: Optional[str] = None) -> str:
        """Validate and capture the code to review, entering the loading state.

        Args:
            code: Code to review; the editor's current text when None

        Returns:
            The captured code snapshot
        """
        if self.loading:
            raise ReviewInProgressError()
        snapshot = self.editor.text if code is None else code
        validate_code(snapshot)
        self.loading = True
        return snapshot

    def finish(self, snapshot: str, result: ReviewResult):
        """Apply a completed run's result and leave the loading state."""
        self.review = result
        self.reviewed_code = snapshot
        self.loading = False

    async def run(self, code: Optional[str] = None) -> ReviewResult:
        """Review ``code`` (or the editor text) and apply the result."""
        snapshot = self.begin(code)
        try:
            result = await run_in_threadpool(analyze_code, snapshot, self.client)
            self.finish(snapshot, result)
        finally:
            self.loading = False
        return result

    def presenter_state(self) -> str:
        if self.loading:
            return STATE_LOADING
        if self.review is None:
            return STATE_EMPTY
        return STATE_READY
