"""Code Review Assistant - AI-powered review of pasted source code."""

__version__ = "0.1.0"
__author__ = "Code Review Assistant Contributors"
__email__ = ""

from codereviewer.analysis import analyze_code
from codereviewer.editor import CodeEditor
from codereviewer.gemini_client import GeminiClient
from codereviewer.language import detect_language
from codereviewer.models import ReviewIssue, ReviewResult
from codereviewer.review_formatter import ReviewFormatter

__all__ = [
    "analyze_code",
    "CodeEditor",
    "GeminiClient",
    "detect_language",
    "ReviewIssue",
    "ReviewResult",
    "ReviewFormatter",
]
