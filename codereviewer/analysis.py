"""Code review pipeline: prompt construction, model call and response parsing."""

import json
import re
from typing import Optional

from pydantic import ValidationError

from codereviewer.console import log
from codereviewer.gemini_client import GeminiClient
from codereviewer.models import ReviewResult

ANALYSIS_ERROR_SUMMARY = "Error analyzing code"
ANALYSIS_ERROR_FALLBACK = "Failed to analyze code"
INVALID_FORMAT_SUMMARY = "Invalid response format"
INVALID_FORMAT_MESSAGE = "Could not parse AI response"

_FENCE_PATTERN = re.compile(r"^\s*```(?:json)?\s*|\s*```\s*$")


def generate_prompt(code: str) -> str:
    """Build the review prompt, embedding ``code`` verbatim."""
    prompt_parts = [
        "You are a code review assistant. Analyze the following code and return structured JSON feedback.",
        "",
        "- Identify issues related to:",
        "  - Code quality and best practices",
        "  - Potential bugs and issues",
        "  - Performance considerations",
        "  - Security concerns",
        "  - Maintainability",
        "",
        "Code:",
        "```",
        code,
        "```",
        "",
        "Return only **raw JSON** without Markdown formatting:",
        "{",
        '  "summary": "Overall feedback on the code",',
        '  "issues": [',
        '    { "type": "error", "message": "Critical issue found", "code": "optional code snippet" },',
        '    { "type": "warning", "message": "Potential improvement suggestion" },',
        '    { "type": "info", "message": "Informational note" },',
        '    { "type": "success", "message": "Good practice found" }',
        "  ]",
        "}",
        'Each issue "type" must be one of: error, warning, info, success.',
    ]
    return "\n".join(prompt_parts)


def strip_fences(text: str) -> str:
    """Remove a leading and trailing Markdown code fence (with or without a json tag) and trim.

    Backticks inside the payload, such as fenced snippets in an issue's code,
    are left alone.
    """
    return _FENCE_PATTERN.sub("", text).strip()


def parse_review_response(text: str) -> ReviewResult:
    """Parse a cleaned model response into a ReviewResult.

    Anything that is not JSON, or is JSON of the wrong shape, yields the
    "Invalid response format" result instead of raising.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        log(f"Error parsing AI response: {e}", style="yellow")
        return ReviewResult.failure(INVALID_FORMAT_SUMMARY, INVALID_FORMAT_MESSAGE)

    try:
        return ReviewResult.model_validate(data)
    except ValidationError as e:
        log(f"AI response does not match the review schema: {e.error_count()} error(s)", style="yellow")
        return ReviewResult.failure(INVALID_FORMAT_SUMMARY, INVALID_FORMAT_MESSAGE)


def _error_message(error: BaseException) -> str:
    # SDK errors (google.genai APIError) carry the readable text in ``message``
    message: Optional[str] = (
        getattr(error, "description", None) or getattr(error, "message", None) or str(error)
    )
    return message or ANALYSIS_ERROR_FALLBACK


def analyze_code(code: str, client: GeminiClient) -> ReviewResult:
    """Review ``code`` with the model.

    Always returns a ReviewResult: model or transport failures become a result
    whose only issue is an error carrying the failure message.
    """
    try:
        prompt = generate_prompt(code)
        text = client.generate(prompt)
    except Exception as e:
        log(f"Error analyzing code: {e!r}", style="red")
        return ReviewResult.failure(ANALYSIS_ERROR_SUMMARY, _error_message(e))

    return parse_review_response(strip_fences(text))
