"""Pytest configuration and shared fixtures."""

import json
from unittest.mock import Mock

import pytest

from codereviewer.gemini_client import GeminiClient
from codereviewer.models import ReviewIssue, ReviewResult


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep tests independent of the developer's environment and config files."""
    for name in (
        "GEMINI_API_KEY",
        "SUPABASE_URL",
        "SUPABASE_ANON_KEY",
        "CODEREVIEWER_MODEL",
        "CODEREVIEWER_HOST",
        "CODEREVIEWER_PORT",
        "CODEREVIEWER_REDIRECT_URL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def sample_review_payload():
    """Raw JSON object as returned by the model."""
    return {
        "summary": "Readable code with one bug.",
        "issues": [
            {"type": "error", "message": "Division by zero is not handled", "code": "return a / b"},
            {"type": "warning", "message": "Function name is not descriptive"},
            {"type": "info", "message": "Consider adding type hints"},
            {"type": "success", "message": "Good use of early returns"},
        ],
    }


@pytest.fixture
def sample_review(sample_review_payload):
    return ReviewResult.model_validate(sample_review_payload)


@pytest.fixture
def mock_gemini_client(sample_review_payload):
    """Mock GeminiClient to avoid actual API calls."""
    client = Mock(spec=GeminiClient)
    client.model_name = "gemini-2.5-pro"
    client.configured = True
    client.generate.return_value = "```json\n" + json.dumps(sample_review_payload) + "\n```"
    return client
