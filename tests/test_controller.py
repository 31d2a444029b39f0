"""Tests for the review controller."""

import asyncio
import json
from unittest.mock import Mock

import pytest

from codereviewer.controller import (
    STATE_EMPTY,
    STATE_LOADING,
    STATE_READY,
    ReviewController,
    validate_code,
)
from codereviewer.editor import CodeEditor
from codereviewer.exceptions import EmptyCodeError, ReviewInProgressError
from codereviewer.gemini_client import GeminiClient


@pytest.mark.parametrize("code", ["", " ", "\n\t  \n"])
def test_blank_code_rejected(code):
    with pytest.raises(EmptyCodeError) as exc_info:
        validate_code(code)
    assert exc_info.value.title == "No code to analyze"
    assert exc_info.value.description == "Please enter some code in the editor first."


class TestReviewController:

    @pytest.mark.parametrize("code", ["", "   ", "\n\n"])
    def test_blank_editor_does_not_call_model(self, mock_gemini_client, code):
        controller = ReviewController(CodeEditor(code), mock_gemini_client)
        with pytest.raises(EmptyCodeError):
            asyncio.run(controller.run())
        mock_gemini_client.generate.assert_not_called()
        assert controller.presenter_state() == STATE_EMPTY

    def test_run_applies_result(self, mock_gemini_client):
        controller = ReviewController(CodeEditor("console.log(1)"), mock_gemini_client)
        result = asyncio.run(controller.run())
        assert controller.review == result
        assert controller.reviewed_code == "console.log(1)"
        assert controller.presenter_state() == STATE_READY

    def test_second_trigger_while_loading_rejected(self, mock_gemini_client):
        controller = ReviewController(CodeEditor("x = 1"), mock_gemini_client)
        controller.begin()
        assert controller.presenter_state() == STATE_LOADING
        with pytest.raises(ReviewInProgressError):
            controller.begin()

    def test_snapshot_is_reviewed_not_later_edits(self):
        editor = CodeEditor("code A")
        client = Mock(spec=GeminiClient)

        def generate(prompt):
            # User keeps typing while the request is in flight
            editor.set_text("code B")
            return json.dumps({"summary": "reviewed", "issues": []})

        client.generate.side_effect = generate
        controller = ReviewController(editor, client)
        asyncio.run(controller.run())

        prompt = client.generate.call_args.args[0]
        assert "code A" in prompt
        assert "code B" not in prompt
        assert controller.reviewed_code == "code A"
        assert editor.text == "code B"
        assert controller.review.summary == "reviewed"

    def test_new_run_replaces_result(self, mock_gemini_client):
        controller = ReviewController(CodeEditor("x = 1"), mock_gemini_client)
        asyncio.run(controller.run())
        mock_gemini_client.generate.return_value = '{"summary": "second", "issues": []}'
        asyncio.run(controller.run("y = 2"))
        assert controller.review.summary == "second"
        assert controller.reviewed_code == "y = 2"

    def test_failure_result_still_applied(self):
        client = Mock(spec=GeminiClient)
        client.generate.side_effect = RuntimeError("rate limit exceeded")
        controller = ReviewController(CodeEditor("x = 1"), client)
        asyncio.run(controller.run())
        assert controller.review.summary == "Error analyzing code"
        assert controller.loading is False
