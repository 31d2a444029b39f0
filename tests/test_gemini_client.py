"""Tests for GeminiClient functionality."""

from unittest.mock import MagicMock, patch

import pytest

from codereviewer.exceptions import GeminiConfigurationError
from codereviewer.gemini_client import GeminiClient


class TestGeminiClientConfiguration:

    def test_reads_key_from_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_API_KEY", "env-key")
        client = GeminiClient(model_name="gemini-2.5-flash")
        assert client.api_key == "env-key"
        assert client.configured is True

    def test_missing_key_does_not_raise_on_construction(self):
        client = GeminiClient(model_name="gemini-2.5-pro")
        assert client.configured is False

    def test_missing_key_raises_on_use(self):
        client = GeminiClient(model_name="gemini-2.5-pro")
        with pytest.raises(GeminiConfigurationError):
            client.generate("prompt")

    def test_model_from_config(self, monkeypatch):
        monkeypatch.setenv("CODEREVIEWER_MODEL", "gemini-2.5-flash")
        client = GeminiClient(api_key="k")
        assert client.model_name == "gemini-2.5-flash"

    def test_default_model(self):
        assert GeminiClient(api_key="k").model_name == "gemini-2.5-pro"


class TestGeminiClientGenerate:

    @patch("codereviewer.gemini_client.genai.Client")
    def test_generate_sends_single_prompt(self, mock_client_cls):
        sdk = MagicMock()
        sdk.models.generate_content.return_value = MagicMock(text='{"summary": "ok", "issues": []}')
        mock_client_cls.return_value = sdk

        client = GeminiClient(api_key="test-key", model_name="gemini-2.5-pro")
        text = client.generate("Review this")

        assert text == '{"summary": "ok", "issues": []}'
        mock_client_cls.assert_called_once_with(api_key="test-key")
        kwargs = sdk.models.generate_content.call_args.kwargs
        assert kwargs["model"] == "gemini-2.5-pro"
        assert kwargs["contents"] == "Review this"

    @patch("codereviewer.gemini_client.genai.Client")
    def test_sdk_client_created_once(self, mock_client_cls):
        mock_client_cls.return_value.models.generate_content.return_value = MagicMock(text="x")
        client = GeminiClient(api_key="test-key", model_name="gemini-2.5-pro")
        client.generate("a")
        client.generate("b")
        assert mock_client_cls.call_count == 1

    @patch("codereviewer.gemini_client.genai.Client")
    def test_empty_text_returned_as_empty_string(self, mock_client_cls):
        mock_client_cls.return_value.models.generate_content.return_value = MagicMock(text=None)
        client = GeminiClient(api_key="test-key", model_name="gemini-2.5-pro")
        assert client.generate("a") == ""

    @patch("codereviewer.gemini_client.genai.Client")
    def test_sdk_errors_propagate(self, mock_client_cls):
        mock_client_cls.return_value.models.generate_content.side_effect = RuntimeError("quota exceeded")
        client = GeminiClient(api_key="test-key", model_name="gemini-2.5-pro")
        with pytest.raises(RuntimeError, match="quota exceeded"):
            client.generate("a")
