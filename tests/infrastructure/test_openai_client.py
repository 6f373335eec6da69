"""OpenAIClient のユニットテスト"""

import httpx
import pytest
from unittest.mock import Mock, patch
from openai import APIConnectionError, APIStatusError, InternalServerError, RateLimitError

from src.export_checker.domain.errors import ServiceError
from src.export_checker.infrastructure.openai_client import OpenAIClient


REPLY_TEXT = "VERDICT: Export NOT OK\n=== ENGLISH ===\nNo E-Number.\n=== JAPANESE (日本語) ===\nE番号なし"

_REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


def _status_error(cls, status_code, message="error"):
    return cls(message, response=httpx.Response(status_code, request=_REQUEST), body=None)


def _completion(text=REPLY_TEXT):
    completion = Mock()
    choice = Mock()
    choice.message.content = text
    completion.choices = [choice]
    return completion


class TestOpenAIClient:
    """OpenAIClient のテストケース"""

    @pytest.fixture
    def mock_sleep(self):
        return Mock()

    @pytest.fixture
    def mock_sdk(self):
        return Mock()

    @pytest.fixture
    def client(self, mock_sleep, mock_sdk):
        client = OpenAIClient(sleep=mock_sleep)
        client._create_client = Mock(return_value=mock_sdk)
        return client

    def test_request_success(self, client, mock_sdk, mock_sleep):
        """成功時に回答テキストを返すこと"""
        mock_sdk.chat.completions.create.return_value = _completion()

        text = client.request("ぶり照焼", "ぶり／調味料", "sk-test")

        assert text == REPLY_TEXT
        client._create_client.assert_called_once_with("sk-test")
        kwargs = mock_sdk.chat.completions.create.call_args[1]
        assert kwargs["model"] == OpenAIClient.MODEL
        assert kwargs["messages"][0]["role"] == "system"
        assert "Product Name: ぶり照焼" in kwargs["messages"][1]["content"]
        assert mock_sleep.call_count == 0

    def test_retry_on_rate_limit_and_server_error(self, client, mock_sdk, mock_sleep):
        """429, 503 の後に成功した場合、1s → 2s の待機後に結果を返すこと"""
        mock_sdk.chat.completions.create.side_effect = [
            _status_error(RateLimitError, 429),
            _status_error(InternalServerError, 503),
            _completion(),
        ]

        assert client.request("x", "砂糖", "sk-test") == REPLY_TEXT
        assert [c[0][0] for c in mock_sleep.call_args_list] == [1.0, 2.0]

    def test_retry_on_connection_error(self, client, mock_sdk, mock_sleep):
        """通信エラーはリトライすること"""
        mock_sdk.chat.completions.create.side_effect = [
            APIConnectionError(request=_REQUEST),
            _completion(),
        ]

        assert client.request("x", "砂糖", "sk-test") == REPLY_TEXT
        assert mock_sleep.call_count == 1

    def test_no_retry_on_401(self, client, mock_sdk, mock_sleep):
        """401 の場合はリトライせず ServiceError になること"""
        mock_sdk.chat.completions.create.side_effect = _status_error(
            APIStatusError, 401, "Incorrect API key provided"
        )

        with pytest.raises(ServiceError) as exc_info:
            client.request("x", "砂糖", "sk-bad")

        assert mock_sdk.chat.completions.create.call_count == 1
        assert mock_sleep.call_count == 0
        assert exc_info.value.status_code == 401
        assert "Incorrect API key provided" in str(exc_info.value)

    def test_empty_content(self, client, mock_sdk):
        """空の回答は ServiceError になること"""
        mock_sdk.chat.completions.create.return_value = _completion(text=None)

        with pytest.raises(ServiceError):
            client.request("x", "砂糖", "sk-test")

    @patch("src.export_checker.infrastructure.openai_client.OpenAI")
    def test_sdk_retries_disabled(self, mock_openai):
        """SDK 側のリトライを無効にしてクライアントを生成すること"""
        OpenAIClient()._create_client("sk-test")

        kwargs = mock_openai.call_args[1]
        assert kwargs["api_key"] == "sk-test"
        assert kwargs["max_retries"] == 0
