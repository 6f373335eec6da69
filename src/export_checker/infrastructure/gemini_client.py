"""Gemini 判定クライアント"""

from typing import Any, Dict, Optional

import requests

from .verdict_client import RetryableServiceError, VerdictClient
from ..domain.errors import ServiceError


class GeminiClient(VerdictClient):
    """
    Gemini API (generateContent) による判定

    Google 検索グラウンディングを有効にしたリクエストを送信します。
    """

    API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/models"

    MODEL = "gemini-2.5-flash"

    def __init__(self, model: Optional[str] = None, **kwargs):
        """
        Args:
            model: モデル名（省略時は MODEL）
            **kwargs: VerdictClient の引数
        """
        super().__init__(**kwargs)
        self.model = model or self.MODEL

    @property
    def provider_name(self) -> str:
        return "Gemini"

    @property
    def endpoint(self) -> str:
        return f"{self.API_BASE_URL}/{self.model}:generateContent"

    @staticmethod
    def build_payload(instruction: str, user_query: str) -> Dict[str, Any]:
        """リクエストペイロードを生成"""
        return {
            "contents": [
                {
                    "parts": [{"text": user_query}],
                },
            ],
            "tools": [
                {
                    "google_search": {},
                },
            ],
            "systemInstruction": {
                "parts": [{"text": instruction}],
            },
        }

    def _send(self, instruction: str, user_query: str, api_key: str) -> str:
        try:
            response = requests.post(
                self.endpoint,
                headers={
                    "Content-Type": "application/json",
                    "x-goog-api-key": api_key,
                },
                json=self.build_payload(instruction, user_query),
                timeout=self.TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            raise RetryableServiceError(f"{type(e).__name__}: {e}")

        if response.status_code == 429 or response.status_code >= 500:
            raise RetryableServiceError(
                f"status {response.status_code}", status_code=response.status_code
            )

        if not response.ok:
            raise ServiceError(
                f"Gemini API Error ({response.status_code}): {self._error_message(response)}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            raise ServiceError(
                "Gemini API returned a non-JSON response", status_code=response.status_code
            )
        return self._extract_text(data)

    @staticmethod
    def _error_message(response) -> str:
        """エラー応答本文からメッセージを取り出す"""
        try:
            data = response.json()
        except ValueError:
            return response.reason or response.text
        if isinstance(data, dict) and isinstance(data.get("error"), dict):
            return data["error"].get("message") or response.reason
        return response.reason or ""

    @staticmethod
    def _extract_text(data: Dict[str, Any]) -> str:
        """
        先頭候補のテキストパートを連結して返す

        Raises:
            ServiceError: テキストが含まれない場合
        """
        candidates = data.get("candidates") if isinstance(data, dict) else None
        candidate = candidates[0] if isinstance(candidates, list) and candidates else None
        content = candidate.get("content") if isinstance(candidate, dict) else None
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list):
            parts = []

        text = "".join(
            part["text"]
            for part in parts
            if isinstance(part, dict) and isinstance(part.get("text"), str)
        )
        if not text.strip():
            raise ServiceError("No text content in Gemini API response")
        return text
