"""OpenAI 判定クライアント"""

from typing import Optional

from openai import APIConnectionError, APIStatusError, OpenAI, RateLimitError

from .verdict_client import RetryableServiceError, VerdictClient
from ..domain.errors import ServiceError


class OpenAIClient(VerdictClient):
    """
    OpenAI Chat Completions API による判定

    SDK 側のリトライは無効にし、VerdictClient のリトライ方針に統一します。
    """

    MODEL = "gpt-4o"

    TEMPERATURE = 0

    def __init__(self, model: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.model = model or self.MODEL

    @property
    def provider_name(self) -> str:
        return "OpenAI"

    def _create_client(self, api_key: str) -> OpenAI:
        return OpenAI(api_key=api_key, max_retries=0, timeout=self.TIMEOUT)

    def _send(self, instruction: str, user_query: str, api_key: str) -> str:
        client = self._create_client(api_key)

        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": instruction},
                    {"role": "user", "content": user_query},
                ],
                temperature=self.TEMPERATURE,
            )
        except RateLimitError as e:
            raise RetryableServiceError(f"rate limited: {e}", status_code=e.status_code)
        except APIConnectionError as e:
            # APITimeoutError を含む
            raise RetryableServiceError(f"{type(e).__name__}: {e}")
        except APIStatusError as e:
            if e.status_code >= 500:
                raise RetryableServiceError(f"status {e.status_code}", status_code=e.status_code)
            raise ServiceError(
                f"OpenAI API Error ({e.status_code}): {e.message}",
                status_code=e.status_code,
            )

        text = ""
        if response.choices:
            text = response.choices[0].message.content or ""
        if not text.strip():
            raise ServiceError("No text content in OpenAI API response")
        return text
