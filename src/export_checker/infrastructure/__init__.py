"""
インフラストラクチャ層

商品ページ取得・判定サービス呼び出しなどの外部システム依存を提供します。
"""

from .page_fetcher import PageFetcher, RELAY_STRATEGIES
from .verdict_client import VerdictClient, RetryableServiceError
from .gemini_client import GeminiClient
from .openai_client import OpenAIClient

__all__ = [
    "PageFetcher",
    "RELAY_STRATEGIES",
    "VerdictClient",
    "RetryableServiceError",
    "GeminiClient",
    "OpenAIClient",
]
