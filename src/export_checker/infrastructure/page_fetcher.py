"""
商品ページ取得

直接取得を試み、失敗した場合は中継プロキシを宣言順に試します。
最初に成功し、かつ本文が空でない応答を採用します。
"""

import logging
from typing import Callable, List, Optional, Tuple
from urllib.parse import quote

import requests

from ..domain.errors import FetchError


def _encode(url: str) -> str:
    return quote(url, safe="")


def allorigins_relay(url: str) -> str:
    return f"https://api.allorigins.win/raw?url={_encode(url)}"


def corsproxy_relay(url: str) -> str:
    return f"https://corsproxy.io/?{_encode(url)}"


def codetabs_relay(url: str) -> str:
    return f"https://api.codetabs.com/v1/proxy?quest={_encode(url)}"


# 中継プロキシ（試行順）
RELAY_STRATEGIES: List[Tuple[str, Callable[[str], str]]] = [
    ("allorigins", allorigins_relay),
    ("corsproxy", corsproxy_relay),
    ("codetabs", codetabs_relay),
]


class PageFetcher:
    """
    商品ページの HTML を取得

    Responsibilities:
    - ブラウザ相当のヘッダーによる直接取得
    - 中継プロキシへの順次フォールバック
    - 全方式失敗時のエラー集約

    同一方式内でのリトライは行いません。
    """

    # HTTP リクエストヘッダー
    HEADERS = {
        "User-Agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36"
        ),
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": "ja,en;q=0.5",
    }

    # 中継プロキシ向けヘッダー
    RELAY_HEADERS = {
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    }

    # リクエストタイムアウト（秒）
    TIMEOUT = 30

    def __init__(
        self,
        relay_strategies: Optional[List[Tuple[str, Callable[[str], str]]]] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            relay_strategies: (名前, URL 変換関数) のリスト。省略時は RELAY_STRATEGIES
            timeout: リクエストタイムアウト（秒）
        """
        self.relay_strategies = (
            list(relay_strategies) if relay_strategies is not None else list(RELAY_STRATEGIES)
        )
        self.timeout = timeout if timeout is not None else self.TIMEOUT
        self.logger = logging.getLogger(__name__)

    def fetch(self, url: str) -> str:
        """
        商品ページの HTML を取得

        Args:
            url: 商品ページの URL

        Returns:
            str: HTML テキスト

        Raises:
            FetchError: URL が不正な場合、またはすべての方式が失敗した場合
        """
        url = (url or "").strip()
        if not url.startswith(("http://", "https://")):
            raise FetchError(f"無効な URL です: '{url}'", url=url)

        errors = []

        self.logger.info(f"Attempting direct fetch: {url}")
        html, error = self._try_get(url, self.HEADERS)
        if html is not None:
            self.logger.info("Direct fetch successful")
            return html
        errors.append(f"Direct fetch: {error}")
        self.logger.warning(errors[-1])

        total = len(self.relay_strategies)
        for index, (name, build_url) in enumerate(self.relay_strategies, start=1):
            self.logger.info(f"Attempting relay {index}/{total} ({name})...")
            html, error = self._try_get(build_url(url), self.RELAY_HEADERS)
            if html is not None:
                self.logger.info(f"Relay {index} ({name}) fetch successful")
                return html
            errors.append(f"Relay {index} ({name}): {error}")
            self.logger.warning(errors[-1])

        raise FetchError(
            "Failed to fetch product page after trying all methods.\n\n"
            "Errors:\n" + "\n".join(errors) + "\n\n"
            "The product URL may be invalid, blocked, or the relay services may be "
            "unavailable. Please try again later.",
            errors=errors,
            url=url,
        )

    def _try_get(self, request_url: str, headers: dict) -> Tuple[Optional[str], Optional[str]]:
        """
        1方式分の GET を実行

        Returns:
            Tuple[Optional[str], Optional[str]]: (成功時の HTML, 失敗時のエラーメッセージ)
        """
        try:
            response = requests.get(request_url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            return None, f"{type(e).__name__}: {e}"

        if not response.ok:
            return None, f"returned status {response.status_code}"

        text = response.text
        if not text or not text.strip():
            return None, "empty response body"

        return text, None
