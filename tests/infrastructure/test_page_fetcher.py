"""PageFetcher のユニットテスト"""

import pytest
import requests
from unittest.mock import Mock, patch

from src.export_checker.domain.errors import FetchError
from src.export_checker.infrastructure.page_fetcher import (
    PageFetcher,
    RELAY_STRATEGIES,
    allorigins_relay,
    codetabs_relay,
    corsproxy_relay,
)


PRODUCT_URL = "https://www.kokubu.co.jp/products/item?id=1&lang=ja"
VALID_HTML = "<html><body><p>原材料名：ぶり</p></body></html>"


def _response(status_code=200, text=VALID_HTML):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    return response


class TestRelayStrategies:
    """中継プロキシ URL 変換のテスト"""

    def test_relay_order_is_fixed(self):
        """宣言順が allorigins → corsproxy → codetabs であること"""
        assert [name for name, _ in RELAY_STRATEGIES] == ["allorigins", "corsproxy", "codetabs"]

    def test_allorigins_relay(self):
        assert allorigins_relay(PRODUCT_URL) == (
            "https://api.allorigins.win/raw?url="
            "https%3A%2F%2Fwww.kokubu.co.jp%2Fproducts%2Fitem%3Fid%3D1%26lang%3Dja"
        )

    def test_corsproxy_relay(self):
        assert corsproxy_relay("https://a.jp/x") == "https://corsproxy.io/?https%3A%2F%2Fa.jp%2Fx"

    def test_codetabs_relay(self):
        assert codetabs_relay("https://a.jp/x") == (
            "https://api.codetabs.com/v1/proxy?quest=https%3A%2F%2Fa.jp%2Fx"
        )


class TestPageFetcher:
    """PageFetcher のテストケース"""

    @pytest.fixture
    def fetcher(self):
        return PageFetcher()

    @patch("src.export_checker.infrastructure.page_fetcher.requests.get")
    def test_direct_fetch_success(self, mock_get, fetcher):
        """直接取得に成功した場合は中継プロキシを使わないこと"""
        mock_get.return_value = _response()

        html = fetcher.fetch(PRODUCT_URL)

        assert html == VALID_HTML
        assert mock_get.call_count == 1
        call_args = mock_get.call_args
        assert call_args[0][0] == PRODUCT_URL
        assert "Mozilla" in call_args[1]["headers"]["User-Agent"]
        assert call_args[1]["timeout"] == PageFetcher.TIMEOUT

    @patch("src.export_checker.infrastructure.page_fetcher.requests.get")
    def test_falls_back_to_relay_b(self, mock_get, fetcher):
        """直接取得が例外、中継Aが空本文の場合は中継Bの本文を返すこと"""
        mock_get.side_effect = [
            requests.exceptions.ConnectionError("blocked"),
            _response(text=""),
            _response(text=VALID_HTML),
        ]

        html = fetcher.fetch(PRODUCT_URL)

        assert html == VALID_HTML
        assert mock_get.call_count == 3
        requested = [c[0][0] for c in mock_get.call_args_list]
        assert requested == [
            PRODUCT_URL,
            allorigins_relay(PRODUCT_URL),
            corsproxy_relay(PRODUCT_URL),
        ]

    @patch("src.export_checker.infrastructure.page_fetcher.requests.get")
    def test_direct_non_success_status_falls_back(self, mock_get, fetcher):
        """直接取得が 403 の場合は中継プロキシを試すこと"""
        mock_get.side_effect = [_response(status_code=403), _response()]

        assert fetcher.fetch(PRODUCT_URL) == VALID_HTML
        assert mock_get.call_count == 2

    @patch("src.export_checker.infrastructure.page_fetcher.requests.get")
    def test_all_strategies_fail(self, mock_get, fetcher):
        """すべて失敗した場合は方式ごとのエラーを集約した FetchError になること"""
        mock_get.side_effect = [
            requests.exceptions.Timeout("timed out"),
            _response(text="   "),
            _response(status_code=403),
            requests.exceptions.ConnectionError("refused"),
        ]

        with pytest.raises(FetchError) as exc_info:
            fetcher.fetch(PRODUCT_URL)

        errors = exc_info.value.errors
        assert len(errors) == 4
        assert "Direct fetch" in errors[0] and "timed out" in errors[0]
        assert "Relay 1" in errors[1] and "empty response body" in errors[1]
        assert "Relay 2" in errors[2] and "403" in errors[2]
        assert "Relay 3" in errors[3] and "refused" in errors[3]
        assert len(set(errors)) == 4
        message = str(exc_info.value)
        for error in errors:
            assert error in message
        assert exc_info.value.url == PRODUCT_URL

    @pytest.mark.parametrize("url", ["", "   ", "ftp://example.com", "www.kokubu.co.jp"])
    @patch("src.export_checker.infrastructure.page_fetcher.requests.get")
    def test_invalid_url_fails_without_request(self, mock_get, url, fetcher):
        """無効な URL はリクエストせずに FetchError になること"""
        with pytest.raises(FetchError):
            fetcher.fetch(url)
        assert mock_get.call_count == 0

    @patch("src.export_checker.infrastructure.page_fetcher.requests.get")
    def test_custom_relay_strategies(self, mock_get):
        """中継プロキシを差し替えられること"""
        mock_get.side_effect = [_response(status_code=500), _response()]
        fetcher = PageFetcher(relay_strategies=[("local", lambda u: f"http://relay/?u={u}")])

        assert fetcher.fetch(PRODUCT_URL) == VALID_HTML
        assert mock_get.call_args_list[1][0][0] == f"http://relay/?u={PRODUCT_URL}"
