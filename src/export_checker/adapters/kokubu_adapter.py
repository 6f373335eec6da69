"""
国分アダプター

国分グループの商品ページから商品名と原材料表示を抽出するアダプターです。
同じ系統のページでもレイアウトに差があるため、複数の抽出方法を順に試し、
最初に成功したものを採用します。
"""

import logging
import re
from typing import Callable, List, Optional

from bs4 import BeautifulSoup, NavigableString

from .product_adapter import ProductAdapter
from ..domain.errors import ExtractionError
from ..domain.models import ProductData
from ..infrastructure.page_fetcher import PageFetcher


class KokubuAdapter(ProductAdapter):
    """
    国分商品ページ向け抽出実装

    商品名は見つからなくてもプレースホルダーで処理を続行しますが、
    原材料表示が見つからない場合は ExtractionError とします。
    """

    # 商品名セレクター（具体的なものから順に）
    NAME_SELECTORS = [
        "h1",
        ".product-name",
        '[class*="product"][class*="name"]',
        "title",
    ]

    # 商品名が見つからない場合のプレースホルダー
    UNKNOWN_PRODUCT_NAME = "Unknown Product"

    # 原材料表示のテキストパターン（優先順）
    INGREDIENT_PATTERNS = [
        re.compile(r"原材料名[^\S\n]*[：:]?[^\S\n]*([^\n]+)"),
        re.compile(r"原材料[^\S\n]*[：:][^\S\n]*([^\n]+)"),
        re.compile(r"ingredients[^\S\n]*[：:][^\S\n]*([^\n]+)", re.IGNORECASE),
    ]

    # フォールバック時に走査する行・セル
    INGREDIENT_ROW_SELECTORS = [
        "table tr",
        ".spec-table tr",
        '[class*="ingredient"]',
    ]

    # 原材料ラベル
    INGREDIENT_LABELS = ["原材料", "Ingredients"]
    _LABEL_SPLIT_PATTERN = re.compile(r"原材料名?\s*[：:]?|ingredients\s*[：:]?", re.IGNORECASE)

    # 改行として扱うブロック要素
    BLOCK_TAGS = [
        "p", "div", "section", "article", "li", "ul", "ol", "table", "tr",
        "th", "td", "dl", "dt", "dd", "h1", "h2", "h3", "h4", "h5", "h6",
    ]

    def __init__(self, fetcher: Optional[PageFetcher] = None):
        """国分アダプターを初期化"""
        super().__init__(site_name="国分", fetcher=fetcher)
        self.logger = logging.getLogger(__name__)

    def extract(self, html: str, source_url: str) -> ProductData:
        """
        国分の商品ページから商品名と原材料表示を抽出

        Args:
            html: 商品ページの HTML
            source_url: 商品ページの URL

        Returns:
            ProductData: 抽出した商品データ

        Raises:
            ExtractionError: 原材料表示が見つからない場合
        """
        soup = BeautifulSoup(html or "", "html.parser")

        product_name = self._extract_product_name(soup)
        ingredients = self._extract_ingredients(soup)

        if not ingredients:
            raise ExtractionError(
                "Could not find ingredients (原材料) on the product page. "
                "Please check the URL or enter ingredients manually.",
                selectors=[p.pattern for p in self.INGREDIENT_PATTERNS]
                + self.INGREDIENT_ROW_SELECTORS,
                url=source_url,
            )

        self.logger.info(f"Extracted product '{product_name}' from {source_url}")
        return ProductData(
            product_name=product_name,
            ingredients=ingredients,
            source_url=source_url,
        )

    def _extract_product_name(self, soup: BeautifulSoup) -> str:
        """
        商品名を抽出

        Returns:
            str: 最初に見つかった空でない商品名（見つからない場合はプレースホルダー）
        """
        for selector in self.NAME_SELECTORS:
            element = soup.select_one(selector)
            if element:
                name = self._normalize_space(element.get_text(" ", strip=True))
                if name:
                    return name

        self.logger.warning("Product name not found, using placeholder")
        return self.UNKNOWN_PRODUCT_NAME

    def _extract_ingredients(self, soup: BeautifulSoup) -> str:
        """
        原材料表示を抽出

        抽出方法を順に試し、最初に空でない結果を返した方法を採用します。

        Returns:
            str: 原材料表示（見つからない場合は空文字列）
        """
        strategies: List[Callable[[BeautifulSoup], Optional[str]]] = [
            self._extract_from_text_patterns,
            self._extract_from_table,
            self._extract_from_definition_list,
            self._extract_from_labeled_rows,
        ]

        for strategy in strategies:
            value = strategy(soup)
            if value:
                return self._normalize_space(value)

        return ""

    def _extract_from_text_patterns(self, soup: BeautifulSoup) -> Optional[str]:
        """
        ページ本文のテキストから原材料ラベルに続く1行を抽出

        例: "原材料名：ぶり、しょうゆ／調味料（アミノ酸等）" → "ぶり、しょうゆ／調味料（アミノ酸等）"
        """
        text = self._page_text(soup)

        for pattern in self.INGREDIENT_PATTERNS:
            match = pattern.search(text)
            if match:
                value = match.group(1).strip()
                if value:
                    return value
        return None

    def _extract_from_table(self, soup: BeautifulSoup) -> Optional[str]:
        """
        テーブル構造から原材料表示を抽出

        例: <tr><th>原材料</th><td>ぶり、しょうゆ</td></tr> → "ぶり、しょうゆ"
        """
        for selector in self.INGREDIENT_ROW_SELECTORS[:2]:
            for row in soup.select(selector):
                cells = row.find_all(["th", "td"], recursive=False)
                if len(cells) < 2:
                    continue
                label = cells[0].get_text(strip=True)
                if self._has_label(label):
                    value = cells[1].get_text(" ", strip=True)
                    if value:
                        return value
        return None

    def _extract_from_definition_list(self, soup: BeautifulSoup) -> Optional[str]:
        """
        定義リスト（dl/dt/dd）から原材料表示を抽出
        """
        for dt in soup.select("dt"):
            if self._has_label(dt.get_text(strip=True)):
                dd = dt.find_next_sibling("dd")
                if dd:
                    value = dd.get_text(" ", strip=True)
                    if value:
                        return value
        return None

    def _extract_from_labeled_rows(self, soup: BeautifulSoup) -> Optional[str]:
        """
        ラベルを含む行・要素のテキストをラベルで分割し、後半を抽出
        """
        for selector in self.INGREDIENT_ROW_SELECTORS:
            for row in soup.select(selector):
                text = row.get_text(" ", strip=True)
                if not self._has_label(text):
                    continue
                parts = self._LABEL_SPLIT_PATTERN.split(text, maxsplit=1)
                if len(parts) > 1 and parts[1].strip():
                    return parts[1].strip()
        return None

    def _has_label(self, text: str) -> bool:
        return any(label.lower() in text.lower() for label in self.INGREDIENT_LABELS)

    def _page_text(self, soup: BeautifulSoup) -> str:
        """
        ブロック要素の境界を改行としたページ本文テキストを生成

        インライン要素（span, strong 等）では改行しないため、
        装飾を含む原材料表示も1行として扱えます。
        """
        root = soup.body or soup

        # HTML ソース上の改行は空白として扱う
        for text_node in root.find_all(string=True):
            if type(text_node) is NavigableString:
                text_node.replace_with(NavigableString(self._normalize_space_keep_edges(text_node)))

        for br in root.find_all("br"):
            br.replace_with(NavigableString("\n"))

        for element in root.find_all(self.BLOCK_TAGS):
            element.insert_before(NavigableString("\n"))
            element.insert_after(NavigableString("\n"))

        return root.get_text()

    @staticmethod
    def _normalize_space_keep_edges(text: str) -> str:
        return re.sub(r"[ \t\r\n\f\v]+", " ", text)

    @staticmethod
    def _normalize_space(text: str) -> str:
        """半角の空白・改行を1つの空白にまとめる（全角スペースは保持）"""
        return re.sub(r"[ \t\r\n\f\v]+", " ", text).strip()
