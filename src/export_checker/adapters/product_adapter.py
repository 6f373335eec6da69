"""
商品ページアダプター抽象基底クラス

商品ページの HTML 構造差異を吸収するための抽象インターフェースを定義します。
別の商品ページ系統に対応する場合は、このクラスを継承して具象アダプターを実装します。
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..domain.models import ProductData
from ..infrastructure.page_fetcher import PageFetcher


class ProductAdapter(ABC):
    """
    商品ページ抽出アダプター抽象基底クラス

    取得（PageFetcher）と抽出（extract）を分離し、抽出はネットワークに
    依存しない純粋な処理として実装します。
    """

    def __init__(self, site_name: str, fetcher: Optional[PageFetcher] = None):
        """
        Args:
            site_name: 対象サイト名（例: "国分"）
            fetcher: ページ取得コンポーネント（省略時は既定の PageFetcher）
        """
        self.site_name = site_name
        self.fetcher = fetcher or PageFetcher()

    @abstractmethod
    def extract(self, html: str, source_url: str) -> ProductData:
        """
        HTML から商品名と原材料表示を抽出

        Args:
            html: 商品ページの HTML
            source_url: 商品ページの URL

        Returns:
            ProductData: 抽出した商品データ

        Raises:
            ExtractionError: 原材料表示が見つからない場合
        """
        pass
