"""輸出可否チェックのオーケストレーションサービス"""

from enum import Enum
from typing import Dict, Optional
import logging

from pydantic import BaseModel

from ..adapters.product_adapter import ProductAdapter
from ..domain.errors import ExtractionError, FetchError, FormatError, ServiceError
from ..domain.models import AnalysisResult, ProductData, ServiceProvider
from ..infrastructure.verdict_client import VerdictClient


class Stage(str, Enum):
    """処理段階"""
    FETCH = "fetch"
    EXTRACT = "extract"
    ANALYZE = "analyze"


class StageResult(BaseModel):
    """
    段階ごとの処理結果

    Attributes:
        success: 処理が成功したか
        stage: 最後に実行した段階
        product: 抽出した商品データ（取得・抽出段階）
        analysis: 判定結果（判定段階）
        error: 失敗した段階と原因を含むメッセージ
    """
    success: bool
    stage: Stage
    product: Optional[ProductData] = None
    analysis: Optional[AnalysisResult] = None
    error: Optional[str] = None


class ComplianceService:
    """
    商品ページ取得から判定までの段階実行

    Responsibilities:
    - アダプター・判定クライアントの呼び出し
    - 段階ごとの例外を利用者向けメッセージに変換
    - 失敗した段階からの再実行を可能にする（状態を保持しない）
    """

    def __init__(
        self,
        adapter: ProductAdapter,
        clients: Dict[ServiceProvider, VerdictClient],
    ):
        """
        Args:
            adapter: 商品ページアダプター
            clients: サービス種別ごとの判定クライアント
        """
        self.adapter = adapter
        self.clients = clients
        self.logger = logging.getLogger(__name__)

    def load_product(self, url: str) -> StageResult:
        """
        商品ページを取得し、商品名と原材料表示を抽出

        Args:
            url: 商品ページの URL

        Returns:
            StageResult: 成功時は product を含む
        """
        self.logger.info(f"Loading product page: {url}")

        try:
            html = self.adapter.fetcher.fetch(url)
        except FetchError as e:
            self.logger.warning(f"Fetch failed for {url}")
            return self._failure(Stage.FETCH, e)
        except Exception as e:
            self.logger.error(f"Unexpected error while fetching {url}: {e}", exc_info=True)
            return self._failure(Stage.FETCH, e)

        try:
            product = self.adapter.extract(html, url)
        except ExtractionError as e:
            self.logger.warning(f"Extraction failed for {url}")
            return self._failure(Stage.EXTRACT, e)
        except Exception as e:
            self.logger.error(f"Unexpected error while extracting {url}: {e}", exc_info=True)
            return self._failure(Stage.EXTRACT, e)

        self.logger.info(
            "Product loaded",
            extra={"product_name": product.product_name, "source_url": url},
        )
        return StageResult(success=True, stage=Stage.EXTRACT, product=product)

    def analyze(
        self,
        product_name: str,
        ingredients: str,
        api_key: str,
        provider: ServiceProvider = ServiceProvider.GEMINI,
    ) -> StageResult:
        """
        原材料表示の判定を依頼

        ingredients は抽出結果でも、人手で修正したテキストでも同様に扱います。

        Args:
            product_name: 商品名
            ingredients: 原材料表示テキスト
            api_key: 判定サービスの API キー
            provider: 判定サービス種別

        Returns:
            StageResult: 成功時は analysis を含む
        """
        if not ingredients or not ingredients.strip():
            return StageResult(
                success=False,
                stage=Stage.ANALYZE,
                error="Analysis failed: ingredients are empty. Please enter ingredients.",
            )

        try:
            client = self.clients.get(ServiceProvider(provider))
        except ValueError:
            client = None
        if client is None:
            return StageResult(
                success=False,
                stage=Stage.ANALYZE,
                error=f"Analysis failed: provider '{provider}' is not configured.",
            )

        self.logger.info(f"Requesting verdict from {client.provider_name}")

        try:
            analysis = client.analyze(product_name, ingredients, api_key)
        except (ServiceError, FormatError) as e:
            self.logger.warning(f"{client.provider_name} analysis failed: {type(e).__name__}")
            return self._failure(Stage.ANALYZE, e)
        except Exception as e:
            self.logger.error(f"Unexpected error during analysis: {e}", exc_info=True)
            return self._failure(Stage.ANALYZE, e)

        self.logger.info(
            "Analysis completed",
            extra={"verdict": analysis.verdict, "provider": client.provider_name},
        )
        return StageResult(success=True, stage=Stage.ANALYZE, analysis=analysis)

    def _failure(self, stage: Stage, error: Exception) -> StageResult:
        return StageResult(success=False, stage=stage, error=describe_failure(error, stage))


def describe_failure(error: Exception, stage: Optional[Stage] = None) -> str:
    """
    例外を失敗した段階を示す利用者向けメッセージに変換

    元のエラーメッセージ（プロキシごとのエラーを含む）はそのまま保持します。
    """
    if isinstance(error, FetchError):
        return f"Fetch failed: {error}"
    if isinstance(error, ExtractionError):
        return f"Extraction failed: {error}"
    if isinstance(error, ServiceError):
        return f"Analysis service failed: {error}"
    if isinstance(error, FormatError):
        return f"Unexpected AI response format: {error}"
    if stage is not None:
        return f"Unexpected error during {stage.value}: {error}"
    return f"Unexpected error: {error}"
