"""判定サービスクライアント基底クラス"""

from abc import ABC, abstractmethod
from typing import Callable, Optional
import logging
import time

from ..domain.errors import ServiceError
from ..domain.models import AnalysisResult
from ..domain.prompt_builder import build_instruction, build_user_query
from ..domain.verdict_parser import VerdictParser


class RetryableServiceError(Exception):
    """
    リトライ対象の一時的なエラー

    レート制限 (429)、サーバーエラー (5xx)、通信エラーを表します。
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VerdictClient(ABC):
    """
    判定サービスへの問い合わせと回答解析

    Responsibilities:
    - 決定的なプロンプト生成
    - リトライ・指数バックオフ（1s, 2s, ...）
    - 回答テキストの AnalysisResult への変換

    API キーは呼び出しごとに受け取り、インスタンスには保持しません。
    """

    # 最大試行回数（初回を含む）
    MAX_ATTEMPTS = 3

    # 初回バックオフ（秒）
    INITIAL_DELAY = 1.0

    # リクエストタイムアウト（秒）
    TIMEOUT = 120

    def __init__(
        self,
        max_attempts: Optional[int] = None,
        initial_delay: Optional[float] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            max_attempts: 最大試行回数
            initial_delay: 初回バックオフ（秒）。以降は倍々に増加
            sleep: 待機関数（テスト時に差し替え）
        """
        self.max_attempts = self.MAX_ATTEMPTS if max_attempts is None else max_attempts
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts は1以上である必要があります: {self.max_attempts}")
        self.initial_delay = self.INITIAL_DELAY if initial_delay is None else initial_delay
        self.sleep = sleep
        self.logger = logging.getLogger(__name__)

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """ログ・エラーメッセージ用のサービス名"""

    @abstractmethod
    def _send(self, instruction: str, user_query: str, api_key: str) -> str:
        """
        1回分のリクエストを送信

        Returns:
            str: 回答テキスト

        Raises:
            RetryableServiceError: リトライ対象のエラー
            ServiceError: リトライ対象外のエラー
        """

    def request(self, product_name: str, ingredients: str, api_key: str) -> str:
        """
        判定を依頼し、回答テキストを返す

        Args:
            product_name: 商品名
            ingredients: 原材料表示テキスト
            api_key: サービスの API キー

        Returns:
            str: サービスの回答テキスト

        Raises:
            ServiceError: リトライ上限到達、またはリトライ対象外のエラー
        """
        if not api_key or not api_key.strip():
            raise ServiceError(f"{self.provider_name} API key is not set")

        instruction = build_instruction()
        user_query = build_user_query(product_name, ingredients)
        return self._call_with_retry(instruction, user_query, api_key.strip())

    def analyze(self, product_name: str, ingredients: str, api_key: str) -> AnalysisResult:
        """
        判定を依頼し、回答を解析した結果を返す

        Raises:
            ServiceError: サービス呼び出しの失敗
            FormatError: 回答に "VERDICT:" 行がない場合
        """
        raw_text = self.request(product_name, ingredients, api_key)
        return VerdictParser.parse(raw_text)

    def _call_with_retry(self, instruction: str, user_query: str, api_key: str) -> str:
        """
        リトライ付き送信

        バックオフはリトライの前にのみ待機し、最終試行の後は待機しません。
        """
        delay = self.initial_delay
        last_error = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                return self._send(instruction, user_query, api_key)
            except RetryableServiceError as e:
                last_error = e
                if attempt < self.max_attempts:
                    self.logger.warning(
                        f"{self.provider_name} attempt {attempt} failed ({e}). "
                        f"Retrying in {delay:g}s..."
                    )
                    self.sleep(delay)
                    delay *= 2
                else:
                    self.logger.error(
                        f"{self.provider_name} failed after {attempt} attempts: {e}"
                    )
            except ServiceError as e:
                e.attempts = attempt
                raise

        raise ServiceError(
            f"Failed to get response from {self.provider_name} after "
            f"{self.max_attempts} attempts: {last_error}",
            status_code=last_error.status_code if last_error else None,
            attempts=self.max_attempts,
        )
