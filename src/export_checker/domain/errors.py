"""
例外定義

パイプラインの各段階（取得・抽出・判定依頼・回答解析）に対応する例外です。
いずれも ExportCheckError を継承し、呼び出し側で段階ごとに捕捉できます。
"""

from typing import List, Optional


class ExportCheckError(Exception):
    """export-checker の例外基底クラス"""


class FetchError(ExportCheckError):
    """
    ページ取得エラー

    直接取得とすべての中継プロキシが失敗した場合に送出されます。
    errors には方式ごとのエラーメッセージが試行順に格納されます。
    """

    def __init__(
        self,
        message: str,
        errors: Optional[List[str]] = None,
        url: Optional[str] = None,
    ):
        """
        Args:
            message: エラーメッセージ
            errors: 取得方式ごとのエラーメッセージ
            url: 取得対象の URL
        """
        super().__init__(message)
        self.errors = list(errors or [])
        self.url = url


class ExtractionError(ExportCheckError):
    """
    抽出エラー

    HTML から原材料表示が見つからない場合に送出されます。
    """

    def __init__(
        self,
        message: str,
        selectors: Optional[List[str]] = None,
        url: Optional[str] = None,
    ):
        """
        Args:
            message: エラーメッセージ
            selectors: 試行したセレクター・パターン
            url: 抽出対象ページの URL
        """
        super().__init__(message)
        self.selectors = list(selectors or [])
        self.url = url


class ServiceError(ExportCheckError):
    """
    判定サービスエラー

    リトライ上限に達した場合、またはリトライ対象外のステータスが返った場合に
    送出されます。
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        attempts: int = 0,
    ):
        """
        Args:
            message: エラーメッセージ
            status_code: HTTP ステータスコード（該当する場合）
            attempts: 実行した試行回数
        """
        super().__init__(message)
        self.status_code = status_code
        self.attempts = attempts


class FormatError(ExportCheckError):
    """
    回答形式エラー

    サービスの回答に "VERDICT:" 行が含まれない場合に送出されます。
    """

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text
