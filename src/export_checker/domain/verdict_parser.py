"""
判定サービス回答の解析

サービスの回答は信頼できない半構造化テキストとして扱います。
"VERDICT:" 行が見つからない場合のみ FormatError とし、
言語ごとの理由ブロックが欠けている場合はプレースホルダーで補います。
"""

import re
from typing import Optional, Tuple

from .errors import FormatError
from .models import AnalysisResult


class VerdictParser:
    """
    回答テキストを AnalysisResult に変換するパーサー

    想定する回答形式:
        VERDICT: Export OK
        === ENGLISH ===
        REASON: ...
        === JAPANESE (日本語) ===
        理由: ...
    """

    # 行頭の "VERDICT:"（大文字小文字を区別）
    VERDICT_PATTERN = re.compile(r"^VERDICT:(.*)$", re.MULTILINE)

    ENGLISH_MARKER_PATTERN = re.compile(r"===\s*ENGLISH\s*===", re.IGNORECASE)

    # "=== JAPANESE ===" / "=== JAPANESE (日本語) ===" などを許容
    JAPANESE_MARKER_PATTERN = re.compile(r"===\s*JAPANESE[^\n]*?===", re.IGNORECASE)

    NO_ENGLISH_REASON = "No English reason provided"
    NO_JAPANESE_REASON = "No Japanese reason provided"

    @classmethod
    def parse(cls, raw_text: str) -> AnalysisResult:
        """
        回答テキストを解析

        Args:
            raw_text: サービスの回答テキスト

        Returns:
            AnalysisResult: 判定結果（raw_response は入力そのもの）

        Raises:
            FormatError: "VERDICT:" 行が存在しない、または判定が空の場合
        """
        if not isinstance(raw_text, str):
            raise FormatError(
                f"AI response must be text, got {type(raw_text).__name__}",
                raw_text="",
            )

        verdict = cls._extract_verdict(raw_text)
        if verdict is None:
            raise FormatError(
                "AI response was not in the expected format "
                f"(missing 'VERDICT:' line). Raw response:\n\n{raw_text}",
                raw_text=raw_text,
            )

        english_reason, japanese_reason = cls._extract_reasons(raw_text)

        return AnalysisResult(
            verdict=verdict,
            english_reason=english_reason or cls.NO_ENGLISH_REASON,
            japanese_reason=japanese_reason or cls.NO_JAPANESE_REASON,
            raw_response=raw_text,
        )

    @classmethod
    def _extract_verdict(cls, raw_text: str) -> Optional[str]:
        """最初の "VERDICT:" 行の残りを返す（空の場合は None）"""
        match = cls.VERDICT_PATTERN.search(raw_text)
        if not match:
            return None
        verdict = match.group(1).strip()
        return verdict or None

    @classmethod
    def _extract_reasons(cls, raw_text: str) -> Tuple[str, str]:
        """
        英語ブロックと日本語ブロックを抽出

        各ブロックはマーカーの直後から、次のマーカー（なければ末尾）までです。

        Returns:
            Tuple[str, str]: (英語の理由, 日本語の理由)。見つからない場合は空文字列
        """
        english = cls.ENGLISH_MARKER_PATTERN.search(raw_text)
        japanese = cls.JAPANESE_MARKER_PATTERN.search(raw_text)

        english_reason = ""
        if english:
            end = len(raw_text)
            if japanese and japanese.start() >= english.end():
                end = japanese.start()
            english_reason = raw_text[english.end():end].strip()

        japanese_reason = ""
        if japanese:
            end = len(raw_text)
            # 日本語ブロックの後に英語ブロックがある並び順にも対応
            if english and english.start() >= japanese.end():
                end = english.start()
            japanese_reason = raw_text[japanese.end():end].strip()

        return english_reason, japanese_reason
