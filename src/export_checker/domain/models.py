"""
データモデル定義

このモジュールは export-checker のドメイン層のデータモデルを定義します:
- ProductData: 商品ページから抽出した商品名と原材料表示
- IngredientSplit: 原材料表示を原材料と添加物に分割した結果
- AnalysisResult: AI サービスの回答を構造化した判定結果
"""

from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ServiceProvider(str, Enum):
    """判定サービスの種別"""
    GEMINI = "gemini"
    OPENAI = "openai"


class VerdictCategory(str, Enum):
    """表示用の判定区分"""
    OK = "OK"
    CONDITIONAL = "CONDITIONAL"
    NOT_OK = "NOT_OK"
    UNKNOWN = "UNKNOWN"


class IngredientSplit(BaseModel):
    """
    原材料表示の分割結果

    区切り文字（「／」または「/」）の前が原材料、後が添加物です。
    区切り文字がない場合は全体を原材料として扱い、添加物は空になります。
    """

    raw_materials: List[str] = Field(default_factory=list, description="原材料 (区切り文字の前)")
    additives: List[str] = Field(default_factory=list, description="添加物 (区切り文字の後)")
    raw_segment: str = Field(default="", description="区切り文字の前のテキスト")
    additive_segment: str = Field(default="", description="区切り文字の後のテキスト")
    delimiter: Optional[str] = Field(default=None, description="検出した区切り文字")

    @property
    def has_additives(self) -> bool:
        return bool(self.additives)


class ProductData(BaseModel):
    """
    商品ページから抽出した商品データ

    ingredients は人手による確認・修正の後にそのまま下流へ渡されるため、
    抽出結果と手入力のテキストを区別しません。
    """

    product_name: str = Field(..., description="商品名")
    ingredients: str = Field(..., description="原材料名 (日本の食品表示形式)")
    source_url: str = Field(default="", description="商品ページURL (手入力時は空)")

    @field_validator("ingredients")
    @classmethod
    def validate_ingredients(cls, v: str) -> str:
        """
        原材料の空文字チェック

        Raises:
            ValueError: 空白のみ、または空文字列の場合
        """
        if not v or not v.strip():
            raise ValueError("原材料が空です。原材料のない商品データは作成できません")
        return v.strip()

    @field_validator("product_name")
    @classmethod
    def validate_product_name(cls, v: str) -> str:
        return v.strip()

    def split(self) -> IngredientSplit:
        """原材料表示を原材料と添加物に分割"""
        from .ingredient_splitter import IngredientSplitter

        return IngredientSplitter.split(self.ingredients)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "product_name": "ぶり照焼",
                "ingredients": "ぶり、しょうゆ、粗糖／増粘剤（加工デンプン）、調味料（アミノ酸等）",
                "source_url": "https://www.kokubu.co.jp/products/example",
            }
        }
    )


class AnalysisResult(BaseModel):
    """
    AI サービスによる EU 輸出可否の判定結果

    verdict はサービスの文言が完全には制御できないため、列挙型ではなく
    表示用テキストとして保持します。raw_response は常に保持され、
    デバッグや再パースに使用できます。
    """

    verdict: str = Field(..., description="判定 (Export OK / Export CONDITIONAL / Export NOT OK)")
    english_reason: str = Field(..., description="英語の判定理由")
    japanese_reason: str = Field(..., description="日本語の判定理由")
    raw_response: str = Field(..., description="サービスの回答全文")

    model_config = ConfigDict(frozen=True)

    @property
    def verdict_category(self) -> VerdictCategory:
        """
        判定テキストを表示用の区分に分類

        "NOT OK" は "OK" を含むため、先に判定します。
        """
        text = self.verdict.upper()
        if "NOT OK" in text or "NOT_OK" in text:
            return VerdictCategory.NOT_OK
        if "CONDITIONAL" in text:
            return VerdictCategory.CONDITIONAL
        if "OK" in text:
            return VerdictCategory.OK
        return VerdictCategory.UNKNOWN
