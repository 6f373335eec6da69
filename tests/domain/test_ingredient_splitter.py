"""
IngredientSplitter のユニットテスト

「／」区切りによる原材料・添加物の分割を検証します。
"""
import pytest

from src.export_checker.domain.ingredient_splitter import IngredientSplitter
from src.export_checker.domain.models import IngredientSplit


class TestSplitWithDelimiter:
    """区切り文字ありの分割テスト"""

    def test_split_full_width_slash(self):
        """全角スラッシュで原材料と添加物に分割できること"""
        result = IngredientSplitter.split(
            "ぶり、しょうゆ、粗糖／増粘剤（加工デンプン）、調味料（アミノ酸等）"
        )

        assert isinstance(result, IngredientSplit)
        assert result.raw_materials == ["ぶり", "しょうゆ", "粗糖"]
        assert result.additives == ["増粘剤（加工デンプン）", "調味料（アミノ酸等）"]
        assert result.delimiter == "／"

    def test_split_half_width_slash(self):
        """半角スラッシュでも分割できること"""
        result = IngredientSplitter.split("小麦粉、砂糖/膨張剤、香料")

        assert result.raw_materials == ["小麦粉", "砂糖"]
        assert result.additives == ["膨張剤", "香料"]
        assert result.delimiter == "/"

    def test_full_width_slash_takes_priority(self):
        """全角スラッシュが半角スラッシュより優先されること"""
        result = IngredientSplitter.split("砂糖、食塩(1/2量)／香料")

        assert result.raw_materials == ["砂糖", "食塩(1/2量)"]
        assert result.additives == ["香料"]
        assert result.delimiter == "／"

    def test_only_first_delimiter_splits(self):
        """最初の区切り文字でのみ分割すること"""
        result = IngredientSplitter.split("砂糖／香料／着色料")

        assert result.raw_materials == ["砂糖"]
        assert result.additive_segment == "香料／着色料"

    def test_spaces_around_delimiter_are_trimmed(self):
        """区切り文字前後の全角スペースが除去されること"""
        result = IngredientSplitter.split("ぶり、しょうゆ、粗糖　／　増粘剤（加工デンプン）")

        assert result.raw_segment == "ぶり、しょうゆ、粗糖"
        assert result.additive_segment == "増粘剤（加工デンプン）"
        assert result.raw_materials == ["ぶり", "しょうゆ", "粗糖"]

    @pytest.mark.parametrize(
        "ingredients",
        [
            "ぶり、しょうゆ、粗糖／増粘剤（加工デンプン）、調味料（アミノ酸等）",
            "  小麦粉、砂糖 / 膨張剤  ",
            "米／",
            "／香料",
        ],
    )
    def test_segments_reconstruct_original(self, ingredients):
        """区切り文字を戻すと元のテキストになること（前後の空白を除く）"""
        result = IngredientSplitter.split(ingredients)

        rebuilt = result.raw_segment + result.delimiter + result.additive_segment
        assert rebuilt.replace(" ", "") == ingredients.strip().replace(" ", "")


class TestSplitWithoutDelimiter:
    """区切り文字なしの分割テスト"""

    def test_no_delimiter_means_no_additives(self):
        """区切り文字がない場合、全体が原材料で添加物は空であること"""
        result = IngredientSplitter.split("  ぶり、しょうゆ、粗糖  ")

        assert result.additives == []
        assert result.raw_segment == "ぶり、しょうゆ、粗糖"
        assert result.raw_materials == ["ぶり", "しょうゆ", "粗糖"]
        assert result.delimiter is None
        assert result.has_additives is False

    def test_empty_string(self):
        """空文字列でも例外にならないこと"""
        result = IngredientSplitter.split("")

        assert result.raw_materials == []
        assert result.additives == []

    def test_none_is_treated_as_empty(self):
        """None を空文字列として扱うこと"""
        result = IngredientSplitter.split(None)

        assert result.raw_materials == []


class TestSplitItems:
    """項目分割のテスト"""

    def test_comma_variants(self):
        """読点・半角カンマ・全角カンマで分割できること"""
        items = IngredientSplitter.split_items("砂糖、食塩,醤油，みりん")

        assert items == ["砂糖", "食塩", "醤油", "みりん"]

    def test_separator_inside_brackets_is_kept(self):
        """括弧内の読点では分割しないこと"""
        items = IngredientSplitter.split_items("調味料（アミノ酸等、有機酸）、酸化防止剤(ビタミンC, ビタミンE)")

        assert items == ["調味料（アミノ酸等、有機酸）", "酸化防止剤(ビタミンC, ビタミンE)"]

    def test_empty_items_are_dropped(self):
        """空の項目は除外されること"""
        items = IngredientSplitter.split_items("砂糖、、 、食塩、")

        assert items == ["砂糖", "食塩"]

    def test_unbalanced_close_bracket(self):
        """閉じ括弧が余分でも分割が継続すること"""
        items = IngredientSplitter.split_items("砂糖）、食塩")

        assert items == ["砂糖）", "食塩"]
