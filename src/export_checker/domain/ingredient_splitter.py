"""
原材料表示の分割ロジック

日本の食品表示では、原材料と添加物を「／」で区切って表示します。
このモジュールはその区切りに従って原材料表示を分割する唯一の実装です。
プロンプト生成・確認表示など、すべての利用箇所はこの分割結果を使用します。
"""

from typing import List, Optional, Tuple

from .models import IngredientSplit


class IngredientSplitter:
    """
    原材料表示分割クラス

    例: "ぶり、しょうゆ、粗糖／増粘剤（加工デンプン）、調味料（アミノ酸等）"
        → 原材料: ["ぶり", "しょうゆ", "粗糖"]
        → 添加物: ["増粘剤（加工デンプン）", "調味料（アミノ酸等）"]
    """

    # 区切り文字（優先順）
    DELIMITERS = ("／", "/")

    # 項目の区切り
    ITEM_SEPARATORS = ("、", ",", "，")

    _OPEN_BRACKETS = "(（[【"
    _CLOSE_BRACKETS = ")）]】"

    @staticmethod
    def split(ingredients: str) -> IngredientSplit:
        """
        原材料表示を原材料と添加物に分割

        Args:
            ingredients: 原材料表示テキスト

        Returns:
            IngredientSplit: 分割結果（区切り文字がない場合、添加物は空）
        """
        raw_segment, additive_segment, delimiter = IngredientSplitter._partition(
            ingredients or ""
        )
        return IngredientSplit(
            raw_materials=IngredientSplitter.split_items(raw_segment),
            additives=IngredientSplitter.split_items(additive_segment),
            raw_segment=raw_segment,
            additive_segment=additive_segment,
            delimiter=delimiter,
        )

    @staticmethod
    def _partition(text: str) -> Tuple[str, str, Optional[str]]:
        """
        最初の区切り文字で前後に分割

        全角スラッシュを優先し、存在しない場合のみ半角スラッシュを探します。

        Returns:
            Tuple[str, str, Optional[str]]: (原材料部分, 添加物部分, 区切り文字)
        """
        for delimiter in IngredientSplitter.DELIMITERS:
            index = text.find(delimiter)
            if index >= 0:
                before = text[:index].strip()
                after = text[index + len(delimiter):].strip()
                return before, after, delimiter

        return text.strip(), "", None

    @staticmethod
    def split_items(segment: str) -> List[str]:
        """
        区間を読点・カンマで項目に分割

        括弧内の読点では分割しません
        （例: "調味料（アミノ酸等、有機酸）" は1項目）。

        Args:
            segment: 原材料部分または添加物部分

        Returns:
            List[str]: 前後の空白を除いた空でない項目（元の順序）
        """
        items = []
        current = []
        depth = 0

        for char in segment:
            if char in IngredientSplitter._OPEN_BRACKETS:
                depth += 1
            elif char in IngredientSplitter._CLOSE_BRACKETS and depth > 0:
                depth -= 1

            if depth == 0 and char in IngredientSplitter.ITEM_SEPARATORS:
                items.append("".join(current))
                current = []
            else:
                current.append(char)
        items.append("".join(current))

        # str.strip は全角スペースも除去する
        return [item.strip() for item in items if item.strip()]
