"""
アダプター層

商品ページごとの HTML 抽出ロジックを提供します。
"""

from .product_adapter import ProductAdapter
from .kokubu_adapter import KokubuAdapter

__all__ = ["ProductAdapter", "KokubuAdapter"]
