"""
ドメイン層

原材料表示の分割・判定プロンプト生成・回答解析を提供します。
"""

from .models import ProductData, IngredientSplit, AnalysisResult, ServiceProvider, VerdictCategory
from .errors import ExportCheckError, FetchError, ExtractionError, ServiceError, FormatError
from .ingredient_splitter import IngredientSplitter
from .verdict_parser import VerdictParser

__all__ = [
    "ProductData",
    "IngredientSplit",
    "AnalysisResult",
    "ServiceProvider",
    "VerdictCategory",
    "ExportCheckError",
    "FetchError",
    "ExtractionError",
    "ServiceError",
    "FormatError",
    "IngredientSplitter",
    "VerdictParser",
]
