"""CLI エントリーポイント"""

import argparse
import logging
import os
import sys

from .orchestration.compliance_service import ComplianceService
from .adapters.kokubu_adapter import KokubuAdapter
from .domain.ingredient_splitter import IngredientSplitter
from .domain.models import ServiceProvider
from .infrastructure.gemini_client import GeminiClient
from .infrastructure.openai_client import OpenAIClient


API_KEY_ENV = {
    ServiceProvider.GEMINI: "GEMINI_API_KEY",
    ServiceProvider.OPENAI: "OPENAI_API_KEY",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="export_checker",
        description="EU export compliance check for Japanese food products",
    )
    parser.add_argument("url", nargs="?", default="", help="商品ページの URL")
    parser.add_argument("--ingredients", help="原材料表示（指定時はページ取得を省略）")
    parser.add_argument("--name", help="商品名（抽出結果を上書き）")
    parser.add_argument(
        "--provider",
        choices=[p.value for p in ServiceProvider],
        default=os.environ.get("EXPORT_CHECKER_PROVIDER", ServiceProvider.GEMINI.value),
        help="判定サービス",
    )
    parser.add_argument(
        "--extract-only",
        action="store_true",
        help="抽出結果の表示のみ行い、判定は依頼しない",
    )
    return parser


def main(argv=None):
    """
    CLI エントリーポイント

    Usage:
        python -m export_checker URL [--ingredients TEXT] [--name TEXT]
                                     [--provider gemini|openai] [--extract-only]

    Exit codes:
        0: 成功
        1: 失敗
    """
    # ロギング設定
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logger = logging.getLogger(__name__)

    args = build_parser().parse_args(argv)

    try:
        provider = ServiceProvider(args.provider)
    except ValueError:
        logger.error(f"Unknown provider: {args.provider}")
        sys.exit(1)

    try:
        service = ComplianceService(
            adapter=KokubuAdapter(),
            clients={
                ServiceProvider.GEMINI: GeminiClient(),
                ServiceProvider.OPENAI: OpenAIClient(),
            },
        )

        # 原材料が指定された場合はページ取得を省略（人手で確認・修正済みのテキスト）
        if args.ingredients:
            product_name = args.name or "Unknown Product"
            ingredients = args.ingredients
        elif args.url:
            loaded = service.load_product(args.url)
            if not loaded.success:
                logger.error(loaded.error)
                sys.exit(1)
            product_name = args.name or loaded.product.product_name
            ingredients = loaded.product.ingredients
        else:
            logger.error("Either a product URL or --ingredients is required")
            sys.exit(1)

        split = IngredientSplitter.split(ingredients)
        print(f"Product: {product_name}")
        print(f"Ingredients (原材料): {ingredients}")
        print(f"Raw materials (原材料): {', '.join(split.raw_materials) or '-'}")
        print(f"Additives (添加物): {', '.join(split.additives) or '-'}")

        if args.extract_only:
            sys.exit(0)

        api_key = os.environ.get(API_KEY_ENV[provider], "")
        if not api_key:
            logger.error(f"{API_KEY_ENV[provider]} environment variable is not set")
            sys.exit(1)

        result = service.analyze(product_name, ingredients, api_key, provider)
        if not result.success:
            logger.error(result.error)
            sys.exit(1)

        analysis = result.analysis
        print()
        print(f"VERDICT: {analysis.verdict} [{analysis.verdict_category.value}]")
        print()
        print("=== ENGLISH ===")
        print(analysis.english_reason)
        print()
        print("=== JAPANESE (日本語) ===")
        print(analysis.japanese_reason)
        sys.exit(0)

    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
