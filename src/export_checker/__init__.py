"""EU 向け食品輸出可否チェッカー"""

__version__ = "0.1.0"
