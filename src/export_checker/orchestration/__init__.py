"""
オーケストレーション層

取得・抽出・判定の各段階の実行と失敗時のメッセージ変換を提供します。
"""

from .compliance_service import ComplianceService, Stage, StageResult, describe_failure

__all__ = ["ComplianceService", "Stage", "StageResult", "describe_failure"]
