"""
Review Focus Composer

Expands the review options into the ordered checklist of criteria
that is embedded in the code review prompt.
"""

from typing import Dict, List

from ..config import ReviewConfig
from ..models.review import ReviewFocus


FOCUS_CRITERIA: Dict[str, Dict[str, List[str]]] = {
    "japanese": {
        "basic": [
            "基本的なコード品質（可読性、命名規則、コメント）",
            "明らかなバグや問題点",
        ],
        "detailed": [
            "コード品質（可読性、命名規則、コメント、構造）",
            "バグや問題点",
            "エッジケースの考慮",
            "テストの適切さ",
        ],
        "comprehensive": [
            "コード品質（可読性、命名規則、コメント、構造、一貫性）",
            "バグや問題点",
            "エッジケースの考慮",
            "テストの適切さと網羅性",
            "アーキテクチャの整合性",
            "将来的な拡張性と保守性",
        ],
        "code_quality": [
            "コードの可読性と保守性",
            "適切な抽象化と責務の分離",
            "一貫した命名規則とスタイル",
        ],
        "best_practices": [
            "言語やフレームワークのベストプラクティス",
            "デザインパターンの適切な使用",
            "コーディング標準への準拠",
        ],
        "security": [
            "セキュリティの脆弱性",
            "入力検証と出力エスケープ",
            "認証と認可の問題",
            "機密情報の取り扱い",
        ],
        "performance": [
            "パフォーマンスの問題",
            "リソース使用の効率性",
            "アルゴリズムの複雑性",
            "データベースクエリの最適化",
        ],
        "focus_areas": ["特定の焦点領域: {areas}"],
        "positive_feedback": ["良い実装や改善点も積極的に指摘してください"],
    },
    "english": {
        "basic": [
            "Basic code quality (readability, naming conventions, comments)",
            "Obvious bugs and problems",
        ],
        "detailed": [
            "Code quality (readability, naming conventions, comments, structure)",
            "Bugs and problems",
            "Handling of edge cases",
            "Adequacy of tests",
        ],
        "comprehensive": [
            "Code quality (readability, naming conventions, comments, structure, consistency)",
            "Bugs and problems",
            "Handling of edge cases",
            "Adequacy and coverage of tests",
            "Architectural consistency",
            "Future extensibility and maintainability",
        ],
        "code_quality": [
            "Readability and maintainability of the code",
            "Appropriate abstraction and separation of responsibilities",
            "Consistent naming conventions and style",
        ],
        "best_practices": [
            "Language and framework best practices",
            "Appropriate use of design patterns",
            "Compliance with coding standards",
        ],
        "security": [
            "Security vulnerabilities",
            "Input validation and output escaping",
            "Authentication and authorization issues",
            "Handling of sensitive information",
        ],
        "performance": [
            "Performance problems",
            "Efficiency of resource usage",
            "Algorithmic complexity",
            "Optimization of database queries",
        ],
        "focus_areas": ["Specific focus areas: {areas}"],
        "positive_feedback": ["Actively point out good implementations and improvements as well"],
    },
}

# 深さ以外の観点はこの順序で追加する
FLAG_ORDER = ("code_quality", "best_practices", "security", "performance")


def compose_review_focus(config: ReviewConfig) -> ReviewFocus:
    """
    Build the ordered review checklist for the given options.

    Args:
        config: Review options (depth tier, boolean flags, focus areas)

    Returns:
        Tuple of criteria strings, deterministic for identical input
    """
    criteria = FOCUS_CRITERIA.get(config.language, FOCUS_CRITERIA["japanese"])
    focus: List[str] = []

    depth = config.depth or "basic"
    if depth in ("basic", "detailed", "comprehensive"):
        focus.extend(criteria[depth])

    for flag in FLAG_ORDER:
        if getattr(config, flag):
            focus.extend(criteria[flag])

    if config.focus_areas:
        areas = ", ".join(config.focus_areas)
        focus.extend(line.format(areas=areas) for line in criteria["focus_areas"])

    if config.include_positive_feedback:
        focus.extend(criteria["positive_feedback"])

    return tuple(focus)


def format_review_focus(focus: ReviewFocus) -> str:
    """Render the checklist as markdown bullets."""
    return "\n".join(f"- {item}" for item in focus)
