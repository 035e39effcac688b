"""
Prompt Builder

Builds the three prompts of a review run (repository structure,
code review, summary comment) from language-specific templates.
"""

import re
import logging
from typing import Dict, List, Mapping, Sequence

from ..models.pr_diff import ChangedFile, ChangeContext


logger = logging.getLogger(__name__)


PLACEHOLDER_PATTERN = re.compile(r'\{(\w+)\}')


def render_template(template: str, variables: Mapping[str, str]) -> str:
    """
    Substitute {name} placeholders in a template.

    Placeholders without a value are left untouched, and substituted
    values are inserted literally (never expanded again).

    Args:
        template: Template text
        variables: Placeholder name to replacement text

    Returns:
        Rendered text
    """
    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name in variables:
            return str(variables[name])
        return match.group(0)

    return PLACEHOLDER_PATTERN.sub(replace, template)


class PromptBuilder:
    """
    Builds structured prompts for LLM review generation.

    Templates are kept per language; the code review template asks the
    model for a file-comments section that CommentExtractor can parse.
    """

    def __init__(self, language: str = "japanese"):
        """
        Initialize prompt builder.

        Args:
            language: Language for review generation ("japanese" or "english")
        """
        self.templates = self._load_templates()
        if language not in self.templates:
            logger.warning(f"Unknown prompt language {language!r}, using japanese")
            language = "japanese"
        self.language = language

    @property
    def template(self) -> Dict[str, str]:
        return self.templates[self.language]

    def build_structure_prompt(self, paths: Sequence[str]) -> str:
        """
        Build the repository structure analysis prompt.

        Args:
            paths: File paths of the repository tree

        Returns:
            Rendered prompt
        """
        return render_template(
            self.template["structure_prompt"],
            {"repository_structure": "\n".join(paths)},
        )

    def build_review_prompt(
        self,
        context: ChangeContext,
        repository_info: str,
        review_focus: str,
    ) -> str:
        """
        Build the detailed code review prompt.

        Args:
            context: Pull request snapshot
            repository_info: Model's analysis of the repository structure
            review_focus: Rendered review checklist

        Returns:
            Rendered prompt
        """
        logger.debug(f"Building review prompt for {len(context.files)} files")

        return render_template(
            self.template["review_prompt"],
            {
                "repository_info": repository_info,
                "pr_title": context.title,
                "pr_description": self._description(context),
                "pr_author": context.author,
                "pr_branch": context.head_ref,
                "changed_files": self.format_changed_files_list(context.files),
                "diff_details": self.format_diff_details(context.files),
                "review_focus": review_focus,
            },
        )

    def build_summary_prompt(
        self,
        context: ChangeContext,
        detailed_review: str,
        model_name: str = "",
    ) -> str:
        """
        Build the summary comment prompt.

        Args:
            context: Pull request snapshot
            detailed_review: Model output of the code review step
            model_name: Model name mentioned in the comment footer

        Returns:
            Rendered prompt
        """
        return render_template(
            self.template["summary_prompt"],
            {
                "pr_title": context.title,
                "pr_description": self._description(context),
                "pr_author": context.author,
                "detailed_review": detailed_review,
                "model_name": model_name or "LLM",
            },
        )

    def format_changed_files_list(self, files: Sequence[ChangedFile]) -> str:
        """One line per changed file: path, status and counts."""
        return "\n".join(
            f"- {f.path} ({f.status}, +{f.additions}, -{f.deletions})" for f in files
        )

    def format_diff_details(self, files: Sequence[ChangedFile]) -> str:
        """Per-file change details with the fenced patch when available."""
        labels = self.template
        blocks: List[str] = []

        for f in files:
            lines = [
                f"{labels['label_file']}: {f.path}",
                f"{labels['label_status']}: {f.status}",
                f"{labels['label_additions']}: {f.additions}",
                f"{labels['label_deletions']}: {f.deletions}",
                f"{labels['label_changes']}: {f.changes}",
            ]
            if f.previous_path:
                lines.append(f"{labels['label_previous']}: {f.previous_path}")
            if f.patch:
                lines.append(f"{labels['label_diff']}:\n```\n{f.patch}\n```")
            blocks.append("\n".join(lines) + "\n")

        return "\n---\n\n".join(blocks)

    def _description(self, context: ChangeContext) -> str:
        return context.description or self.template["no_description"]

    def _load_templates(self) -> Dict[str, Dict[str, str]]:
        """Load prompt templates for different languages."""
        return {
            "japanese": {
                "structure_prompt": """
あなたはコードレビューを行う優秀なソフトウェアエンジニアです。
以下のリポジトリ構造を分析し、このプロジェクトの概要を理解してください。

# リポジトリ構造
{repository_structure}

この情報を基に、プロジェクトの主要なコンポーネント、アーキテクチャ、設計パターンを特定し、簡潔に説明してください。
この理解は、後ほどプルリクエストの変更内容をレビューする際に役立ちます。
""",

                "review_prompt": """
あなたはコードレビューを行う優秀なソフトウェアエンジニアです。
以下のプルリクエストの変更内容を分析し、詳細なレビューを提供してください。

# リポジトリ情報
{repository_info}

# プルリクエスト情報
タイトル: {pr_title}
説明: {pr_description}
作成者: {pr_author}
ブランチ: {pr_branch}

# 変更ファイル一覧
{changed_files}

# 変更内容の詳細
{diff_details}

以下の観点からレビューを行ってください：
{review_focus}

レビューは以下の形式で提供してください：

## 概要
(変更内容の全体的な評価と主要なポイント)

## 良い点
(コードの良い部分、適切な実装、ベストプラクティスの適用など)

## 改善点
(潜在的な問題、バグ、セキュリティリスク、パフォーマンス問題など)

## 提案
(コードの改善方法、代替アプローチ、リファクタリングの提案など)

## 質問
(明確にすべき点、設計の意図に関する質問など)

## ファイル別コメント
各ファイルに対するコメントを以下の形式で提供してください。必ず行番号を指定してください。

### [ファイル名]
- **行番号**: [コメント]
- **行番号**: [コメント]

例：
### src/index.ts
- **15行目**: この関数名はもっと具体的にすべきです。例えば `processData` ではなく `validateUserInput` のように。
- **42-45行目**: このループは O(n²) の計算量があります。配列のサイズが大きい場合、パフォーマンスの問題が発生する可能性があります。

各コメントは具体的で建設的であり、可能な限りコード例を含めてください。また、必ず行番号を指定してください。行番号はdiffの情報から特定できます。複数行にまたがる場合は範囲（例：42-45行目）で指定してください。
""",

                "summary_prompt": """
あなたはコードレビューを行う優秀なソフトウェアエンジニアです。
以下のプルリクエストの詳細レビューに基づいて、簡潔なサマリーコメントを作成してください。

# プルリクエスト情報
タイトル: {pr_title}
説明: {pr_description}
作成者: {pr_author}

# 詳細レビュー
{detailed_review}

このサマリーコメントは、プルリクエストの全体的な評価を提供し、主要な改善点と良い点をハイライトするものです。
コメントは簡潔で建設的であり、具体的な改善提案を含めてください。

以下の形式でサマリーコメントを作成してください：

## プルリクエストレビュー: {pr_title}

### 全体評価
(変更内容の全体的な評価と主要なポイント)

### 主な良い点
- (箇条書きで良い点を列挙)

### 主な改善点
- (箇条書きで改善点を列挙)

### 次のステップ
(推奨される次のアクション)

---
*このレビューは{model_name}によって自動生成されました。詳細なコメントは各ファイルを参照してください。*
""",

                "no_description": "(説明なし)",
                "label_file": "ファイル",
                "label_status": "状態",
                "label_additions": "追加行数",
                "label_deletions": "削除行数",
                "label_changes": "変更行数",
                "label_previous": "旧ファイル名",
                "label_diff": "差分",
            },

            "english": {
                "structure_prompt": """
You are an excellent software engineer performing a code review.
Analyze the following repository structure and build an understanding of the project.

# Repository Structure
{repository_structure}

Based on this information, identify and briefly describe the main components, architecture and design patterns of the project.
This understanding will help when reviewing the changes of the pull request later.
""",

                "review_prompt": """
You are an excellent software engineer performing a code review.
Analyze the changes of the following pull request and provide a detailed review.

# Repository Information
{repository_info}

# Pull Request Information
Title: {pr_title}
Description: {pr_description}
Author: {pr_author}
Branch: {pr_branch}

# Changed Files
{changed_files}

# Change Details
{diff_details}

Review the changes from the following perspectives:
{review_focus}

Provide the review in the following format:

## Overview
(Overall assessment of the changes and the main points)

## Strengths
(Good parts of the code, sound implementation, applied best practices)

## Improvements
(Potential problems, bugs, security risks, performance issues)

## Suggestions
(Ways to improve the code, alternative approaches, refactoring ideas)

## Questions
(Points to clarify, questions about design intent)

## File Comments
Provide comments for each file in the following format. Always specify line numbers.

### [file name]
- **line N**: [comment]
- **lines N-M**: [comment]

Example:
### src/index.ts
- **line 15**: This function name should be more specific, e.g. `validateUserInput` instead of `processData`.
- **lines 42-45**: This loop is O(n²). Performance may suffer when the array is large.

Each comment should be specific and constructive and include code examples where possible. Always specify line numbers of the new version of the file, which can be derived from the diff. Use a range (e.g. lines 42-45) when a comment spans several lines.
""",

                "summary_prompt": """
You are an excellent software engineer performing a code review.
Based on the detailed review of the following pull request, write a concise summary comment.

# Pull Request Information
Title: {pr_title}
Description: {pr_description}
Author: {pr_author}

# Detailed Review
{detailed_review}

The summary comment gives the overall assessment of the pull request and highlights the main improvements and strengths.
Keep it concise and constructive, and include concrete suggestions.

Write the summary comment in the following format:

## Pull Request Review: {pr_title}

### Overall Assessment
(Overall assessment of the changes and the main points)

### Main Strengths
- (bullet list of strengths)

### Main Improvements
- (bullet list of improvements)

### Next Steps
(Recommended next actions)

---
*This review was generated automatically by {model_name}. See the comments on each file for details.*
""",

                "no_description": "(no description)",
                "label_file": "File",
                "label_status": "Status",
                "label_additions": "Additions",
                "label_deletions": "Deletions",
                "label_changes": "Changes",
                "label_previous": "Previous name",
                "label_diff": "Diff",
            },
        }
