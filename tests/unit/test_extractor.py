"""
Unit tests for comment extraction from model reviews.
"""

import pytest

from llm_pr_reviewer.models.pr_diff import ChangedFile
from llm_pr_reviewer.review.extractor import CommentExtractor, extract_comments


ADDED_PATCH = "@@ -0,0 +1,60 @@\n" + "\n".join(f"+line {i}" for i in range(1, 61))


def make_files():
    return [
        ChangedFile(path="src/index.ts", status="added", additions=60, changes=60, patch=ADDED_PATCH),
        ChangedFile(path="a.ts", status="modified", additions=3, changes=3,
                    patch="@@ -9,0 +10,3 @@\n+a\n+b\n+c"),
    ]


REVIEW = """## 概要
全体的に良い変更です。

## 改善点
- エラー処理が不足しています
- 命名を見直してください

## 提案
1. テストを追加する

## ファイル別コメント

### src/index.ts
- **15行目**: この関数名はもっと具体的にすべきです。
- **42-45行目**: このループは O(n²) の計算量があります。

### a.ts
- **11行目**: fix this

## 質問
- なぜこの設計にしたのですか？
"""


class TestCommentExtractor:
    """Unit tests for CommentExtractor class."""

    def setup_method(self):
        self.extractor = CommentExtractor()

    def test_extracts_comments_in_order(self):
        comments = self.extractor.extract_comments(REVIEW, make_files())

        assert [(c.path, c.line) for c in comments] == [
            ("src/index.ts", 15),
            ("src/index.ts", 42),
            ("a.ts", 11),
        ]
        assert comments[0].position == 15
        assert comments[2].position == 2
        assert comments[2].body == "fix this"

    def test_range_reference_resolves_to_start(self):
        comments = self.extractor.extract_comments(REVIEW, make_files())

        ranged = [c for c in comments if "O(n²)" in c.body]
        assert len(ranged) == 1
        assert ranged[0].line == 42

    def test_missing_section_returns_empty(self):
        text = "## 概要\n問題ありません。\n\n## 改善点\n- なし"

        assert self.extractor.extract_comments(text, make_files()) == []

    @pytest.mark.parametrize("text", ["", None, "no markdown at all"])
    def test_degenerate_input_returns_empty(self, text):
        assert self.extractor.extract_comments(text, make_files()) == []

    def test_unknown_file_block_is_dropped(self):
        text = (
            "## ファイル別コメント\n"
            "### src/missing.ts\n"
            "- **3行目**: not part of this PR\n"
            "### a.ts\n"
            "- **10行目**: keep me\n"
        )

        comments = self.extractor.extract_comments(text, make_files())

        assert [(c.path, c.body) for c in comments] == [("a.ts", "keep me")]

    def test_unmapped_line_is_dropped(self):
        text = "## ファイル別コメント\n### a.ts\n- **5行目**: outside the hunk\n- **12行目**: inside\n"

        comments = self.extractor.extract_comments(text, make_files())

        assert [(c.line, c.position) for c in comments] == [(12, 3)]

    def test_unparseable_reference_is_dropped(self):
        text = "## ファイル別コメント\n### a.ts\n- **全体**: general remark\n- **10行目**: ok\n"

        comments = self.extractor.extract_comments(text, make_files())

        assert [c.line for c in comments] == [10]

    def test_file_without_patch_drops_everything(self):
        files = [ChangedFile(path="logo.png", status="added")]
        text = "## ファイル別コメント\n### logo.png\n- **1行目**: binary\n"

        assert self.extractor.extract_comments(text, files) == []

    def test_english_layout(self):
        text = (
            "## File Comments\n"
            "### `a.ts`\n"
            "- **line 10**: first\n"
            "* **lines 11-12**: second\n"
            "- **L12**: third\n"
        )

        comments = self.extractor.extract_comments(text, make_files())

        assert [(c.line, c.body) for c in comments] == [(10, "first"), (11, "second"), (12, "third")]

    def test_indented_continuation_lines_join_body(self):
        text = (
            "## ファイル別コメント\n"
            "### a.ts\n"
            "- **10行目**: first line\n"
            "  second line\n"
            "- **11行目**: next\n"
        )

        comments = self.extractor.extract_comments(text, make_files())

        assert comments[0].body == "first line\nsecond line"
        assert comments[1].body == "next"

    def test_section_ends_at_next_level_two_heading(self):
        text = (
            "## ファイル別コメント\n"
            "### a.ts\n"
            "- **10行目**: in section\n"
            "## 質問\n"
            "- **11行目**: not a file comment\n"
        )

        comments = self.extractor.extract_comments(text, make_files())

        assert [c.line for c in comments] == [10]

    def test_fenced_code_belongs_to_preceding_bullet(self):
        text = (
            "## File Comments\n"
            "### a.ts\n"
            "- **line 10**: use a helper:\n"
            "```python\n"
            "## helper\n"
            "- **line 12**: not a bullet\n"
            "def helper():\n"
            "    return 1\n"
            "```\n"
            "- **line 12**: second\n"
        )

        comments = self.extractor.extract_comments(text, make_files())

        assert [c.line for c in comments] == [10, 12]
        assert comments[0].body == (
            "use a helper:\n"
            "```python\n"
            "## helper\n"
            "- **line 12**: not a bullet\n"
            "def helper():\n"
            "    return 1\n"
            "```"
        )
        assert comments[1].body == "second"

    def test_headings_inside_fences_do_not_split_sections(self):
        text = (
            "## ファイル別コメント\n"
            "### src/index.ts\n"
            "- **3行目**: 例:\n"
            "~~~markdown\n"
            "## 概要\n"
            "### a.ts\n"
            "~~~\n"
            "### a.ts\n"
            "- **11行目**: fix this\n"
        )

        comments = self.extractor.extract_comments(text, make_files())

        assert [(c.path, c.line) for c in comments] == [("src/index.ts", 3), ("a.ts", 11)]
        assert self.extractor.extract_overall_assessment(text) == ""

    @pytest.mark.parametrize("reference,expected", [
        ("15行目", 15),
        ("42-45行目", 42),
        ("line 7", 7),
        ("Lines 3-9", 3),
        ("L20", 20),
        ("8", 8),
        ("0行目", None),
        ("全体", None),
        ("", None),
    ])
    def test_parse_line_reference(self, reference, expected):
        assert self.extractor.parse_line_reference(reference) == expected

    def test_overall_assessment(self):
        assert self.extractor.extract_overall_assessment(REVIEW) == "全体的に良い変更です。"
        assert self.extractor.extract_overall_assessment("no sections") == ""

    def test_suggested_improvements(self):
        improvements = self.extractor.extract_suggested_improvements(REVIEW)

        assert improvements == [
            "エラー処理が不足しています",
            "命名を見直してください",
            "テストを追加する",
        ]

    def test_module_level_shortcut(self):
        comments = extract_comments(REVIEW, make_files())

        assert len(comments) == 3
