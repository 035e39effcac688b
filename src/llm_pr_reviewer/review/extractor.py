"""
Comment Extractor

Parses the free-form markdown review written by the language model
into file-and-line anchored comments that can be posted to GitHub.
Everything here is a pure text transformation: malformed fragments
are dropped, never raised.
"""

import re
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..models.pr_diff import ChangedFile, DiffPositionIndex
from ..models.review import ExtractedComment
from .positions import DiffPositionMapper


logger = logging.getLogger(__name__)


FILE_COMMENTS_HEADINGS = ("ファイル別コメント", "File Comments", "File-level Comments")
OVERVIEW_HEADINGS = ("概要", "Overview", "Summary")
IMPROVEMENT_HEADINGS = ("改善点", "提案", "Improvements", "Suggestions")


@dataclass
class MarkdownSection:
    """Level-two section of the review text."""
    heading: str
    body: str


class CommentExtractor:
    """
    Extracts anchored comments from a model review.

    Expects the layout requested by the review prompt:

        ## ファイル別コメント
        ### src/index.ts
        - **15行目**: comment
        - **42-45行目**: comment
    """

    def __init__(self, position_mapper: Optional[DiffPositionMapper] = None):
        """
        Initialize comment extractor.

        Args:
            position_mapper: Mapper used to resolve lines into diff positions
        """
        self.position_mapper = position_mapper or DiffPositionMapper()

        self.section_pattern = re.compile(r'^##(?!#)[ \t]*(.+?)[ \t#]*$', re.MULTILINE)
        self.file_heading_pattern = re.compile(r'^###(?!#)[ \t]*(.+?)[ \t]*$', re.MULTILINE)
        self.bullet_pattern = re.compile(r'^\s*[-*]\s+\*\*(.+?)\*\*\s*[:：]\s*(.*)$')
        self.plain_bullet_pattern = re.compile(r'^\s*(?:[-*]|\d+[.)])\s+(.+)$')
        self.fence_pattern = re.compile(r'^\s*(?:```|~~~)')
        self.line_ref_pattern = re.compile(
            r'^(?:lines?\s*|L)?(\d+)(?:\s*[-–~〜]\s*(?:L)?(\d+))?\s*(?:行目|行)?$',
            re.IGNORECASE,
        )

    def extract_comments(
        self,
        review_text: str,
        files: Sequence[ChangedFile],
    ) -> List[ExtractedComment]:
        """
        Extract line comments from the file-comments section.

        Args:
            review_text: Raw markdown response from the model
            files: Changed files of the pull request

        Returns:
            ExtractedComment objects in section, file and bullet order
        """
        sections = [
            section for section in self._sections(review_text or "")
            if self._heading_matches(section.heading, FILE_COMMENTS_HEADINGS)
        ]
        if not sections:
            logger.info("No file comments section in review")
            return []

        files_by_path = {f.path: f for f in files}
        indexes: Dict[str, DiffPositionIndex] = {}
        comments = []

        blocks = [block for section in sections for block in self._split_file_blocks(section.body)]
        for path, block in blocks:
            changed_file = files_by_path.get(path)
            if changed_file is None:
                logger.debug(f"Dropping comments for unknown file: {path}")
                continue

            if path not in indexes:
                indexes[path] = self.position_mapper.build_index(changed_file.patch)
            index = indexes[path]

            for reference, body in self._iter_bullets(block):
                line = self.parse_line_reference(reference)
                if line is None:
                    logger.debug(f"Dropping comment with bad line reference: {path} {reference!r}")
                    continue

                position = index.position_for(line)
                if position is None:
                    logger.debug(f"Dropping comment on unmapped line: {path}:{line}")
                    continue

                if not body:
                    continue

                comments.append(ExtractedComment(path=path, line=line, position=position, body=body))

        logger.info(f"Extracted {len(comments)} line comments")
        return comments

    def extract_overall_assessment(self, review_text: str) -> str:
        """Return the body of the overview section, or an empty string."""
        section = self._find_section(review_text or "", OVERVIEW_HEADINGS)
        return section.body.strip() if section else ""

    def extract_suggested_improvements(self, review_text: str) -> List[str]:
        """Collect bullet items from the improvement and suggestion sections."""
        improvements = []
        for section in self._sections(review_text or ""):
            if not self._heading_matches(section.heading, IMPROVEMENT_HEADINGS):
                continue
            for _, line in self._unfenced_lines(section.body):
                match = self.plain_bullet_pattern.match(line)
                if match:
                    improvements.append(match.group(1).strip())
        return improvements

    def parse_line_reference(self, reference: str) -> Optional[int]:
        """
        Parse a line reference such as "15行目", "42-45行目" or "lines 3-4".

        Args:
            reference: Text inside the bold marker of a bullet

        Returns:
            The referenced line (start of a range), or None if unparseable
        """
        match = self.line_ref_pattern.match(reference.strip())
        if not match:
            return None

        line = int(match.group(1))
        return line if line > 0 else None

    def _unfenced_lines(self, text: str) -> Iterable[Tuple[int, str]]:
        """Yield (offset, line) for every line outside fenced code blocks."""
        in_fence = False
        offset = 0
        for line in text.split('\n'):
            if self.fence_pattern.match(line):
                in_fence = not in_fence
            elif not in_fence:
                yield offset, line
            offset += len(line) + 1

    def _headings(self, text: str, pattern: re.Pattern) -> List[Tuple[int, int, str]]:
        headings = []
        for offset, line in self._unfenced_lines(text):
            match = pattern.match(line)
            if match:
                headings.append((offset, offset + len(line), match.group(1)))
        return headings

    def _sections(self, text: str) -> List[MarkdownSection]:
        headings = self._headings(text, self.section_pattern)
        sections = []
        for i, (_, end, heading) in enumerate(headings):
            stop = headings[i + 1][0] if i + 1 < len(headings) else len(text)
            sections.append(MarkdownSection(heading=heading, body=text[end:stop]))
        return sections

    def _find_section(self, text: str, names: Tuple[str, ...]) -> Optional[MarkdownSection]:
        for section in self._sections(text):
            if self._heading_matches(section.heading, names):
                return section
        return None

    def _heading_matches(self, heading: str, names: Tuple[str, ...]) -> bool:
        normalized = heading.strip().lower()
        return any(normalized == name.lower() for name in names)

    def _split_file_blocks(self, body: str) -> Iterable[Tuple[str, str]]:
        headings = self._headings(body, self.file_heading_pattern)
        for i, (_, end, heading) in enumerate(headings):
            stop = headings[i + 1][0] if i + 1 < len(headings) else len(body)
            yield self._clean_path(heading), body[end:stop]

    def _clean_path(self, raw: str) -> str:
        return raw.strip().strip('`').strip('[]').strip()

    def _iter_bullets(self, block: str) -> Iterable[Tuple[str, str]]:
        reference = None
        body_lines: List[str] = []
        in_fence = False

        for line in block.split('\n'):
            is_fence = bool(self.fence_pattern.match(line))
            if in_fence or is_fence:
                if is_fence:
                    in_fence = not in_fence
                # Code examples belong to the bullet they follow
                if reference is not None:
                    body_lines.append(line.rstrip())
                continue

            match = self.bullet_pattern.match(line)
            if match:
                if reference is not None:
                    yield reference, "\n".join(body_lines).strip()
                reference = match.group(1)
                body_lines = [match.group(2).strip()]
            elif reference is not None and line[:1].isspace() and line.strip():
                # Indented continuation of the current bullet
                body_lines.append(line.strip())
            elif reference is not None:
                yield reference, "\n".join(body_lines).strip()
                reference = None
                body_lines = []

        if reference is not None:
            yield reference, "\n".join(body_lines).strip()


def extract_comments(
    review_text: str,
    files: Sequence[ChangedFile],
    position_mapper: Optional[DiffPositionMapper] = None,
) -> List[ExtractedComment]:
    """Module-level shortcut for CommentExtractor.extract_comments."""
    return CommentExtractor(position_mapper).extract_comments(review_text, files)
