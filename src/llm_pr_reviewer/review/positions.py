"""
Diff Position Mapper

Maps absolute line numbers of a changed file onto the "position"
coordinates GitHub uses to anchor review comments inside a patch.
"""

import re
import logging
from typing import Dict, Iterable, Optional

from ..models.pr_diff import ChangedFile, DiffPositionIndex


logger = logging.getLogger(__name__)


class MalformedPatchError(ValueError):
    """Raised internally when a hunk header cannot be parsed."""


class DiffPositionMapper:
    """
    Builds DiffPositionIndex objects from unified-diff patch text.

    Position counting follows the GitHub review API: the first hunk
    header is position 0, the line right below it is position 1, and
    every following line of the patch (later hunk headers included)
    advances the counter by one.
    """

    def __init__(self):
        """Initialize diff position mapper."""
        self.hunk_header_pattern = re.compile(r'^@@\s*-(\d+)(?:,(\d+))?\s*\+(\d+)(?:,(\d+))?\s*@@(.*)$')

    def build_index(self, patch: Optional[str]) -> DiffPositionIndex:
        """
        Build the position index for one file's patch.

        Args:
            patch: Raw unified-diff patch text (may be None)

        Returns:
            DiffPositionIndex; empty when the patch is missing or malformed
        """
        if not patch:
            return DiffPositionIndex()

        try:
            return self._walk_patch(patch)
        except MalformedPatchError as e:
            logger.warning(f"Ignoring malformed patch: {e}")
            return DiffPositionIndex()

    def index_files(self, files: Iterable[ChangedFile]) -> Dict[str, DiffPositionIndex]:
        """
        Build position indexes for every changed file.

        Args:
            files: Changed files of a pull request

        Returns:
            Mapping of file path to its DiffPositionIndex
        """
        indexes = {}
        for changed_file in files:
            indexes[changed_file.path] = self.build_index(changed_file.patch)
        return indexes

    def _walk_patch(self, patch: str) -> DiffPositionIndex:
        index = DiffPositionIndex()
        position = None  # None until the first hunk header
        old_line = 0
        new_line = 0

        lines = patch.split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        for raw_line in lines:
            # only "\n" ends a diff line; form feeds and U+2028 belong to the text
            line = raw_line[:-1] if raw_line.endswith("\r") else raw_line

            if line.startswith('@@'):
                header = self.hunk_header_pattern.match(line)
                if not header:
                    raise MalformedPatchError(f"bad hunk header {line!r}")

                old_line = int(header.group(1))
                new_line = int(header.group(3))
                position = 0 if position is None else position + 1
                continue

            if position is None:
                # File headers (diff --git, ---, +++) before the first hunk
                continue

            position += 1

            if line.startswith('+'):
                index.new_positions[new_line] = position
                new_line += 1
            elif line.startswith('-'):
                index.old_positions[old_line] = position
                old_line += 1
            elif line.startswith('\\'):
                # "\ No newline at end of file"
                continue
            else:
                # Context line; an empty line is context with its space stripped
                index.new_positions[new_line] = position
                index.old_positions[old_line] = position
                new_line += 1
                old_line += 1

        return index
