# src/catls/core/filter.py
import fnmatch
import logging
from typing import Iterable, Optional, Sequence, Tuple

import pathspec

from catls.config import PipelineConfig
from catls.models import FileRecord, FilteredLine

logger = logging.getLogger(__name__)


def build_spec(patterns: Iterable[str]) -> Optional[pathspec.PathSpec]:
    """Compiles gitwildmatch patterns; returns None when there are none."""
    lines = [p for p in patterns if p and p.strip()]
    if not lines:
        return None
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


class FileFilter:
    """
    Decides which files are rendered and which of their lines are kept.

    Path admission is evaluated against the record's relative path; excludes
    always win over includes.
    """

    def __init__(self, config: PipelineConfig):
        self.include_spec = build_spec(config.include_globs())
        self.exclude_spec = build_spec(config.all_ignore_globs())
        self.omit_bins = config.omit_bins
        self.content_pattern = config.content_pattern or None

    @property
    def has_content_pattern(self) -> bool:
        return self.content_pattern is not None

    def should_include(self, record: FileRecord) -> bool:
        if self.include_spec is not None and not self.include_spec.match_file(record.rel_path):
            return False

        if self.exclude_spec is not None and self.exclude_spec.match_file(record.rel_path):
            logger.debug("Excluding %s (ignore glob)", record.rel_path)
            return False

        if self.omit_bins and record.is_binary:
            return False

        return True

    def filter_content(self, lines: Sequence[str]) -> Tuple[FilteredLine, ...]:
        # Line numbers are kept as-is; gaps mark the lines that were dropped
        if self.content_pattern is None:
            return tuple(FilteredLine(i, line) for i, line in enumerate(lines, start=1))

        return tuple(
            FilteredLine(i, line)
            for i, line in enumerate(lines, start=1)
            if fnmatch.fnmatchcase(line, self.content_pattern)
        )
