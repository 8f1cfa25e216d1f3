# src/catls/core/processor.py
import logging
from pathlib import Path
from typing import List, Mapping, Optional

from catls.config import EXTENSION_TYPES, MAX_DISPLAY_LINES, TRUNCATE_TO_LINES
from catls.core.filter import FileFilter
from catls.models import FileRecord, ProcessedFile
from catls.utils.files import open_for_read

logger = logging.getLogger(__name__)


class ExtensionTypeDetector:
    """Maps a file extension (case-insensitive) to a file type, '' when unknown."""

    def __init__(self, extension_types: Mapping[str, str] = EXTENSION_TYPES):
        self.extension_types = extension_types

    def detect_type(self, path: Path) -> str:
        ext = path.suffix.lower().lstrip(".")
        if not ext:
            # Dockerfile, Makefile
            ext = path.name.lower()
        return self.extension_types.get(ext, "")


def read_lines(path: Path) -> List[str]:
    """Reads a text file as UTF-8, splitting on '\\n' and dropping a trailing '\\r'."""
    lines = []
    with open_for_read(path, "r", encoding="utf-8", errors="replace", newline="\n") as f:
        for raw in f:
            line = raw[:-1] if raw.endswith("\n") else raw
            if line.endswith("\r"):
                line = line[:-1]
            lines.append(line)
    return lines


class FileProcessor:
    def __init__(self, type_detector: Optional[ExtensionTypeDetector] = None):
        self.type_detector = type_detector or ExtensionTypeDetector()

    def process(self, record: FileRecord, file_filter: FileFilter) -> ProcessedFile:
        """
        Reads, filters and truncates one file.
        Read failures are returned in ProcessedFile.error rather than raised.
        """
        if record.is_binary:
            return ProcessedFile(record=record)

        file_type = self.type_detector.detect_type(record.path)

        try:
            lines = read_lines(record.path)
        except OSError as e:
            logger.debug("Could not read %s: %s", record.path, e)
            return ProcessedFile(record=record, file_type=file_type, error=str(e))

        filtered = file_filter.filter_content(lines)

        # A content pattern already bounds the output, so it disables truncation
        if len(filtered) > MAX_DISPLAY_LINES and not file_filter.has_content_pattern:
            return ProcessedFile(
                record=record,
                file_type=file_type,
                lines=filtered[:TRUNCATE_TO_LINES],
                total_lines=len(lines),
                is_truncated=True,
            )

        return ProcessedFile(
            record=record,
            file_type=file_type,
            lines=filtered,
            total_lines=len(lines),
        )
