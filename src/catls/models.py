# src/catls/models.py
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class FileRecord:
    """A discovered file: where it is, how it is displayed, and whether it is binary."""
    path: Path
    rel_path: str
    is_binary: bool


@dataclass(frozen=True)
class FilteredLine:
    line_number: int  # 1-based, never renumbered after filtering
    content: str


@dataclass(frozen=True)
class ProcessedFile:
    """Immutable result of processing one FileRecord, consumed by a formatter."""
    record: FileRecord
    file_type: str = ""
    lines: Tuple[FilteredLine, ...] = ()
    total_lines: int = 0
    is_truncated: bool = False
    error: Optional[str] = None

    @property
    def remaining_lines(self) -> int:
        return self.total_lines - len(self.lines)
