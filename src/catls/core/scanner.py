# src/catls/core/scanner.py
import logging
import os
import stat
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from catls.config import PipelineConfig
from catls.core.binary import BinaryDetector
from catls.errors import check_cancelled
from catls.models import FileRecord

logger = logging.getLogger(__name__)


class Scanner:
    """
    Walks the directory tree with an explicit stack and builds the file inventory.
    """

    def __init__(self, binary_detector: Optional[BinaryDetector] = None):
        self.binary_detector = binary_detector or BinaryDetector()

    def scan(self, config: PipelineConfig, cancel: Optional[threading.Event] = None) -> List[FileRecord]:
        """
        Returns every regular file under config.directory, sorted by relative path.
        Raises PipelineCancelled if `cancel` is set between two directories.
        """
        root = Path(config.directory)
        ignore_dirs = set(config.normalized_ignore_dirs())
        # Non-recursive mode lists the root only (depth 0)
        max_depth = None if config.recursive else 1

        files: List[FileRecord] = []
        stack: List[Tuple[Path, int]] = [(root, 0)]

        while stack:
            check_cancelled(cancel)

            current, depth = stack.pop()
            if max_depth is not None and depth >= max_depth:
                continue

            try:
                names = sorted(os.listdir(current))
            except OSError as e:
                logger.debug("Error accessing directory %s: %s", current, e)
                continue

            for name in names:
                if name in (".", ".."):
                    continue
                if not config.show_all and name.startswith("."):
                    continue

                full_path = current / name
                try:
                    st = os.lstat(full_path)
                except OSError:
                    continue

                if stat.S_ISDIR(st.st_mode):
                    if self._is_ignored_dir(full_path, root, ignore_dirs):
                        logger.debug("Ignoring directory: %s", full_path)
                    else:
                        stack.append((full_path, depth + 1))
                elif stat.S_ISREG(st.st_mode):
                    rel_path = self._relative_path(full_path, config)
                    if rel_path is None:
                        continue
                    files.append(FileRecord(
                        path=full_path,
                        rel_path=rel_path,
                        is_binary=self.binary_detector.is_binary(full_path),
                    ))
                # Symlinks, sockets, devices: skipped

        files.sort(key=lambda f: f.rel_path)
        return files

    @staticmethod
    def _is_ignored_dir(path: Path, root: Path, ignore_dirs: set) -> bool:
        if path.name in ignore_dirs:
            return True
        try:
            rel = path.relative_to(root).as_posix()
        except ValueError:
            return False
        return rel in ignore_dirs

    @staticmethod
    def _relative_path(path: Path, config: PipelineConfig) -> Optional[str]:
        try:
            return Path(os.path.relpath(path, config.base_dir)).as_posix()
        except ValueError:
            # e.g. a different drive on Windows
            return None
