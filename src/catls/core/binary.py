# src/catls/core/binary.py
import logging
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from catls.config import BINARY_SNIFF_BYTES
from catls.utils.files import open_for_read

logger = logging.getLogger(__name__)

DEFAULT_CLASSIFIER = ("file", "-b")


class BinaryDetector:
    """
    Classifies files as binary or text.

    The external classifier (``file -b`` by default) is authoritative whenever it
    runs. Only when it is missing or exits with an error do we fall back to
    looking for a null byte in the first 1024 bytes.
    """

    def __init__(self, command: Optional[Sequence[str]] = DEFAULT_CLASSIFIER):
        self.command = tuple(command) if command else None

    def is_binary(self, path: Path) -> bool:
        if self.command is not None:
            try:
                result = subprocess.run(
                    [*self.command, "--", str(path)],
                    capture_output=True,
                    text=True,
                    check=True,
                )
                return "text" not in result.stdout.lower()
            except (OSError, subprocess.CalledProcessError) as e:
                logger.debug("classifier unavailable for %s (%s), using byte heuristic", path, e)

        return self._is_binary_by_bytes(path)

    def _is_binary_by_bytes(self, path: Path) -> bool:
        """
        Reads the first 1024 bytes to check for null bytes.
        Unreadable and empty files count as binary.
        """
        try:
            with open_for_read(path, "rb") as f:
                chunk = f.read(BINARY_SNIFF_BYTES)
        except OSError:
            return True

        if not chunk:
            return True
        return b"\0" in chunk
