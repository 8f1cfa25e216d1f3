# src/catls/utils/files.py
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Iterator

logger = logging.getLogger(__name__)


@contextmanager
def open_for_read(path: Path, mode: str = "rb", **kwargs) -> Iterator[IO]:
    """
    Opens a file for the duration of a with-block.
    Errors from open() propagate; a failing close() is only logged as a warning.
    """
    handle = open(path, mode, **kwargs)
    try:
        yield handle
    finally:
        try:
            handle.close()
        except OSError as e:
            logger.warning("failed to close file %s: %s", path, e)
