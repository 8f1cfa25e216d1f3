# src/catls/core/pipeline.py
import logging
import os
import sys
import threading
from typing import List, Optional, Sequence, TextIO

from catls.config import PipelineConfig
from catls.core.filter import FileFilter
from catls.core.formatters import OutputFormatter, get_formatter
from catls.core.processor import FileProcessor
from catls.core.scanner import Scanner
from catls.errors import ConfigError, OutputError, check_cancelled
from catls.models import FileRecord

logger = logging.getLogger(__name__)


class Pipeline:
    """
    Scanner -> FileFilter -> FileProcessor -> OutputFormatter, one file at a time.

    All collaborators can be injected; by default they are built from the config.
    The formatter is resolved eagerly so an unsupported format fails before any
    scanning happens.
    """

    def __init__(
        self,
        config: PipelineConfig,
        stream: Optional[TextIO] = None,
        scanner: Optional[Scanner] = None,
        processor: Optional[FileProcessor] = None,
        formatter: Optional[OutputFormatter] = None,
        cancel: Optional[threading.Event] = None,
    ):
        self.config = config
        self.stream = stream if stream is not None else sys.stdout
        self.scanner = scanner or Scanner()
        self.file_filter = FileFilter(config)
        self.processor = processor or FileProcessor()
        self.formatter = formatter or get_formatter(config.output_format, self.stream)
        self.cancel = cancel

    def validate(self) -> None:
        if not os.path.exists(self.config.directory):
            raise ConfigError(f"directory '{self.config.directory}' does not exist")
        if not os.path.isdir(self.config.directory):
            raise ConfigError(f"'{self.config.directory}' is not a directory")

    def discover(self) -> List[FileRecord]:
        logger.debug("Ignoring directories: %s", self.config.normalized_ignore_dirs())
        return self.scanner.scan(self.config, self.cancel)

    def run(self, selected: Optional[Sequence[FileRecord]] = None) -> int:
        """
        Runs the whole pipeline and returns the number of files rendered.

        `selected` replaces the scan with a pre-chosen inventory (e.g. from an
        interactive picker). Nothing is rendered when the inventory is empty.
        """
        self.validate()

        files = list(selected) if selected is not None else self.discover()
        if not files:
            try:
                self.stream.write(f"No files found in directory: {self.config.directory}\n")
            except OSError as e:
                raise OutputError(f"failed to write output: {e}") from e
            return 0

        return self.render(files)

    def render(self, files: Sequence[FileRecord]) -> int:
        rendered = 0
        self.formatter.write_header(self.cancel)

        for record in files:
            check_cancelled(self.cancel)

            if not self.file_filter.should_include(record):
                continue

            processed = self.processor.process(record, self.file_filter)
            self.formatter.write_file(processed, self.config, self.cancel)
            rendered += 1

        self.formatter.write_footer(self.cancel)
        return rendered
