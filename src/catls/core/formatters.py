# src/catls/core/formatters.py
"""
Output formatters.

Every formatter streams three kinds of chunks: a header, one block per
processed file, and a footer. The line rendering (line-number prefixes and the
truncation notice) is shared; each format only decides how to wrap and escape.
"""
import html
import json
import sys
import textwrap
import threading
from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Dict, List, Mapping, Optional, TextIO, Type

from catls.config import (
    EXTENSION_LANGUAGES,
    SUPPORTED_FORMATS,
    TYPE_LANGUAGES,
    PipelineConfig,
)
from catls.errors import ConfigError, OutputError, check_cancelled
from catls.models import ProcessedFile

BINARY_NOTICE = "Binary file - contents not displayed"


def render_lines(processed: ProcessedFile, show_line_numbers: bool) -> List[str]:
    """Content lines as displayed, followed by the truncation notice if any."""
    if show_line_numbers:
        rendered = [f"{line.line_number:4d}| {line.content}" for line in processed.lines]
    else:
        rendered = [line.content for line in processed.lines]

    if processed.is_truncated and processed.remaining_lines > 0:
        rendered.append(f"... ({processed.remaining_lines} more lines)")
    return rendered


class OutputFormatter(ABC):
    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def write_header(self, cancel: Optional[threading.Event] = None) -> None:
        check_cancelled(cancel)
        self._emit(self.header())

    def write_file(
        self,
        processed: ProcessedFile,
        config: PipelineConfig,
        cancel: Optional[threading.Event] = None,
    ) -> None:
        check_cancelled(cancel)
        self._emit(self.format_file(processed, config))

    def write_footer(self, cancel: Optional[threading.Event] = None) -> None:
        check_cancelled(cancel)
        self._emit(self.footer())

    def header(self) -> str:
        return ""

    def footer(self) -> str:
        return ""

    @abstractmethod
    def format_file(self, processed: ProcessedFile, config: PipelineConfig) -> str:
        """Returns the complete text block for one file."""

    def _emit(self, text: str) -> None:
        if not text:
            return
        try:
            self.stream.write(text)
        except OSError as e:
            raise OutputError(f"failed to write output: {e}") from e


class XMLOutput(OutputFormatter):
    """
    <files> root with one <file path="..."> element per file.
    Path, error and type text is entity-escaped; content lines are written as-is.
    """

    def header(self) -> str:
        return "<files>\n"

    def footer(self) -> str:
        return "</files>\n"

    def format_file(self, processed: ProcessedFile, config: PipelineConfig) -> str:
        out = [f'<file path="{html.escape(processed.record.rel_path)}">']

        if processed.error is not None:
            out.append(f"<error>{html.escape(processed.error)}</error>")
        elif processed.record.is_binary:
            out.append("<binary>true</binary>")
        else:
            if processed.file_type:
                out.append(f"<type>{html.escape(processed.file_type)}</type>")
            out.append("<content>")
            out.extend(render_lines(processed, config.show_line_numbers))
            out.append("</content>")

        out.append("</file>")
        return "\n".join(out) + "\n"


class JSONOutput(OutputFormatter):
    """A JSON array of file objects, streamed one object at a time."""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(stream)
        self._first_file = True

    def header(self) -> str:
        self._first_file = True
        return "["

    def footer(self) -> str:
        return "\n]\n"

    def format_file(self, processed: ProcessedFile, config: PipelineConfig) -> str:
        separator = "\n" if self._first_file else ",\n"
        self._first_file = False

        body = json.dumps(self.to_dict(processed, config), indent=2, ensure_ascii=False)
        return separator + textwrap.indent(body, "  ")

    @staticmethod
    def to_dict(processed: ProcessedFile, config: PipelineConfig) -> Dict[str, object]:
        item: Dict[str, object] = {
            "path": processed.record.rel_path,
            "binary": processed.record.is_binary,
        }
        if processed.error is not None:
            item["error"] = processed.error
            return item
        if processed.record.is_binary:
            return item

        if processed.file_type:
            item["type"] = processed.file_type
        item["content"] = "\n".join(render_lines(processed, config.show_line_numbers))
        item["total_lines"] = processed.total_lines
        item["truncated"] = processed.is_truncated
        return item


class MarkdownOutput(OutputFormatter):
    """
    One "## <path>" section per file with a fenced, language-tagged code block.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        type_languages: Mapping[str, str] = TYPE_LANGUAGES,
        extension_languages: Mapping[str, str] = EXTENSION_LANGUAGES,
    ):
        super().__init__(stream)
        self.type_languages = type_languages
        self.extension_languages = extension_languages
        self._first_file = True

    def header(self) -> str:
        # No document wrapper, but a new stream starts without a separator
        self._first_file = True
        return ""

    def format_file(self, processed: ProcessedFile, config: PipelineConfig) -> str:
        out = []
        # Blank line between sections, none before the first
        if not self._first_file:
            out.append("")
        self._first_file = False

        rel_path = processed.record.rel_path
        out.append(f"## {rel_path}")
        out.append("")

        if processed.error is not None:
            out.append(f"**Error:** {processed.error}")
            out.append("")
        elif processed.record.is_binary:
            out.append(f"*{BINARY_NOTICE}*")
        else:
            language = self.language_for(processed.file_type, rel_path)
            out.append(f'```{language} name="{PurePosixPath(rel_path).name}"')
            out.extend(render_lines(processed, config.show_line_numbers))
            out.append("```")

        return "\n".join(out) + "\n"

    def language_for(self, file_type: str, rel_path: str) -> str:
        if file_type:
            language = self.type_languages.get(file_type)
            if language:
                return language

        ext = PurePosixPath(rel_path).suffix.lower().lstrip(".")
        return self.extension_languages.get(ext, "text")


FORMATTERS: Dict[str, Type[OutputFormatter]] = {
    "xml": XMLOutput,
    "json": JSONOutput,
    "markdown": MarkdownOutput,
}


def get_formatter(name: str, stream: Optional[TextIO] = None) -> OutputFormatter:
    try:
        formatter_cls = FORMATTERS[name]
    except KeyError:
        raise ConfigError(
            f"unsupported output format: {name} (supported: {', '.join(SUPPORTED_FORMATS)})"
        ) from None
    return formatter_cls(stream)
