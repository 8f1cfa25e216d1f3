# src/catls/config.py
import os
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple

# --- Display limits ---
MAX_DISPLAY_LINES = 1000
TRUNCATE_TO_LINES = 100
BINARY_SNIFF_BYTES = 1024

SUPPORTED_FORMATS = ("xml", "json", "markdown")
DEFAULT_FORMAT = "xml"

DEFAULT_IGNORE_DIRS = (
    "node_modules",
    ".direnv",
    "build",
    "dist",
    "target",
    "venv",
    "env",
    ".env",
    "vendor",
    ".bundle",
    "coverage",
    "static",
)

# gitwildmatch syntax, merged in front of the user's --ignore-globs
DEFAULT_IGNORE_GLOBS = (
    # VCS metadata
    ".git/",
    ".svn/",
    ".hg/",
    # Language caches
    "__pycache__/",
    ".pytest_cache/",
    ".mypy_cache/",
    ".tox/",
    ".venv/",
    ".coverage",
    # Build output
    "build/",
    "dist/",
    # IDE / OS
    ".idea/",
    ".vscode/",
    ".DS_Store",
    # Generated code and licenses
    "*_templ.go",
    "LICENSE",
    "LICENSE.md",
    "LICENSE.txt",
)

# Extension (lowercase, no dot) -> detected file type
EXTENSION_TYPES: Mapping[str, str] = MappingProxyType({
    "sh": "bash",
    "bash": "bash",
    "rb": "ruby",
    "py": "python",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "html": "html",
    "htm": "html",
    "nix": "nix",
    "css": "css",
    "scss": "scss",
    "sass": "scss",
    "json": "json",
    "md": "markdown",
    "markdown": "markdown",
    "xml": "xml",
    "c": "c",
    "h": "c",
    "cpp": "cpp",
    "cxx": "cpp",
    "cc": "cpp",
    "hpp": "cpp",
    "hxx": "cpp",
    "toml": "toml",
    "java": "java",
    "rs": "rust",
    "go": "go",
    "php": "php",
    "pl": "perl",
    "sql": "sql",
    "templ": "go",
    "yml": "yaml",
    "yaml": "yaml",
    "dockerfile": "dockerfile",
    "makefile": "makefile",
})

# Detected type -> Markdown highlight language
TYPE_LANGUAGES: Mapping[str, str] = MappingProxyType({
    "bash": "bash",
    "ruby": "ruby",
    "python": "python",
    "javascript": "javascript",
    "typescript": "typescript",
    "html": "html",
    "nix": "nix",
    "css": "css",
    "scss": "scss",
    "sass": "scss",
    "json": "json",
    "markdown": "markdown",
    "xml": "xml",
    "c": "c",
    "cpp": "cpp",
    "toml": "toml",
    "java": "java",
    "rust": "rust",
    "go": "go",
    "php": "php",
    "perl": "perl",
    "sql": "sql",
    "templ": "go",
    "yaml": "yaml",
    "dockerfile": "dockerfile",
    "makefile": "makefile",
})

# Extension -> Markdown highlight language, used when the type lookup fails
EXTENSION_LANGUAGES: Mapping[str, str] = MappingProxyType({
    **EXTENSION_TYPES,
    "zsh": "bash",
    "txt": "text",
    "": "text",
})


def files_to_globs(files: Iterable[str]) -> List[str]:
    """
    Converts extra path arguments to include patterns.
    An existing path contributes its basename, anything else is taken as a pattern.
    """
    globs = []
    for f in files:
        if os.path.exists(f):
            globs.append(os.path.basename(os.path.normpath(f)))
        else:
            globs.append(f)
    return globs


@dataclass(frozen=True)
class PipelineConfig:
    """Options governing one catls run. Resolved once, never mutated."""
    directory: str = "."
    files: Tuple[str, ...] = ()
    show_all: bool = False
    recursive: bool = False
    debug: bool = False
    ignore_dirs: Tuple[str, ...] = DEFAULT_IGNORE_DIRS
    globs: Tuple[str, ...] = ()
    ignore_globs: Tuple[str, ...] = ()
    content_pattern: str = ""
    show_line_numbers: bool = False
    omit_bins: bool = False
    output_format: str = DEFAULT_FORMAT
    relative_to: Optional[str] = None
    default_ignore_globs: Tuple[str, ...] = field(default=DEFAULT_IGNORE_GLOBS, repr=False)

    def all_ignore_globs(self) -> List[str]:
        return list(self.default_ignore_globs) + list(self.ignore_globs)

    def include_globs(self) -> List[str]:
        return list(self.globs) + files_to_globs(self.files)

    def normalized_ignore_dirs(self) -> List[str]:
        # "build/" and "build" name the same directory
        return [d.rstrip("/" + os.sep) for d in self.ignore_dirs if d.rstrip("/" + os.sep)]

    @property
    def base_dir(self) -> str:
        return self.relative_to or self.directory
