# tests/conftest.py
import pytest

from catls.core.binary import BinaryDetector
from catls.core.scanner import Scanner


def _write_lines(path, count, prefix="line"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{prefix} {i}\n" for i in range(1, count + 1)), encoding="utf-8")
    return path


@pytest.fixture
def write_lines():
    """write_lines(path, count) -> path, with lines 'line 1'..'line N'."""
    return _write_lines


@pytest.fixture
def heuristic_scanner():
    """Scanner that never shells out, so results do not depend on file(1)."""
    return Scanner(BinaryDetector(command=None))


@pytest.fixture
def sample_project(tmp_path):
    """
    a.py       10 lines of text
    b.bin      contains a null byte
    """
    _write_lines(tmp_path / "a.py", 10)
    (tmp_path / "b.bin").write_bytes(b"\x7fELF\x00\x01\x02")
    return tmp_path
