# tests/test_pipeline.py
import io
import json
import threading

import pytest

from catls.config import PipelineConfig
from catls.core.pipeline import Pipeline
from catls.errors import ConfigError, PipelineCancelled


def run_pipeline(scanner, **options):
    stream = io.StringIO()
    config = PipelineConfig(**options)
    count = Pipeline(config, stream=stream, scanner=scanner).run()
    return count, stream.getvalue()


# --- Test 1: End-to-end scenarios ---

def test_default_xml_scenario(sample_project, heuristic_scanner):
    count, out = run_pipeline(heuristic_scanner, directory=str(sample_project))

    content = "".join(f"line {i}\n" for i in range(1, 11))
    assert count == 2
    assert out == (
        "<files>\n"
        '<file path="a.py">\n'
        "<type>python</type>\n"
        "<content>\n"
        f"{content}"
        "</content>\n"
        "</file>\n"
        '<file path="b.bin">\n'
        "<binary>true</binary>\n"
        "</file>\n"
        "</files>\n"
    )


def test_omit_bins_scenario(sample_project, heuristic_scanner):
    count, out = run_pipeline(heuristic_scanner, directory=str(sample_project), omit_bins=True)
    assert count == 1
    assert 'path="a.py"' in out
    assert "b.bin" not in out


def test_truncated_file_rendering(tmp_path, write_lines, heuristic_scanner):
    write_lines(tmp_path / "big.txt", 1001)

    _, out = run_pipeline(heuristic_scanner, directory=str(tmp_path))
    body = out.split("<content>\n")[1].split("</content>")[0].splitlines()
    assert len(body) == 101
    assert body[-1] == "... (901 more lines)"

    _, out = run_pipeline(heuristic_scanner, directory=str(tmp_path), content_pattern="line*")
    body = out.split("<content>\n")[1].split("</content>")[0].splitlines()
    assert len(body) == 1001
    assert "more lines" not in out


def test_exclude_wins(sample_project, heuristic_scanner):
    count, out = run_pipeline(
        heuristic_scanner,
        directory=str(sample_project),
        globs=("*.py",),
        ignore_globs=("a.py",),
    )
    assert count == 0
    assert out == "<files>\n</files>\n"


def test_output_is_idempotent(sample_project, write_lines, heuristic_scanner):
    write_lines(sample_project / "src" / "main.py", 5)
    write_lines(sample_project / "src" / "lib" / "util.rs", 3)
    options = dict(directory=str(sample_project), recursive=True, output_format="markdown", show_line_numbers=True)

    assert run_pipeline(heuristic_scanner, **options) == run_pipeline(heuristic_scanner, **options)


def test_json_format(sample_project, heuristic_scanner):
    _, out = run_pipeline(heuristic_scanner, directory=str(sample_project), output_format="json")
    data = json.loads(out)
    assert [item["path"] for item in data] == ["a.py", "b.bin"]
    assert data[1]["binary"] is True


# --- Test 2: Empty inventories and errors ---

def test_empty_directory_prints_message(tmp_path, heuristic_scanner):
    count, out = run_pipeline(heuristic_scanner, directory=str(tmp_path))
    assert count == 0
    assert out == f"No files found in directory: {tmp_path}\n"


def test_missing_directory_is_config_error(tmp_path, heuristic_scanner):
    with pytest.raises(ConfigError, match="does not exist"):
        run_pipeline(heuristic_scanner, directory=str(tmp_path / "nope"))


def test_unsupported_format_fails_before_scan(sample_project, heuristic_scanner):
    with pytest.raises(ConfigError):
        run_pipeline(heuristic_scanner, directory=str(sample_project), output_format="html")


def test_cancel_aborts_run(sample_project, heuristic_scanner):
    cancel = threading.Event()
    cancel.set()
    pipeline = Pipeline(
        PipelineConfig(directory=str(sample_project)),
        stream=io.StringIO(),
        scanner=heuristic_scanner,
        cancel=cancel,
    )
    with pytest.raises(PipelineCancelled):
        pipeline.run()


def test_preselected_records_skip_scan(sample_project, heuristic_scanner):
    config = PipelineConfig(directory=str(sample_project))
    records = heuristic_scanner.scan(config)

    stream = io.StringIO()
    count = Pipeline(config, stream=stream, scanner=heuristic_scanner).run(selected=records[1:])
    assert count == 1
    assert 'path="b.bin"' in stream.getvalue()
    assert 'path="a.py"' not in stream.getvalue()


def test_unreadable_file_rendered_as_error(sample_project, heuristic_scanner, monkeypatch):
    import catls.core.processor as processor_module

    def failing_read(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(processor_module, "read_lines", failing_read)
    count, out = run_pipeline(heuristic_scanner, directory=str(sample_project))

    assert count == 2
    assert "<error>[Errno 13] Permission denied: " in out
    assert "<binary>true</binary>" in out


@pytest.mark.parametrize("output_format", ["xml", "json", "markdown"])
def test_repeated_runs_on_one_pipeline(sample_project, heuristic_scanner, output_format):
    stream = io.StringIO()
    config = PipelineConfig(directory=str(sample_project), output_format=output_format)
    pipeline = Pipeline(config, stream=stream, scanner=heuristic_scanner)

    pipeline.run()
    first = stream.getvalue()
    stream.seek(0)
    stream.truncate()
    pipeline.run()

    assert stream.getvalue() == first
    if output_format == "json":
        assert [item["path"] for item in json.loads(stream.getvalue())] == ["a.py", "b.bin"]
