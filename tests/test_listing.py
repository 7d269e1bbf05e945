import io

import pytest

from profgraph.listing import (
    WEBLIST_PAGE_CLOSING,
    WEBLIST_PAGE_CSS,
    WEBLIST_PAGE_SCRIPT,
    get_source_from_file,
    print_function_closing,
    print_function_header,
    print_header,
    print_page_closing,
    source_coordinates,
)
from profgraph.measurement import percentage
from profgraph.nodes import Node, NodeInfo
from profgraph.sourcefiles import SourceReader


@pytest.fixture
def reader(tmp_path):
    text = "".join(f"line{i}\n" for i in range(1, 21))
    (tmp_path / "src.c").write_text(text)
    (tmp_path / "short.c").write_text("a\nb\nc\n")
    return SourceReader(str(tmp_path), "")


def test_source_window_around_sample(reader):
    node = Node(info=NodeInfo(name="f", file="src.c", lineno=10), flat=3, cum=5)
    lines, path = get_source_from_file("src.c", reader, [node], 0, 0)
    assert path == "src.c"
    assert [n.info.lineno for n in lines] == list(range(5, 16))
    assert all(n.info.name == f"line{n.info.lineno}" for n in lines)
    annotated = {n.info.lineno: (n.flat, n.cum) for n in lines if n.flat or n.cum}
    assert annotated == {10: (3, 5)}


def test_source_uses_start_line(reader):
    node = Node(info=NodeInfo(name="f", file="src.c", lineno=4, start_line=2), flat=1, cum=1)
    lines, _ = get_source_from_file("src.c", reader, [node], 0, 0)
    assert lines[0].info.lineno == 2
    assert lines[-1].info.lineno == 4 + 5


def test_source_sums_nodes_on_same_line(reader):
    a = Node(info=NodeInfo(name="f", file="src.c", lineno=8), flat=1, cum=2)
    b = Node(info=NodeInfo(name="g", file="src.c", lineno=8), flat=4, cum=8)
    lines, _ = get_source_from_file("src.c", reader, [a, b], 0, 0)
    by_line = {n.info.lineno: n for n in lines}
    assert (by_line[8].flat, by_line[8].cum) == (5, 10)


def test_source_stops_at_end_of_file(reader):
    node = Node(info=NodeInfo(name="f", file="short.c", lineno=2), flat=1, cum=1)
    lines, _ = get_source_from_file("short.c", reader, [node], 0, 0)
    assert [n.info.name for n in lines] == ["a", "b", "c"]


def test_source_missing_file_raises(reader):
    node = Node(info=NodeInfo(name="f", file="nope.c", lineno=2), flat=1, cum=1)
    with pytest.raises(FileNotFoundError):
        get_source_from_file("nope.c", reader, [node], 0, 0)


def test_source_requires_samples(reader):
    with pytest.raises(ValueError):
        get_source_from_file("src.c", reader, [], 0, 0)


def test_source_coordinates():
    assert source_coordinates({7: [1], 3: [2], 5: [3]}) == (3, 7)
    assert source_coordinates({}) == (0, 0)


def test_print_header_escapes_labels():
    out = io.StringIO()
    print_header(out, ["a <b>", "c & 'd'"], "10ms")
    text = out.getvalue()
    assert text.startswith("\n<!DOCTYPE html>\n<html>\n<head>\n")
    assert WEBLIST_PAGE_CSS in text
    assert WEBLIST_PAGE_SCRIPT in text
    assert text.endswith(
        '<div class="legend">a &lt;b&gt;<br>\nc &amp; &#39;d&#39;<br>Total: 10ms</div>'
    )


def test_print_function_header():
    out = io.StringIO()
    print_function_header(out, "main<int>", "src.c", 10, 20, 100, str)
    expected = (
        '<h2>main&lt;int&gt;</h2><p class="filename">src.c</p>\n'
        '<pre onClick="pprof_toggle_asm(event)">\n'
        f"  Total:  {'10':>10} {'20':>10} (flat, cum) {percentage(20, 100)}\n"
    )
    assert out.getvalue() == expected


def test_closings():
    out = io.StringIO()
    print_function_closing(out)
    print_page_closing(out)
    assert out.getvalue() == "</pre>\n" + WEBLIST_PAGE_CLOSING + "\n"
    assert out.getvalue().endswith("</html>\n\n")