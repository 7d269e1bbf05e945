"""Annotated source listings and the pieces of their HTML pages."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Protocol

from profgraph.measurement import percentage
from profgraph.nodes import Node, NodeInfo, nodes_sum
from profgraph.sourcefiles import SourceReader

__all__ = [
    "WEBLIST_PAGE_CSS",
    "WEBLIST_PAGE_SCRIPT",
    "WEBLIST_PAGE_CLOSING",
    "get_source_from_file",
    "source_coordinates",
    "print_header",
    "print_function_header",
    "print_function_closing",
    "print_page_closing",
]

# Lines shown before the first and after the last sampled line.
_MARGIN = 5

WEBLIST_PAGE_CSS = """<style type="text/css">
body {
font-family: sans-serif;
}
h1 {
  font-size: 1.5em;
  margin-bottom: 4px;
}
.legend {
  font-size: 1.25em;
}
.line, .nop, .unimportant {
  color: #aaaaaa;
}
.inlinesrc {
  color: #000066;
}
.deadsrc {
cursor: pointer;
}
.deadsrc:hover {
background-color: #eeeeee;
}
.livesrc {
color: #0000ff;
cursor: pointer;
}
.livesrc:hover {
background-color: #eeeeee;
}
.asm {
color: #008800;
display: none;
}
</style>"""

WEBLIST_PAGE_SCRIPT = """<script type="text/javascript">
function pprof_toggle_asm(e) {
  var target;
  if (!e) e = window.event;
  if (e.target) target = e.target;
  else if (e.srcElement) target = e.srcElement;

  if (target) {
    var asm = target.nextSibling;
    if (asm && asm.className == "asm") {
      asm.style.display = (asm.style.display == "block" ? "" : "block");
      e.preventDefault();
      return false;
    }
  }
}
</script>"""

WEBLIST_PAGE_CLOSING = """
</body>
</html>
"""

_HTML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "'": "&#39;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&#34;",
        "\0": "\ufffd",
    }
)


class _TextSink(Protocol):
    def write(self, text: str) -> object: ...


def _escape(text: str) -> str:
    return text.translate(_HTML_ESCAPES)


def get_source_from_file(
    file: str,
    reader: SourceReader,
    fns: Sequence[Node],
    start: int,
    end: int,
) -> tuple[list[Node], str]:
    """Return the source lines of a function annotated with the samples in ``fns``.

    Each line becomes a node whose name holds the source text. ``start``
    and ``end`` bound the lines to show; zero means they are derived from
    the samples. Raises the reader's error if the file could not be read.
    """
    if not fns:
        raise ValueError("no samples to locate source lines")
    first = fns[0].info

    if start == 0:
        start = first.start_line if first.start_line != 0 else first.lineno - _MARGIN
    else:
        start -= _MARGIN
    if end == 0:
        end = first.lineno
    end += _MARGIN

    line_nodes: dict[int, list[Node]] = {}
    for node in fns:
        lineno = node.info.lineno
        node_start = node.info.start_line or lineno - _MARGIN
        node_end = lineno + _MARGIN
        if node_start < start:
            start = node_start
        elif node_end > end:
            end = node_end
        line_nodes.setdefault(lineno, []).append(node)
    start = max(start, 1)

    source: list[Node] = []
    for lineno in range(start, end + 1):
        text = reader.line(file, lineno)
        if text is None:
            break
        flat, cum = nodes_sum(line_nodes.get(lineno, ()))
        source.append(
            Node(info=NodeInfo(name=text.rstrip("\n"), lineno=lineno), flat=flat, cum=cum)
        )

    error = reader.file_error(file)
    if error is not None:
        raise error
    return source, file


def source_coordinates(asm: Mapping[int, Iterable[object]]) -> tuple[int, int]:
    """Return the lowest and highest line numbers keyed in ``asm``, or (0, 0)."""
    start = end = 0
    for line in asm:
        if start == 0 or line < start:
            start = line
        if end == 0 or line > end:
            end = line
    return start, end


def print_header(out: _TextSink, labels: Iterable[str], total_text: str) -> None:
    """Write the page header of a web listing with its legend."""
    out.write(
        '\n<!DOCTYPE html>\n<html>\n<head>\n<meta charset="UTF-8">\n'
        "<title>Pprof listing</title>\n"
    )
    out.write(WEBLIST_PAGE_CSS + "\n")
    out.write(WEBLIST_PAGE_SCRIPT + "\n")
    out.write("</head>\n<body>\n\n")
    legend = "<br>\n".join(_escape(text) for text in labels)
    out.write(f'<div class="legend">{legend}<br>Total: {total_text}</div>')


def print_function_header(
    out: _TextSink,
    name: str,
    path: str,
    flat_sum: int,
    cum_sum: int,
    total: int,
    format_value: Callable[[int], str],
) -> None:
    """Write the heading that opens one function in a web listing."""
    out.write(
        f'<h2>{_escape(name)}</h2><p class="filename">{_escape(path)}</p>\n'
        '<pre onClick="pprof_toggle_asm(event)">\n'
        f"  Total:  {format_value(flat_sum):>10} {format_value(cum_sum):>10} "
        f"(flat, cum) {percentage(cum_sum, total)}\n"
    )


def print_function_closing(out: _TextSink) -> None:
    """Write the end of one function in a web listing."""
    out.write("</pre>\n")


def print_page_closing(out: _TextSink) -> None:
    """Write the end of a web listing page."""
    out.write(WEBLIST_PAGE_CLOSING + "\n")