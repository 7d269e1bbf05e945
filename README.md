# profgraph

`profgraph` holds the building blocks for summarising profiling samples:

- the nodes, edges and tags of a weighted call graph;
- unit-aware scaling and formatting of sample values;
- lookup of source files named in a profile;
- annotated source listings and the pieces of an HTML listing page.

## Install

```
pip install profgraph
```

To run the test suite, install the `test` extra:

```
pip install "profgraph[test]"
pytest
```

## Modules

### `profgraph.measurement`

This module scales values between memory units (bytes up to petabytes,
in steps of 1024) and time units (nanoseconds up to years).

- `scale(value, from_unit, to_unit)` returns `(scaled_value, display_unit)`.
  If `to_unit` is `"auto"` or `"minimum"`, the most readable unit is chosen.
  The returned unit is empty for uninteresting units such as `"count"`.
- `scaled_label(value, from_unit, to_unit)` and `label(value, unit)` format
  a scaled value with two decimals and drop a trailing `.00`.
- `percentage(value, total)` formats `value` as a share of `total`.
- `is_memory_unit(unit)` and `is_time_unit(unit)` recognise unit names.

### `profgraph.nodes`

- `NodeInfo` is a frozen, hashable description of a program location. It
  provides `name_components()` and `printable_name()`.
- `Node` holds flat and cumulative values together with their divisors, its
  incoming and outgoing edges (`in_edges`, `out_edges`), and its label and
  numeric tags.
  - `add_sample(...)` adds a sample's weight to the node and to its tags.
  - `add_to_edge(...)` and `add_to_edge_div(...)` create an edge or add
    weight to an existing one. If the two nodes' edge maps disagree, they
    raise `AsymmetricEdgeError`.
- `Edge` and `Tag` carry weights. `Edge.weight_value()`, `Tag.flat_value()`
  and `Tag.cum_value()` return means when a divisor is set.
- `NodeMap.find_or_insert_node(info, kept)` merges locations with equal info.
  It returns `None` for infos that are missing from `kept`.
- `sort_tags`, `sort_edges`, `edge_sum` and `nodes_sum` order and total
  tags, edges and nodes.
- `shorten_function_name` shortens Go, Java and C++ style symbol names.

### `profgraph.sourcefiles`

- `open_source_file(path, search_path, trim)` opens a source file. Relative
  names are searched in every directory of an `os.pathsep`-separated search
  path and in each of their parent directories. If nothing is found, it
  raises `FileNotFoundError`.
- `trim_path(path, trim, search_path)` strips configured prefixes and the
  usual `/proc/self/cwd/` prefixes. When no trim list is given, it guesses
  the prefix from the search path.
- `SourceReader` caches file contents. `line(path, lineno)` returns a line
  counted from 1, or `None`. `file_error(path)` returns the error met while
  reading the file.
- `indentation(line)` returns the column where the text of a line starts,
  with tab stops every 8 columns.

### `profgraph.listing`

- `get_source_from_file(file, reader, fns, start, end)` returns the source
  lines around the sampled lines, each annotated with its flat and cum
  values, together with the file path. If the file could not be read, it
  raises the reader's error.
- `source_coordinates(asm)` returns the lowest and highest line numbers
  among the keys of a mapping.
- `print_header`, `print_function_header`, `print_function_closing` and
  `print_page_closing` write the parts of an HTML listing page to any
  object that has a `write` method. `WEBLIST_PAGE_CSS`,
  `WEBLIST_PAGE_SCRIPT` and `WEBLIST_PAGE_CLOSING` hold the page's fixed
  text.

## Example

```python
from profgraph.measurement import label, percentage, scale
from profgraph.nodes import NodeInfo, NodeMap, nodes_sum, shorten_function_name, sort_edges

print(scale(2048, "mb", "auto"))    # (2.0, 'GB')
print(label(1500, "ms"))            # '1.50s'
print(percentage(25, 100))          # '25.00%'
print(shorten_function_name("net/http.(*conn).serve"))  # 'http.(*conn).serve'

nodes = NodeMap()
main = nodes.find_or_insert_node(NodeInfo(name="main"), None)
work = nodes.find_or_insert_node(NodeInfo(name="work"), None)
main.add_sample(0, 10, "", {}, {}, None, False)
work.add_sample(0, 10, "", {}, {}, None, False)
work.add_sample(0, 10, "", {}, {}, None, True)
main.add_to_edge(work, 10, False, False)

print(nodes_sum([main, work]))                              # (10, 20)
print([e.weight_value() for e in sort_edges(main.out_edges)])  # [10]
```

## What it does not do

`profgraph` does not read profile files. It has no graph container that
trims, sorts or selects nodes, and it does not render Graphviz DOT output.
It does not disassemble binaries, so listings show source lines only. It
also has no command-line tool and no web server. Callers build nodes
themselves and write listings to a stream of their choosing.