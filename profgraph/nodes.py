"""Nodes, edges and tags of a profile call graph."""

from __future__ import annotations

import dataclasses
import functools
import os.path
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Optional

__all__ = [
    "AsymmetricEdgeError",
    "NodeInfo",
    "Edge",
    "Tag",
    "Node",
    "NodeMap",
    "sort_tags",
    "sort_edges",
    "edge_sum",
    "nodes_sum",
    "shorten_function_name",
]

_JAVA_RE = re.compile(
    r"^(?:[a-z]\w*\.)*([A-Z][\w\$]*\.(?:<init>|[a-z][\w\$]*(?:\$\d+)?))(?:(?:\()|\Z)",
    re.ASCII,
)
_GO_RE = re.compile(r"^(?:[\w\-\.]+/)+(.+)", re.ASCII | re.DOTALL)
_CPP_RE = re.compile(
    r"^(?:(?:\(anonymous namespace\)::)(\w+\Z))"
    r"|(?:(?:\(anonymous namespace\)::)?(?:[_a-zA-Z]\w*::|)*(_*[A-Z]\w*::~?[_a-zA-Z]\w*)\Z)",
    re.ASCII,
)


class AsymmetricEdgeError(RuntimeError):
    """Raised when a node's outgoing edge does not match the target's incoming edge."""


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def _mean(value: int, div: int) -> int:
    return value if div == 0 else _trunc_div(value, div)


def _base_name(path: str) -> str:
    stripped = path.rstrip("/")
    if not stripped:
        return "/" if path else "."
    return os.path.basename(stripped)


@dataclass(frozen=True)
class NodeInfo:
    """Attributes identifying a program location."""

    name: str = ""
    orig_name: str = ""
    address: int = 0
    file: str = ""
    start_line: int = 0
    lineno: int = 0
    objfile: str = ""

    def printable_name(self) -> str:
        """Return the name components joined by single spaces."""
        return " ".join(self.name_components())

    def name_components(self) -> list[str]:
        """Return the components of the printable name of this location."""
        parts: list[str] = []
        if self.address != 0:
            parts.append(f"{self.address:016x}")
        if self.name:
            parts.append(self.name)

        if self.lineno != 0:
            parts.append(f"{self.file}:{self.lineno}")
        elif self.file:
            parts.append(self.file)
        elif self.name:
            pass
        elif self.objfile:
            parts.append(f"[{_base_name(self.objfile)}]")
        else:
            parts.append("<unknown>")
        return parts


@dataclass(eq=False)
class Edge:
    """A weighted call edge between two nodes."""

    src: "Node" = field(repr=False)
    dest: "Node" = field(repr=False)
    weight: int = 0
    weight_div: int = 0
    residual: bool = False
    inline: bool = False

    def weight_value(self) -> int:
        """Return the weight, normalised by the divisor if there is one."""
        return _mean(self.weight, self.weight_div)


@dataclass
class Tag:
    """An annotation on a subset of samples."""

    name: str = ""
    unit: str = ""
    value: int = 0
    flat: int = 0
    flat_div: int = 0
    cum: int = 0
    cum_div: int = 0

    def flat_value(self) -> int:
        """Return the exclusive value, as a mean if a divisor is set."""
        return _mean(self.flat, self.flat_div)

    def cum_value(self) -> int:
        """Return the inclusive value, as a mean if a divisor is set."""
        return _mean(self.cum, self.cum_div)


def _find_or_add_tag(tags: dict[str, Tag], label: str, unit: str, value: int) -> Tag:
    tag = tags.get(label)
    if tag is None:
        tag = Tag(name=label, unit=unit, value=value)
        tags[label] = tag
    return tag


def _add_weight(target: Node | Tag, dw: int, w: int, flat: bool) -> None:
    if flat:
        target.flat_div += dw
        target.flat += w
    else:
        target.cum_div += dw
        target.cum += w


def _default_label_format(value: int, key: str) -> str:
    return str(value)


@dataclass(eq=False)
class Node:
    """A unique program location in a profile graph."""

    info: NodeInfo = field(default_factory=NodeInfo)
    function: Optional["Node"] = field(default=None, repr=False)
    flat: int = 0
    flat_div: int = 0
    cum: int = 0
    cum_div: int = 0
    in_edges: dict["Node", Edge] = field(default_factory=dict, repr=False)
    out_edges: dict["Node", Edge] = field(default_factory=dict, repr=False)
    label_tags: dict[str, Tag] = field(default_factory=dict, repr=False)
    numeric_tags: dict[str, dict[str, Tag]] = field(default_factory=dict, repr=False)

    def flat_value(self) -> int:
        """Return the exclusive value, as a mean if a divisor is set."""
        return _mean(self.flat, self.flat_div)

    def cum_value(self) -> int:
        """Return the inclusive value, as a mean if a divisor is set."""
        return _mean(self.cum, self.cum_div)

    def add_to_edge(self, to: Node, v: int, residual: bool, inline: bool) -> None:
        """Increase the weight of the edge to ``to``, creating it if needed."""
        self.add_to_edge_div(to, 0, v, residual, inline)

    def add_to_edge_div(
        self, to: Node, dv: int, v: int, residual: bool, inline: bool
    ) -> None:
        """Increase weight and divisor of the edge to ``to``, creating it if needed."""
        edge = self.out_edges.get(to)
        if edge is not to.in_edges.get(self):
            raise AsymmetricEdgeError(f"asymmetric edges {self.info} {to.info}")

        if edge is not None:
            edge.weight_div += dv
            edge.weight += v
            if residual:
                edge.residual = True
            if not inline:
                edge.inline = False
            return

        edge = Edge(self, to, weight=v, weight_div=dv, residual=residual, inline=inline)
        self.out_edges[to] = edge
        to.in_edges[self] = edge

    def add_sample(
        self,
        dw: int,
        w: int,
        labels: str,
        num_label: Mapping[str, Iterable[int]] | None,
        num_unit: Mapping[str, list[str]] | None,
        formatter: Callable[[int, str], str] | None,
        flat: bool,
    ) -> None:
        """Add a sample's weight to this node and to its tags."""
        _add_weight(self, dw, w, flat)

        if labels:
            _add_weight(_find_or_add_tag(self.label_tags, labels, "", 0), dw, w, flat)

        numeric = self.numeric_tags.setdefault(labels, {})
        fmt = formatter or _default_label_format
        units_by_key = num_unit or {}
        for key, values in (num_label or {}).items():
            units = units_by_key.get(key) or []
            for i, value in enumerate(values):
                unit = units[i] if units else key
                tag = _find_or_add_tag(numeric, fmt(value, unit), unit, value)
                _add_weight(tag, dw, w, flat)


class NodeMap(dict[NodeInfo, Node]):
    """Maps node infos to nodes, merging entries with the same info."""

    def find_or_insert_node(
        self, info: NodeInfo, kept: set[NodeInfo] | Mapping[NodeInfo, bool] | None
    ) -> Node | None:
        """Return the node for ``info``, creating it if absent.

        When ``kept`` is given, only infos found in it get a node; others
        yield None.
        """
        if kept is not None and info not in kept:
            return None

        node = self.get(info)
        if node is not None:
            return node

        node = Node(info=info)
        self[info] = node
        if info.address == 0 and info.lineno == 0:
            node.function = node
            return node
        whole = dataclasses.replace(info, address=0, lineno=0)
        node.function = self.find_or_insert_node(whole, None)
        return node


def _cmp_from_less(less: Callable[[object, object], bool]) -> Callable[[object, object], int]:
    def compare(a: object, b: object) -> int:
        if less(a, b):
            return -1
        if less(b, a):
            return 1
        return 0

    return compare


def sort_tags(tags: list[Tag], flat: bool) -> list[Tag]:
    """Sort ``tags`` in place by decreasing weight and return the list."""

    def less(a: Tag, b: Tag) -> bool:
        if not flat and a.cum != b.cum:
            return abs(a.cum) > abs(b.cum)
        if a.flat != b.flat:
            return abs(a.flat) > abs(b.flat)
        return a.name < b.name

    tags.sort(key=functools.cmp_to_key(_cmp_from_less(less)))
    return tags


def sort_edges(edges: Mapping[Node, Edge] | Iterable[Edge]) -> list[Edge]:
    """Return the edges ordered by decreasing weight, then by node names."""

    def less(a: Edge, b: Edge) -> bool:
        if a.weight != b.weight:
            return abs(a.weight) > abs(b.weight)
        from_a, from_b = a.src.info.printable_name(), b.src.info.printable_name()
        if from_a != from_b:
            return from_a < from_b
        return a.dest.info.printable_name() < b.dest.info.printable_name()

    values = edges.values() if isinstance(edges, Mapping) else edges
    return sorted(values, key=functools.cmp_to_key(_cmp_from_less(less)))


def edge_sum(edges: Mapping[Node, Edge] | Iterable[Edge]) -> int:
    """Return the total weight of a set of edges."""
    values = edges.values() if isinstance(edges, Mapping) else edges
    return sum(edge.weight for edge in values)


def nodes_sum(nodes: Iterable[Node]) -> tuple[int, int]:
    """Return the summed flat and cum values of ``nodes``."""
    flat = cum = 0
    for node in nodes:
        flat += node.flat
        cum += node.cum
    return flat, cum


def shorten_function_name(name: str) -> str:
    """Return a shortened version of a function name."""
    for pattern in (_GO_RE, _JAVA_RE, _CPP_RE):
        match = pattern.search(name)
        if match is not None and match.re.groups >= 1:
            return "".join(group or "" for group in match.groups())
    return name