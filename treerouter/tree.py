"""Radix tree used to match request paths to handler chains."""

from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Callable, Optional
from urllib.parse import unquote_plus

Handler = Callable[..., Any]
HandlersChain = list

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


@dataclass(frozen=True)
class Param:
    """A single URL parameter."""

    key: str
    value: str


class Params(list):
    """Ordered list of URL parameters as produced by the router."""

    def get(self, name: str) -> Optional[str]:
        """Return the value of the first parameter called ``name``, or None."""
        return next((p.value for p in self if p.key == name), None)

    def by_name(self, name: str) -> str:
        """Return the value of the first parameter called ``name``, or ''."""
        value = self.get(name)
        return "" if value is None else value


class NodeType(IntEnum):
    STATIC = 0
    ROOT = 1
    PARAM = 2
    CATCH_ALL = 3


@dataclass
class NodeValue:
    """Result of a tree lookup."""

    handlers: Optional[list] = None
    params: Optional[Params] = None
    tsr: bool = False
    full_path: str = ""


@dataclass
class Node:
    """A node of the routing tree."""

    path: str = ""
    indices: str = ""
    wild_child: bool = False
    n_type: int = NodeType.STATIC
    priority: int = 0
    children: list = field(default_factory=list)
    handlers: Optional[list] = None
    full_path: str = ""

    def _add_child(self, child: "Node") -> None:
        if self.wild_child and self.children:
            self.children.insert(len(self.children) - 1, child)
        else:
            self.children.append(child)

    def _increment_child_prio(self, pos: int) -> int:
        cs = self.children
        cs[pos].priority += 1
        prio = cs[pos].priority
        new_pos = pos
        while new_pos > 0 and cs[new_pos - 1].priority < prio:
            cs[new_pos - 1], cs[new_pos] = cs[new_pos], cs[new_pos - 1]
            new_pos -= 1
        if new_pos != pos:
            ind = self.indices
            self.indices = ind[:new_pos] + ind[pos] + ind[new_pos:pos] + ind[pos + 1:]
        return new_pos

    def add_route(self, path: str, handlers: Optional[list]) -> None:
        """Register ``handlers`` for ``path``; raises ValueError on conflicts."""
        full_path = path
        self.priority += 1

        if not self.path and not self.children:
            self._insert_child(path, full_path, handlers)
            self.n_type = NodeType.ROOT
            return

        parent_index = 0
        n = self
        while True:
            i = longest_common_prefix(path, n.path)

            if i < len(n.path):
                child = Node(
                    path=n.path[i:],
                    wild_child=n.wild_child,
                    n_type=NodeType.STATIC,
                    indices=n.indices,
                    children=n.children,
                    handlers=n.handlers,
                    priority=n.priority - 1,
                    full_path=n.full_path,
                )
                n.children = [child]
                n.indices = n.path[i]
                n.path = path[:i]
                n.handlers = None
                n.wild_child = False
                n.full_path = full_path[: parent_index + i]

            if i < len(path):
                path = path[i:]
                c = path[0]

                if n.n_type == NodeType.PARAM and c == "/" and len(n.children) == 1:
                    parent_index += len(n.path)
                    n = n.children[0]
                    n.priority += 1
                    continue

                pos = n.indices.find(c)
                if pos >= 0:
                    parent_index += len(n.path)
                    pos = n._increment_child_prio(pos)
                    n = n.children[pos]
                    continue

                if c not in ":*" and n.n_type != NodeType.CATCH_ALL:
                    n.indices += c
                    child = Node(full_path=full_path)
                    n._add_child(child)
                    n._increment_child_prio(len(n.indices) - 1)
                    n = child
                elif n.wild_child:
                    n = n.children[-1]
                    n.priority += 1
                    if (
                        len(path) >= len(n.path)
                        and n.path == path[: len(n.path)]
                        and n.n_type != NodeType.CATCH_ALL
                        and (len(n.path) >= len(path) or path[len(n.path)] == "/")
                    ):
                        continue
                    path_seg = path
                    if n.n_type != NodeType.CATCH_ALL:
                        path_seg = path_seg.split("/", 1)[0]
                    prefix = full_path[: full_path.index(path_seg)] + n.path
                    raise ValueError(
                        f"'{path_seg}' in new path '{full_path}' conflicts with "
                        f"existing wildcard '{n.path}' in existing prefix '{prefix}'"
                    )

                n._insert_child(path, full_path, handlers)
                return

            if n.handlers is not None:
                raise ValueError(
                    f"handlers are already registered for path '{full_path}'"
                )
            n.handlers = handlers
            n.full_path = full_path
            return

    def _insert_child(self, path: str, full_path: str, handlers: Optional[list]) -> None:
        n = self
        while True:
            wildcard, i, valid = find_wildcard(path)
            if i < 0:
                break
            if not valid:
                raise ValueError(
                    "only one wildcard per path segment is allowed, has: "
                    f"'{wildcard}' in path '{full_path}'"
                )
            if len(wildcard) < 2:
                raise ValueError(
                    f"wildcards must be named with a non-empty name in path '{full_path}'"
                )

            if wildcard[0] == ":":
                if i > 0:
                    n.path = path[:i]
                    path = path[i:]
                child = Node(n_type=NodeType.PARAM, path=wildcard, full_path=full_path)
                n._add_child(child)
                n.wild_child = True
                n = child
                n.priority += 1
                if len(wildcard) < len(path):
                    path = path[len(wildcard):]
                    child = Node(priority=1, full_path=full_path)
                    n._add_child(child)
                    n = child
                    continue
                n.handlers = handlers
                return

            if i + len(wildcard) != len(path):
                raise ValueError(
                    "catch-all routes are only allowed at the end of the path "
                    f"in path '{full_path}'"
                )

            if n.path and n.path[-1] == "/":
                path_seg = n.children[0].path.split("/", 1)[0] if n.children else ""
                raise ValueError(
                    f"catch-all wildcard '{path}' in new path '{full_path}' conflicts "
                    f"with existing path segment '{path_seg}' in existing prefix "
                    f"'{n.path}{path_seg}'"
                )

            i -= 1
            if i < 0 or path[i] != "/":
                raise ValueError(f"no / before catch-all in path '{full_path}'")

            n.path = path[:i]
            child = Node(wild_child=True, n_type=NodeType.CATCH_ALL, full_path=full_path)
            n._add_child(child)
            n.indices = "/"
            n = child
            n.priority += 1
            n.children = [
                Node(
                    path=path[i:],
                    n_type=NodeType.CATCH_ALL,
                    handlers=handlers,
                    priority=1,
                    full_path=full_path,
                )
            ]
            return

        n.path = path
        n.handlers = handlers
        n.full_path = full_path

    def get_value(
        self, path: str, params: Optional[Params] = None, unescape: bool = False
    ) -> NodeValue:
        """Look up ``path``; wildcard values are appended to ``params`` if given."""
        value = NodeValue()
        skipped: list[_Skipped] = []
        global_count = 0
        n = self

        def rollback(current: str) -> Optional[_Skipped]:
            while skipped:
                s = skipped.pop()
                if s.path.endswith(current):
                    if value.params is not None:
                        del value.params[s.params_count:]
                    return s
            return None

        while True:
            prefix = n.path
            if len(path) > len(prefix) and path.startswith(prefix):
                path = path[len(prefix):]
                idxc = path[0]
                pos = n.indices.find(idxc)
                if pos >= 0:
                    if n.wild_child:
                        skipped.append(
                            _Skipped(
                                prefix + path,
                                dataclasses.replace(n, indices=""),
                                global_count,
                            )
                        )
                    n = n.children[pos]
                    continue

                if not n.wild_child:
                    if path != "/":
                        s = rollback(path)
                        if s is not None:
                            path, n, global_count = s.path, s.node, s.params_count
                            continue
                    value.tsr = path == "/" and n.handlers is not None
                    return value

                n = n.children[-1]
                global_count += 1

                if n.n_type == NodeType.PARAM:
                    end = path.find("/")
                    if end < 0:
                        end = len(path)
                    if params is not None:
                        if value.params is None:
                            value.params = params
                        val = path[:end]
                        if unescape:
                            val = _query_unescape(val)
                        value.params.append(Param(n.path[1:], val))

                    if end < len(path):
                        if n.children:
                            path = path[end:]
                            n = n.children[0]
                            continue
                        value.tsr = len(path) == end + 1
                        return value

                    value.handlers = n.handlers
                    if value.handlers is not None:
                        value.full_path = n.full_path
                        return value
                    if len(n.children) == 1:
                        n = n.children[0]
                        value.tsr = (n.path == "/" and n.handlers is not None) or (
                            n.path == "" and n.indices == "/"
                        )
                    return value

                if n.n_type == NodeType.CATCH_ALL:
                    if params is not None:
                        if value.params is None:
                            value.params = params
                        val = _query_unescape(path) if unescape else path
                        value.params.append(Param(n.path[2:], val))
                    value.handlers = n.handlers
                    value.full_path = n.full_path
                    return value

                raise RuntimeError("invalid node type")

            if path == prefix:
                if n.handlers is None and path != "/":
                    s = rollback(path)
                    if s is not None:
                        path, n, global_count = s.path, s.node, s.params_count
                        continue
                value.handlers = n.handlers
                if value.handlers is not None:
                    value.full_path = n.full_path
                    return value
                if path == "/" and n.wild_child and n.n_type != NodeType.ROOT:
                    value.tsr = True
                    return value
                if path == "/" and n.n_type == NodeType.STATIC:
                    value.tsr = True
                    return value
                pos = n.indices.find("/")
                if pos >= 0:
                    n = n.children[pos]
                    value.tsr = (len(n.path) == 1 and n.handlers is not None) or (
                        n.n_type == NodeType.CATCH_ALL
                        and n.children[0].handlers is not None
                    )
                return value

            value.tsr = path == "/" or (
                len(prefix) == len(path) + 1
                and prefix[len(path)] == "/"
                and path == prefix[:-1]
                and n.handlers is not None
            )
            if not value.tsr and path != "/":
                s = rollback(path)
                if s is not None:
                    path, n, global_count = s.path, s.node, s.params_count
                    continue
            return value


@dataclass
class _Skipped:
    path: str
    node: Node
    params_count: int


@dataclass
class MethodTree:
    method: str
    root: Node


class MethodTrees(list):
    """List of per-method routing trees."""

    def get(self, method: str) -> Optional[Node]:
        """Return the root node for ``method``, or None."""
        return next((t.root for t in self if t.method == method), None)


def _query_unescape(text: str) -> str:
    if _BAD_ESCAPE.search(text):
        return text
    return unquote_plus(text)


def count_params(path: str) -> int:
    """Count the wildcard markers in ``path``."""
    return path.count(":") + path.count("*")


def count_sections(path: str) -> int:
    """Count the slashes in ``path``."""
    return path.count("/")


def longest_common_prefix(a: str, b: str) -> int:
    """Length of the common prefix of ``a`` and ``b``."""
    i = 0
    for x, y in zip(a, b):
        if x != y:
            break
        i += 1
    return i


def find_wildcard(path: str) -> tuple[str, int, bool]:
    """Find the first wildcard segment; returns (wildcard, index, valid)."""
    for start, c in enumerate(path):
        if c not in ":*":
            continue
        valid = True
        for end, c2 in enumerate(path[start + 1:]):
            if c2 == "/":
                return path[start : start + 1 + end], start, valid
            if c2 in ":*":
                valid = False
        return path[start:], start, valid
    return "", -1, False