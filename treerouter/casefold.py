"""Case-insensitive lookup over the routing tree."""

from __future__ import annotations

from typing import Optional

from treerouter.tree import Node, NodeType


def _to_lower(c: str) -> str:
    lowered = c.lower()
    return lowered if len(lowered) == 1 else c


def _to_upper(c: str) -> str:
    raised = c.upper()
    return raised if len(raised) == 1 else c


def _fold_equal(a: str, b: str) -> bool:
    if len(a) != len(b):
        return False
    return all(
        x == y or x.lower() == y.lower() or x.upper() == y.upper()
        for x, y in zip(a, b)
    )


def find_case_insensitive_path(
    node: Node, path: str, fix_trailing_slash: bool
) -> Optional[str]:
    """Return the case-corrected registered path matching ``path``, or None.

    With ``fix_trailing_slash`` a missing or superfluous trailing slash is
    corrected as well.
    """
    return _find(node, path, "", fix_trailing_slash)


def _find(n: Node, path: str, ci_path: str, fix: bool) -> Optional[str]:
    while True:
        np_len = len(n.path)
        if len(path) < np_len or (
            np_len > 0 and not _fold_equal(path[1:np_len], n.path[1:])
        ):
            break

        path = path[np_len:]
        ci_path += n.path

        if not path:
            if n.handlers is not None:
                return ci_path
            if fix:
                pos = n.indices.find("/")
                if pos >= 0:
                    child = n.children[pos]
                    if (len(child.path) == 1 and child.handlers is not None) or (
                        child.n_type == NodeType.CATCH_ALL
                        and child.children[0].handlers is not None
                    ):
                        return ci_path + "/"
            return None

        if not n.wild_child:
            current = path[0]
            lower = _to_lower(current)
            pos = n.indices.find(lower)
            if pos >= 0:
                found = _find(n.children[pos], path, ci_path, fix)
                if found is not None:
                    return found

            upper = _to_upper(current)
            if upper != lower:
                pos = n.indices.find(upper)
                if pos >= 0:
                    n = n.children[pos]
                    continue

            if fix and path == "/" and n.handlers is not None:
                return ci_path
            return None

        n = n.children[-1]
        if n.n_type == NodeType.PARAM:
            end = path.find("/")
            if end < 0:
                end = len(path)
            ci_path += path[:end]

            if end < len(path):
                if n.children:
                    n = n.children[0]
                    path = path[end:]
                    continue
                if fix and len(path) == end + 1:
                    return ci_path
                return None

            if n.handlers is not None:
                return ci_path
            if fix and len(n.children) == 1:
                child = n.children[0]
                if child.path == "/" and child.handlers is not None:
                    return ci_path + "/"
            return None

        if n.n_type == NodeType.CATCH_ALL:
            return ci_path + path

        raise RuntimeError("invalid node type")

    if fix:
        if path == "/":
            return ci_path
        if (
            len(path) + 1 == np_len
            and n.path[len(path)] == "/"
            and _fold_equal(path[1:], n.path[1 : len(path)])
            and n.handlers is not None
        ):
            return ci_path + n.path
    return None