"""Small helpers shared by the router."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Optional, Sequence

VERSION = "v1.8.1"

BIND_KEY = "_gin-gonic/gin/bindkey"

_log = logging.getLogger(__name__)

_XML_ESCAPES = str.maketrans(
    {
        "&": "&amp;",
        "<": "&lt;",
        ">": "&gt;",
        '"': "&#34;",
        "'": "&#39;",
        "\t": "&#x9;",
        "\n": "&#xA;",
        "\r": "&#xD;",
    }
)


def _xml_text(value: Any) -> str:
    if isinstance(value, bool):
        text = "true" if value else "false"
    else:
        text = str(value)
    return text.translate(_XML_ESCAPES)


class H(dict):
    """A plain string-keyed mapping that can render itself as XML."""

    def to_xml(self) -> str:
        """Render as ``<map><key>value</key>...</map>``.

        Raises ValueError for an empty key.
        """
        parts = ["<map>"]
        for key, value in self.items():
            if not key:
                raise ValueError("xml: start tag with no name")
            if value is None:
                continue
            if isinstance(value, H):
                parts.append(value.to_xml())
            else:
                parts.append(f"<{key}>{_xml_text(value)}</{key}>")
        parts.append("</map>")
        return "".join(parts)


def filter_flags(content: str) -> str:
    """Cut ``content`` at the first space or semicolon."""
    for i, char in enumerate(content):
        if char in " ;":
            return content[:i]
    return content


def choose_data(custom: Any, wildcard: Any) -> Any:
    """Return ``custom`` if set, else ``wildcard``; raise if neither is."""
    if custom is not None:
        return custom
    if wildcard is not None:
        return wildcard
    raise ValueError("negotiation config is invalid")


def parse_accept(accept_header: str) -> list[str]:
    """Split an Accept header into media types, dropping parameters."""
    out = []
    for part in accept_header.split(","):
        semi = part.find(";")
        if semi > 0:
            part = part[:semi]
        part = part.strip()
        if part:
            out.append(part)
    return out


def last_char(text: str) -> str:
    """Return the last character of a non-empty string."""
    if not text:
        raise ValueError("The length of the string can't be 0")
    return text[-1]


def name_of_function(func: Callable[..., Any]) -> str:
    """Return the dotted, qualified name of ``func``."""
    return f"{func.__module__}.{func.__qualname__}"


def _clean(path: str) -> str:
    if not path:
        return "."
    rooted = path.startswith("/")
    parts: list[str] = []
    for seg in path.split("/"):
        if seg in ("", "."):
            continue
        if seg == "..":
            if parts and parts[-1] != "..":
                parts.pop()
            elif not rooted:
                parts.append("..")
            continue
        parts.append(seg)
    out = "/".join(parts)
    if rooted:
        out = "/" + out
    return out or "."


def _join(*elements: str) -> str:
    present = [e for e in elements if e]
    if not present:
        return ""
    return _clean("/".join(present))


def join_paths(absolute_path: str, relative_path: str) -> str:
    """Join two URL paths, keeping a trailing slash of ``relative_path``."""
    if not relative_path:
        return absolute_path
    final_path = _join(absolute_path, relative_path)
    if last_char(relative_path) == "/" and last_char(final_path) != "/":
        return final_path + "/"
    return final_path


def resolve_address(addr: Optional[Sequence[str]] = None) -> str:
    """Pick the listen address from ``addr`` or the PORT environment variable."""
    addr = list(addr or [])
    if not addr:
        port = os.environ.get("PORT", "")
        if port:
            _log.debug('Environment variable PORT="%s"', port)
            return ":" + port
        _log.debug("Environment variable PORT is undefined. Using port :8080 by default")
        return ":8080"
    if len(addr) == 1:
        return addr[0]
    raise ValueError("too many parameters")


def is_ascii(text: str) -> bool:
    """True if every character of ``text`` is ASCII."""
    return text.isascii()