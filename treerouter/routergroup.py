"""Router groups: shared path prefixes and middleware for route registration."""

from __future__ import annotations

import re
from typing import Any, Callable, Optional, Sequence

from treerouter.utils import join_paths

Handler = Callable[..., Any]

MAX_HANDLERS = 63
"""Upper bound (exclusive) on the length of a combined handler chain."""

_METHOD_NAME = re.compile(r"[A-Z]+")

ANY_METHODS = (
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "HEAD",
    "OPTIONS",
    "DELETE",
    "CONNECT",
    "TRACE",
)


class RouterGroup:
    """A path prefix plus a chain of middleware shared by the routes under it.

    ``engine`` is any object with an ``add_route(method, path, handlers)``
    method. A root group hands the engine back from its registration methods,
    so calls can be chained on the engine itself.
    """

    def __init__(
        self,
        engine: Any,
        handlers: Optional[Sequence[Handler]] = None,
        base_path: str = "/",
        root: bool = False,
    ) -> None:
        self.engine = engine
        self.handlers: list[Handler] = list(handlers or [])
        self._base_path = base_path
        self.root = root

    def use(self, *args: Handler) -> Any:
        """Append middleware to this group."""
        self.handlers.extend(args)
        return self._return_obj()

    def group(self, relative_path: str, *args: Handler) -> "RouterGroup":
        """Create a sub-group below ``relative_path`` with extra middleware."""
        return RouterGroup(
            self.engine,
            self._combine_handlers(args),
            self._absolute_path(relative_path),
            False,
        )

    def base_path(self) -> str:
        """Return the absolute path prefix of this group."""
        return self._base_path

    def _handle(self, method: str, relative_path: str, handlers: Sequence[Handler]) -> Any:
        absolute_path = self._absolute_path(relative_path)
        self.engine.add_route(method, absolute_path, self._combine_handlers(handlers))
        return self._return_obj()

    def handle(self, http_method: str, relative_path: str, *args: Handler) -> Any:
        """Register handlers for an arbitrary upper-case method name."""
        if not _METHOD_NAME.fullmatch(http_method):
            raise ValueError(f"http method {http_method} is not valid")
        return self._handle(http_method, relative_path, args)

    def get(self, relative_path: str, *args: Handler) -> Any:
        """Register a GET route."""
        return self._handle("GET", relative_path, args)

    def post(self, relative_path: str, *args: Handler) -> Any:
        """Register a POST route."""
        return self._handle("POST", relative_path, args)

    def delete(self, relative_path: str, *args: Handler) -> Any:
        """Register a DELETE route."""
        return self._handle("DELETE", relative_path, args)

    def patch(self, relative_path: str, *args: Handler) -> Any:
        """Register a PATCH route."""
        return self._handle("PATCH", relative_path, args)

    def put(self, relative_path: str, *args: Handler) -> Any:
        """Register a PUT route."""
        return self._handle("PUT", relative_path, args)

    def options(self, relative_path: str, *args: Handler) -> Any:
        """Register an OPTIONS route."""
        return self._handle("OPTIONS", relative_path, args)

    def head(self, relative_path: str, *args: Handler) -> Any:
        """Register a HEAD route."""
        return self._handle("HEAD", relative_path, args)

    def any(self, relative_path: str, *args: Handler) -> Any:
        """Register the route for every standard HTTP method."""
        for method in ANY_METHODS:
            self._handle(method, relative_path, args)
        return self._return_obj()

    def _combine_handlers(self, handlers: Sequence[Handler]) -> list[Handler]:
        merged = [*self.handlers, *handlers]
        if len(merged) >= MAX_HANDLERS:
            raise ValueError("too many handlers")
        return merged

    def _absolute_path(self, relative_path: str) -> str:
        return join_paths(self._base_path, relative_path)

    def _return_obj(self) -> Any:
        return self.engine if self.root else self