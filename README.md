# treerouter

A compact HTTP route matcher built on a prefix (radix) tree. Routes may have
named parameters (`:name`) and trailing catch-alls (`*path`). A lookup returns
the handlers registered for the path, the captured parameters, the registered
route pattern and a trailing-slash recommendation. Route groups share a path
prefix and middleware when routes are registered.

## Installation

```
pip install treerouter
```

## Matching routes with the tree

```python
from treerouter.tree import Node, Params

root = Node()
root.add_route("/user/:id", [show_user])
root.add_route("/files/*path", [serve_file])

value = root.get_value("/user/42", Params(), False)
value.handlers               # [show_user]
value.params.by_name("id")   # "42"
value.full_path              # "/user/:id"

miss = root.get_value("/user/42/", Params(), False)
miss.handlers                # None
miss.tsr                     # True: the route exists without the trailing slash
```

`get_value(path, params=None, unescape=False)` appends captured values to the
`Params` list it is given (none are collected when `params` is `None`). With
`unescape=True`, values are query-unescaped (`+` becomes a space, `%2F` a
slash); a value with a malformed `%` escape is kept as it is.

`Params.get(name)` returns the first matching value or `None`;
`Params.by_name(name)` returns it or `""`. Each entry is a frozen
`Param(key, value)`.

Registering a conflicting route — a duplicate path, two differently named
wildcards at the same place, a catch-all that is not at the end of the path, an
unnamed wildcard — raises `ValueError` with a message describing the conflict.

The module also provides `count_params`, `count_sections`, `find_wildcard` and
`longest_common_prefix`, and `NodeType` for the kinds of node.

`MethodTrees` is a list of `MethodTree(method, root)` entries;
`MethodTrees.get(method)` returns that method's root node, or `None`.

## Case-insensitive lookup

```python
from treerouter.casefold import find_case_insensitive_path

find_case_insensitive_path(root, "/USER/42", True)   # "/user/42"
find_case_insensitive_path(root, "/nothing", True)   # None
```

The result is the path with its static parts spelled as registered, or `None`
when nothing matches. When `fix_trailing_slash` is true, a missing or extra
trailing slash is corrected as well.

## Route groups

`RouterGroup(engine, handlers=None, base_path="/", root=False)` combines a base
path and a list of middleware with the routes registered through it. The
engine is any object with an `add_route(method, path, handlers)` method; each
route is passed to it with its absolute path and the group's middleware
followed by the route's own handlers.

```python
from treerouter.routergroup import RouterGroup
from treerouter.tree import MethodTree, MethodTrees, Node

class Engine:
    def __init__(self):
        self.trees = MethodTrees()

    def add_route(self, method, path, handlers):
        root = self.trees.get(method)
        if root is None:
            root = Node()
            self.trees.append(MethodTree(method, root))
        root.add_route(path, handlers)

engine = Engine()
top = RouterGroup(engine)
api = top.group("/api", auth)
api.get("/items/:id", show_item)
api.base_path()   # "/api"
```

`use`, `handle`, `get`, `post`, `put`, `patch`, `delete`, `options`, `head`
and `any` register handlers; `any` registers the route for every method in
`ANY_METHODS`. `handle` accepts only upper-case method names and raises
`ValueError` otherwise. A combined handler chain of `MAX_HANDLERS` (63) or more
raises `ValueError("too many handlers")`. `group` creates a nested group whose
base path and middleware extend its parent's. Registration methods return the
group, or the engine when the group was created with `root=True`.

## Helpers

`treerouter.utils` offers `join_paths`, `parse_accept`, `filter_flags`,
`choose_data`, `last_char`, `name_of_function`, `resolve_address` (which reads
the `PORT` environment variable and falls back to `:8080`), `is_ascii`, the
constants `VERSION` and `BIND_KEY`, and `H`, a dictionary that serialises to
`<map><key>value</key>...</map>` XML with `H.to_xml()`.

## What it does not do

This package matches paths and organises route registration only. It has no
HTTP server, no request dispatching engine, no request context or response
writing, and no static-file serving; the handlers it stores are never called
by it.

## Running the tests

```
pip install -e ".[test]"
pytest
```