"""Radix-tree HTTP route matching with path parameters, catch-alls and route groups."""

__version__ = "1.8.1"
__all__ = ["casefold", "routergroup", "tree", "utils"]