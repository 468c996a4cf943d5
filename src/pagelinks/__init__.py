"""pagelinks — build a page link graph from a command stream and query reachability."""

__version__ = "0.1.0"
