"""Action key resolution from a raw query string."""

from __future__ import annotations


def query_action(raw_query: str | None) -> str | None:
    """Return the action key embedded in a raw (undecoded) query string.

    The key is the first ``&``-separated token that has no ``=`` and starts
    with ``/``. Later qualifying tokens are ignored.

    Examples:
        >>> query_action("a=1&/my_action&b=2")
        '/my_action'
        >>> query_action("/a&/b")
        '/a'
        >>> query_action("a=1&b=2") is None
        True
    """
    if raw_query is None:
        return None

    for entry in raw_query.split("&"):
        if "=" not in entry and entry.startswith("/"):
            return entry

    return None
