"""Path and method predicates used while scanning a document.

:func:`path_matches` is deliberately loose: the query is treated as a raw
substring of the path key, and for templated paths also of the static part
before the first ``{``. Nothing is escaped or anchored, so a query
containing ``{`` or regex metacharacters is compared literally.
"""

from __future__ import annotations

import enum
from typing import Optional

# HTTP verbs recognised as method keys under a path.
HTTP_METHODS = frozenset({"get", "post", "put", "delete", "patch", "head", "options"})


class ScanState(str, enum.Enum):
    """Where the matcher currently sits in the document."""

    SEEKING = "seeking"
    IN_PATH = "in_path"
    IN_METHOD = "in_method"


def path_matches(candidate: str, query: str) -> bool:
    """Return whether the document path *candidate* satisfies *query*.

    Rules, in order:

    1. Exact equality.
    2. *query* is a substring of *candidate*.
    3. If *candidate* has a parameter segment, its base (everything before
       the first ``{``, trailing ``/`` removed) equals or contains *query*.

    Example::

        >>> path_matches("/cards/{card_id}/pan", "/cards")
        True
        >>> path_matches("/cards/{card_id}/pan", "/users")
        False
    """
    if candidate == query:
        return True
    if query in candidate:
        return True
    if "{" in candidate:
        base = candidate.split("{", 1)[0]
        if base.endswith("/"):
            base = base[:-1]
        if base == query or query in base:
            return True
    return False


def is_http_method(name: str) -> bool:
    """Return whether *name* (any case) is one of the recognised HTTP verbs."""
    return name.lower() in HTTP_METHODS


def method_matches(method: str, wanted: Optional[str]) -> bool:
    """Return whether *method* satisfies the optional filter *wanted*.

    An empty or ``None`` filter accepts every method; otherwise the
    comparison is case-insensitive.
    """
    if not wanted:
        return True
    return method.upper() == wanted.upper()
