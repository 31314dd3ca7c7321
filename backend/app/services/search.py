"""Free-text search patterns."""

import re

from bson.regex import Regex


def build_search_pattern(query: str) -> Regex | None:
    """Return a case-insensitive literal matcher for ``query``.

    An empty query yields ``None``, which callers treat as "match everything"
    and so add no filter stage at all.
    """
    if not query:
        return None
    return Regex(re.escape(query), "i")
