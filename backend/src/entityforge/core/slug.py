"""URL slug derivation for entity names.

The same function is used to register routes and to build links in the UI,
so a slug computed anywhere always points at a registered route.
"""

import re
from urllib.parse import quote, unquote

# Boundaries: lower/digit followed by upper ("blogPost"), and an acronym
# followed by a capitalised word ("HTTPRequest").
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")
_SEPARATORS = re.compile(r"[\s_\-]+")


def to_kebab_case(name: str) -> str:
    """Convert ``BlogPost`` / ``blog_post`` / ``Blog Post`` to ``blog-post``."""
    spaced = _CAMEL_BOUNDARY.sub(" ", name)
    words = [w for w in _SEPARATORS.split(spaced) if w]
    return "-".join(w.lower() for w in words)


def slugify(name: str) -> str:
    """Derive the URL path segment for an entity name.

    Kebab-cases the name, then percent-encodes anything outside the
    unreserved URL character set. Existing escapes are decoded first, so
    applying it to its own output returns the same slug.

    Example:
        slugify("BlogPosts") -> "blog-posts"
    """
    return quote(to_kebab_case(unquote(name)), safe="-._~")


def path_segment(value: object) -> str:
    """Percent-encode an id for use as a single URL path segment.

    Example:
        path_segment("a?b") -> "a%3Fb"
    """
    return quote(str(value), safe="")
