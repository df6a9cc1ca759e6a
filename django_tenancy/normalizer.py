"""Domain name normalization.

Every component that compares host names (request resolvers, lookup tiers,
lookup table synchronization, the lookup cache key) goes through
:func:`normalize_domain`, so two spellings of the same host always compare
equal.
"""

from urllib.parse import urlsplit

_STRIP_CHARS = ". \t\r\n\f\v"


def normalize_domain(value) -> str | None:
    """Normalize a host name or URL to a lowercase, scheme-free host.

    When the value contains ``://`` it is parsed as a URL and only the host
    part is kept (scheme, credentials, port, path and query are dropped).
    The result is lowercased and stripped of surrounding whitespace and
    leading/trailing dots. ``None`` is returned for blank input, URLs
    without a host, and values that are empty after trimming.

    >>> normalize_domain("HTTPS://Example.com./dashboard")
    'example.com'
    >>> normalize_domain(" Acme.Example.Test ")
    'acme.example.test'
    >>> normalize_domain("...") is None
    True
    """
    if not isinstance(value, str):
        return None

    host = value.strip()
    if host == "":
        return None

    if "://" in host:
        try:
            parsed = urlsplit(host)
            host = parsed.hostname or ""
        except ValueError:
            return None
        if host == "":
            return None

    host = host.lower().strip(_STRIP_CHARS)
    return host or None
