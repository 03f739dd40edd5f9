"""Small helpers shared by the provider and its resource owner."""

from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import quote, urlsplit, urlunsplit


def safe_get(mapping: Optional[Mapping], key: str, default: Any = None) -> Any:
    """Look up ``key`` without failing on a missing key or a non-mapping."""
    if not isinstance(mapping, Mapping):
        return default
    return mapping.get(key, default)


def with_userinfo(uri: str, user: str, password: Optional[str] = None) -> str:
    """
    Return ``uri`` with its authority carrying ``user[:password]@``.

    Any user-info already present is replaced. Both parts are
    percent-encoded so that reserved characters survive the round trip.
    """
    parts = urlsplit(uri)
    host = parts.netloc.rpartition("@")[2]

    userinfo = quote(user, safe="")
    if password:
        userinfo += ":" + quote(password, safe="")

    return urlunsplit(
        (parts.scheme, f"{userinfo}@{host}", parts.path, parts.query, parts.fragment)
    )
