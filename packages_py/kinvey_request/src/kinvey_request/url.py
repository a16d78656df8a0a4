"""
URL utilities: API path parsing, query-string append and cache busting.
"""
import logging
import re
import uuid
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import parse_qsl, unquote, urlencode, urlsplit, urlunsplit

from .headers import to_json_text

logger = logging.getLogger("kinvey_request.url")

CACHE_BUST_PARAM = "_"

# (/:namespace)(/)(:app_key)(/)(:collection)(/)(:entity_id)(/)
_API_PATH_PATTERN = re.compile(
    r"^(?:/(?P<namespace>[^/]+))?/?"
    r"(?P<app_key>[^/]+)?/?"
    r"(?P<collection>[^/]+)?/?"
    r"(?P<entity_id>[^/]+)?/?$"
)


@dataclass(frozen=True)
class ApiPathSegments:
    """Segments extracted from an API url path. Missing segments are None."""

    namespace: Optional[str] = None
    app_key: Optional[str] = None
    collection: Optional[str] = None
    entity_id: Optional[str] = None


def _decode(segment: Optional[str]) -> Optional[str]:
    return unquote(segment) if segment else segment


def parse_api_path(url: Optional[str]) -> ApiPathSegments:
    """Extract namespace, app key, collection and entity id from a url.

    A url that does not match the pattern yields empty segments.
    """
    path = urlsplit(url or "").path
    match = _API_PATH_PATTERN.match(path)
    if not match:
        logger.debug(f"parse_api_path: no match for path={path!r}")
        return ApiPathSegments()

    return ApiPathSegments(
        namespace=_decode(match.group("namespace")),
        app_key=_decode(match.group("app_key")),
        collection=_decode(match.group("collection")),
        entity_id=_decode(match.group("entity_id")),
    )


def _query_value(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list, tuple)):
        return to_json_text(value)
    return str(value)


def append_query(url: str, params: Optional[Mapping[str, Any]]) -> str:
    """Merge params into the url's query string.

    Repeated keys already in the url are kept. A key present in params
    replaces every existing pair with that key and moves to the end.
    None values are skipped.
    """
    if not params:
        return url

    additions = [
        (str(key), _query_value(value)) for key, value in params.items() if value is not None
    ]
    if not additions:
        return url

    parts = urlsplit(url)
    overridden = {key for key, _ in additions}
    pairs = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key not in overridden
    ]
    pairs.extend(additions)

    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(pairs), parts.fragment)
    )


def cache_bust(url: str) -> str:
    """Append a random cache-busting parameter to the url."""
    return append_query(url, {CACHE_BUST_PARAM: uuid.uuid4().hex[:12]})
