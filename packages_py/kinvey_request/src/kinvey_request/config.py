"""
Request configuration for kinvey_request.

RequestConfig holds the transport-level fields (method, headers, url, body,
timeout, redirect and cache-busting policy). ApiRequestConfig wraps a
RequestConfig and adds the API-specific fields and derived headers.
"""
import logging
from collections.abc import Mapping, Sequence
from typing import Any, Dict, Optional, Union

from .client import get_shared_client
from .errors import PropertiesTooLargeError, ValidationError
from .headers import HeaderMap, to_json_text
from .properties import RequestProperties
from .settings import DEFAULT_SETTINGS, RequestSettings
from .types import AuthType, QueryLike, RequestMethod, parse_auth_type
from .url import append_query, cache_bust, parse_api_path

logger = logging.getLogger("kinvey_request.config")

DEFAULT_ACCEPT = "application/json; charset=utf-8"
DEFAULT_CONTENT_TYPE = "application/json; charset=utf-8"

API_VERSION_HEADER = "X-Kinvey-Api-Version"
APP_VERSION_HEADER = "X-Kinvey-Client-App-Version"
CUSTOM_PROPERTIES_HEADER = "X-Kinvey-Custom-Request-Properties"
CONTENT_TYPE_HEADER = "X-Kinvey-Content-Type"
DEVICE_INFORMATION_HEADER = "X-Kinvey-Device-Information"
SKIP_BUSINESS_LOGIC_HEADER = "X-Kinvey-Skip-Business-Logic"
INCLUDE_HEADERS_HEADER = "X-Kinvey-Include-Headers-In-Response"
RESPONSE_WRAPPER_HEADER = "X-Kinvey-ResponseWrapper"
REQUEST_ID_HEADER = "X-Kinvey-Request-Id"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def coerce_headers(headers: Any) -> HeaderMap:
    """Adapt a mapping or to_json()-capable object into a HeaderMap."""
    if isinstance(headers, HeaderMap):
        return headers
    if headers is None:
        return HeaderMap()
    to_json = getattr(headers, "to_json", None)
    if callable(to_json):
        headers = to_json()
    return HeaderMap(headers)


def format_app_version(*segments: Any) -> Optional[str]:
    """Compose major[.minor[.patch]], stopping at the first missing segment."""
    parts = []
    for segment in segments[:3]:
        if segment is None:
            break
        text = str(segment).strip()
        if not text:
            break
        parts.append(text)
    return ".".join(parts) or None


class RequestConfig:
    """Validated request configuration."""

    def __init__(
        self,
        method: Union[RequestMethod, str] = RequestMethod.GET,
        headers: Any = None,
        url: str = "",
        body: Any = None,
        data: Any = None,
        timeout: Any = None,
        follow_redirect: Any = True,
        no_cache: Any = False,
        settings: Optional[RequestSettings] = None,
    ) -> None:
        self._settings = settings or DEFAULT_SETTINGS
        self.method = method
        self.headers = headers
        self.url = url
        self.body = body if body is not None else data
        self.timeout = timeout
        self.follow_redirect = follow_redirect
        self.no_cache = no_cache

    @property
    def settings(self) -> RequestSettings:
        return self._settings

    @property
    def method(self) -> str:
        return self._method

    @method.setter
    def method(self, method: Union[RequestMethod, str]) -> None:
        value = method.value if isinstance(method, RequestMethod) else str(method)
        value = value.upper()
        if value not in RequestMethod.__members__:
            raise ValidationError(
                "Invalid request method. Only GET, POST, PATCH, PUT, and DELETE are allowed."
            )
        self._method = value

    @property
    def headers(self) -> HeaderMap:
        return self._headers

    @headers.setter
    def headers(self, headers: Any) -> None:
        headers = coerce_headers(headers)
        if not headers.has("accept"):
            headers.set("accept", DEFAULT_ACCEPT)
        self._headers = headers

    @property
    def url(self) -> str:
        """Stored url, with a fresh cache-busting parameter when no_cache is set."""
        if self._no_cache:
            return cache_bust(self._url)
        return self._url

    @url.setter
    def url(self, url: Optional[str]) -> None:
        self._url = url or ""

    @property
    def raw_url(self) -> str:
        return self._url

    @property
    def body(self) -> Any:
        return self._body

    @body.setter
    def body(self, body: Any) -> None:
        self._body = body

    @property
    def data(self) -> Any:
        return self.body

    @data.setter
    def data(self, data: Any) -> None:
        self.body = data

    @property
    def timeout(self) -> float:
        return self._timeout

    @timeout.setter
    def timeout(self, timeout: Any) -> None:
        self._timeout = timeout if _is_number(timeout) else self._settings.default_timeout

    @property
    def follow_redirect(self) -> bool:
        return self._follow_redirect

    @follow_redirect.setter
    def follow_redirect(self, follow_redirect: Any) -> None:
        self._follow_redirect = bool(follow_redirect)

    @property
    def no_cache(self) -> bool:
        return self._no_cache

    @no_cache.setter
    def no_cache(self, no_cache: Any) -> None:
        self._no_cache = bool(no_cache)

    def to_json(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "headers": self.headers.to_json(),
            "url": self._url,
            "body": self.body,
            "timeout": self.timeout,
            "follow_redirect": self.follow_redirect,
            "no_cache": self.no_cache,
        }

    def __repr__(self) -> str:
        return f"RequestConfig(method={self.method!r}, url={self._url!r})"


class ApiRequestConfig:
    """API request configuration built on top of a RequestConfig.

    `headers` is recomputed on every read by compute_headers() and returns a
    fresh HeaderMap; mutate stored headers through `base_headers`.
    """

    def __init__(
        self,
        method: Union[RequestMethod, str] = RequestMethod.GET,
        headers: Any = None,
        url: str = "",
        body: Any = None,
        data: Any = None,
        timeout: Any = None,
        follow_redirect: Any = True,
        no_cache: Any = False,
        auth_type: Union[AuthType, str, None] = AuthType.DEFAULT,
        query: Any = None,
        online: Any = True,
        cache_enabled: Any = True,
        api_version: Any = None,
        properties: Optional[Mapping] = None,
        app_version: Any = None,
        content_type: Optional[str] = DEFAULT_CONTENT_TYPE,
        skip_business_logic: bool = False,
        trace: bool = False,
        device: Any = None,
        client: Any = None,
        settings: Optional[RequestSettings] = None,
    ) -> None:
        self.base = RequestConfig(
            method=method,
            headers=headers,
            body=body,
            data=data,
            timeout=timeout,
            follow_redirect=follow_redirect,
            no_cache=no_cache,
            settings=settings,
        )
        self.url = url
        self.auth_type = auth_type
        self.query = query
        self.online = online
        self.cache_enabled = cache_enabled
        self.api_version = api_version
        self.properties = properties
        self.app_version = app_version
        self.client = client if client is not None else get_shared_client()

        stored = self.base.headers
        if content_type:
            stored.set(CONTENT_TYPE_HEADER, content_type)
        if skip_business_logic is True:
            stored.set(SKIP_BUSINESS_LOGIC_HEADER, True)
        if trace is True:
            stored.set(INCLUDE_HEADERS_HEADER, REQUEST_ID_HEADER)
            stored.set(RESPONSE_WRAPPER_HEADER, True)
        if device is not None:
            device_info = device.to_json() if callable(getattr(device, "to_json", None)) else device
            stored.set(DEVICE_INFORMATION_HEADER, to_json_text(device_info))

    # -- delegated fields ---------------------------------------------------

    @property
    def settings(self) -> RequestSettings:
        return self.base.settings

    @property
    def method(self) -> str:
        return self.base.method

    @method.setter
    def method(self, method: Union[RequestMethod, str]) -> None:
        self.base.method = method

    @property
    def body(self) -> Any:
        return self.base.body

    @body.setter
    def body(self, body: Any) -> None:
        self.base.body = body

    @property
    def data(self) -> Any:
        return self.base.body

    @data.setter
    def data(self, data: Any) -> None:
        self.base.body = data

    @property
    def timeout(self) -> float:
        return self.base.timeout

    @timeout.setter
    def timeout(self, timeout: Any) -> None:
        self.base.timeout = timeout

    @property
    def follow_redirect(self) -> bool:
        return self.base.follow_redirect

    @follow_redirect.setter
    def follow_redirect(self, follow_redirect: Any) -> None:
        self.base.follow_redirect = follow_redirect

    @property
    def no_cache(self) -> bool:
        return self.base.no_cache

    @no_cache.setter
    def no_cache(self, no_cache: Any) -> None:
        self.base.no_cache = no_cache

    # -- headers ------------------------------------------------------------

    @property
    def base_headers(self) -> HeaderMap:
        return self.base.headers

    @property
    def headers(self) -> HeaderMap:
        return compute_headers(self)

    @headers.setter
    def headers(self, headers: Any) -> None:
        self.base.headers = headers

    # -- url ----------------------------------------------------------------

    @property
    def url(self) -> str:
        """Stored url, cache-busted when no_cache is set, then the query appended."""
        url = self.base.url
        params = self.query_params()
        if not params:
            return url
        return append_query(url, params)

    @url.setter
    def url(self, url: Optional[str]) -> None:
        self.base.url = url
        segments = parse_api_path(url)
        self.namespace = segments.namespace
        self.app_key = segments.app_key
        self.collection = segments.collection
        self.entity_id = segments.entity_id

    @property
    def raw_url(self) -> str:
        return self.base.raw_url

    # -- API fields ---------------------------------------------------------

    @property
    def auth_type(self) -> AuthType:
        return self._auth_type

    @auth_type.setter
    def auth_type(self, auth_type: Union[AuthType, str, None]) -> None:
        self._auth_type = parse_auth_type(auth_type)

    @property
    def query(self) -> Optional[Union[QueryLike, Mapping]]:
        return self._query

    @query.setter
    def query(self, query: Any) -> None:
        if (
            query is not None
            and not isinstance(query, Mapping)
            and not callable(getattr(query, "to_query_string", None))
        ):
            raise ValidationError("query must be a mapping or expose to_query_string().")
        self._query = query

    def query_params(self) -> Dict[str, Any]:
        """Query-string parameters contributed by the query object."""
        if self._query is None:
            return {}
        if isinstance(self._query, Mapping):
            return dict(self._query)
        return dict(self._query.to_query_string() or {})

    @property
    def online(self) -> bool:
        return self._online

    @online.setter
    def online(self, online: Any) -> None:
        self._online = bool(online)

    @property
    def cache_enabled(self) -> bool:
        return self._cache_enabled

    @cache_enabled.setter
    def cache_enabled(self, cache_enabled: Any) -> None:
        self._cache_enabled = bool(cache_enabled)

    @property
    def api_version(self) -> int:
        return self._api_version

    @api_version.setter
    def api_version(self, api_version: Any) -> None:
        self._api_version = (
            api_version if _is_number(api_version) else self.settings.default_api_version
        )

    @property
    def properties(self) -> RequestProperties:
        return self._properties

    @properties.setter
    def properties(self, properties: Optional[Mapping]) -> None:
        if isinstance(properties, RequestProperties):
            self._properties = properties
        else:
            self._properties = RequestProperties(properties)

    @property
    def app_version(self) -> Optional[str]:
        return self._app_version

    @app_version.setter
    def app_version(self, version: Any) -> None:
        if version is None:
            self._app_version = None
        elif isinstance(version, Sequence) and not isinstance(version, str):
            self._app_version = format_app_version(*version)
        else:
            self._app_version = format_app_version(version)

    def set_app_version(self, major: Any, minor: Any = None, patch: Any = None) -> None:
        """Set the app version in major.minor.patch form."""
        self._app_version = format_app_version(major, minor, patch)

    def to_json(self) -> Dict[str, Any]:
        result = self.base.to_json()
        result.update(
            {
                "auth_type": self.auth_type.value,
                "query": self.query,
                "online": self.online,
                "cache_enabled": self.cache_enabled,
                "api_version": self.api_version,
                "properties": self.properties.to_json(),
                "app_version": self.app_version,
                "client": self.client,
            }
        )
        return result

    def __repr__(self) -> str:
        return (
            f"ApiRequestConfig(method={self.method!r}, url={self.raw_url!r}, "
            f"auth_type={self.auth_type.value!r})"
        )


def compute_headers(config: ApiRequestConfig) -> HeaderMap:
    """Build the outgoing headers for an API config.

    Returns a new HeaderMap holding the stored headers plus the derived
    api-version, app-version and custom-properties headers.
    """
    headers = config.base_headers.copy()

    if not headers.has(API_VERSION_HEADER):
        headers.set(API_VERSION_HEADER, str(config.api_version))

    if config.app_version:
        headers.set(APP_VERSION_HEADER, config.app_version)
    else:
        headers.remove(APP_VERSION_HEADER)

    properties_header = to_json_text(config.properties.to_json())
    byte_count = len(properties_header.encode("utf-8"))
    limit = config.settings.max_properties_bytes
    if byte_count >= limit:
        logger.debug(f"compute_headers: custom properties {byte_count} bytes >= limit {limit}")
        raise PropertiesTooLargeError(byte_count, limit)

    headers.set(CUSTOM_PROPERTIES_HEADER, properties_header)
    return headers
