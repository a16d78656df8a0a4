"""
Request configuration and authentication resolution for the Kinvey API.

Builds an outgoing request's method, url, headers and body from a declarative
config, resolves which credential scheme to attach, and hands the result to a
transport.
"""
from .types import (
    AuthType,
    AuthorizationHeader,
    PreparedRequest,
    RequestMethod,
    Transport,
    parse_auth_type,
)
from .errors import (
    AuthResolutionError,
    CredentialsMissingError,
    KinveyRequestError,
    NoActiveSessionError,
    PropertiesTooLargeError,
    ReentrancyError,
    ValidationError,
)
from .settings import RequestSettings, DEFAULT_SETTINGS
from .headers import HeaderMap
from .properties import RequestProperties
from .url import ApiPathSegments, append_query, cache_bust, parse_api_path
from .client import ClientContext, get_shared_client, init_shared_client, reset_shared_client
from .auth import AuthInfo, AuthResolver
from .config import ApiRequestConfig, RequestConfig, compute_headers
from .request import ApiRequest, Request
from .transport import HttpxTransport

__all__ = [
    # Types
    "AuthType",
    "AuthorizationHeader",
    "PreparedRequest",
    "RequestMethod",
    "Transport",
    "parse_auth_type",
    # Errors
    "AuthResolutionError",
    "CredentialsMissingError",
    "KinveyRequestError",
    "NoActiveSessionError",
    "PropertiesTooLargeError",
    "ReentrancyError",
    "ValidationError",
    # Settings
    "RequestSettings",
    "DEFAULT_SETTINGS",
    # Headers / properties / url
    "HeaderMap",
    "RequestProperties",
    "ApiPathSegments",
    "append_query",
    "cache_bust",
    "parse_api_path",
    # Client
    "ClientContext",
    "get_shared_client",
    "init_shared_client",
    "reset_shared_client",
    # Auth
    "AuthInfo",
    "AuthResolver",
    # Config
    "ApiRequestConfig",
    "RequestConfig",
    "compute_headers",
    # Requests
    "ApiRequest",
    "Request",
    "HttpxTransport",
]

__version__ = "0.1.0"
