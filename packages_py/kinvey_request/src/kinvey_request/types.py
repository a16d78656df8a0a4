"""
Type definitions for kinvey_request.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, NamedTuple, Optional, Protocol, Union

from .errors import ValidationError


class AuthType(str, Enum):
    """Named strategy selecting which credential scheme authorizes a request."""

    ALL = "All"
    APP = "App"
    BASIC = "Basic"
    DEFAULT = "Default"
    MASTER = "Master"
    NONE = "None"
    SESSION = "Session"

    @classmethod
    def _missing_(cls, value: object) -> Optional["AuthType"]:
        if isinstance(value, str):
            lowered = value.lower()
            for member in cls:
                if member.value.lower() == lowered:
                    return member
        return None


def parse_auth_type(auth_type: Union[AuthType, str, None]) -> AuthType:
    """Coerce a case-insensitive auth type name. None means Default."""
    if auth_type is None:
        return AuthType.DEFAULT
    try:
        return AuthType(auth_type)
    except ValueError:
        raise ValidationError(
            f"Invalid auth type: {auth_type}. "
            f"Must be one of: {sorted(member.value for member in AuthType)}"
        ) from None


class RequestMethod(str, Enum):
    """Allowed request methods."""

    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    PUT = "PUT"
    DELETE = "DELETE"


class AuthContext(Protocol):
    """Read-only view of the client credentials used for auth resolution."""

    app_key: Optional[str]
    app_secret: Optional[Any]
    master_secret: Optional[Any]
    active_user: Optional[Any]


class QueryLike(Protocol):
    """Anything that can serialize itself into query-string parameters."""

    def to_query_string(self) -> Mapping[str, Any]:
        ...


class AuthorizationHeader(NamedTuple):
    """Resolved authorization header."""

    name: str
    value: str


@dataclass(frozen=True)
class PreparedRequest:
    """Fully materialized request handed to a transport."""

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    timeout: Optional[float] = None
    follow_redirect: bool = True


class Transport(Protocol):
    """Sends a prepared request and returns (or raises) a response."""

    async def send(self, request: PreparedRequest) -> Any:
        ...
