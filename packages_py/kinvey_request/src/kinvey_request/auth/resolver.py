"""
Authentication strategy resolution.

Primitive strategies (none, app, master, session) inspect the client context
directly. Composite strategies (basic, all, default) try an ordered list of
candidates and surface a per-strategy error when every candidate fails:

    basic   = master, app       -> surfaces the app error
    all     = session, basic    -> surfaces the basic error
    default = session, master   -> surfaces the session error

Only AuthResolutionError subclasses trigger fallback. Any other exception
raised while inspecting the client propagates immediately.
"""
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple, Union

from ..errors import AuthResolutionError, CredentialsMissingError, NoActiveSessionError
from ..settings import DEFAULT_SETTINGS, RequestSettings
from ..types import AuthContext, AuthType, parse_auth_type
from .encoding import AuthInfo, mask_value, secret_value

logger = logging.getLogger("kinvey_request.auth.resolver")
LOG_PREFIX = "[AUTH:resolver]"

BASIC_SCHEME = "Basic"
SESSION_SCHEME = "Kinvey"
SESSION_TOKEN_KEY = "authtoken"


@dataclass(frozen=True)
class Ok:
    value: Optional[AuthInfo]


@dataclass(frozen=True)
class Err:
    error: AuthResolutionError


AuthResult = Union[Ok, Err]


@dataclass(frozen=True)
class Cascade:
    """Ordered fallback candidates and which failure to surface."""

    candidates: Tuple[str, ...]
    surface: str = "last"

    def __post_init__(self) -> None:
        if self.surface not in ("first", "last"):
            raise ValueError(f"surface must be 'first' or 'last', got {self.surface!r}")


CASCADES: Dict[str, Cascade] = {
    "basic": Cascade(("master", "app"), surface="last"),
    "all": Cascade(("session", "basic"), surface="last"),
    "default": Cascade(("session", "master"), surface="first"),
}

STRATEGY_BY_AUTH_TYPE: Dict[AuthType, str] = {
    AuthType.ALL: "all",
    AuthType.APP: "app",
    AuthType.BASIC: "basic",
    AuthType.DEFAULT: "default",
    AuthType.MASTER: "master",
    AuthType.NONE: "none",
    AuthType.SESSION: "session",
}


def _read(source: Any, key: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(key)
    return getattr(source, key, None)


def session_token(active_user: Any, kmd_attribute: str) -> Optional[str]:
    """Return the session token stored in the active user's metadata block."""
    if active_user is None:
        return None
    metadata = _read(active_user, kmd_attribute)
    if metadata is None:
        return None
    token = _read(metadata, SESSION_TOKEN_KEY)
    return token or None


class AuthResolver:
    """Resolves an auth type against a client context into AuthInfo."""

    def __init__(self, settings: Optional[RequestSettings] = None) -> None:
        self._settings = settings or DEFAULT_SETTINGS
        self._primitives: Dict[str, Callable[[Optional[AuthContext]], AuthResult]] = {
            "none": self._try_none,
            "app": self._try_app,
            "master": self._try_master,
            "session": self._try_session,
        }

    # -- primitives ---------------------------------------------------------

    def _try_none(self, client: Optional[AuthContext]) -> AuthResult:
        return Ok(None)

    def _basic_pair(self, client: Optional[AuthContext], secret_name: str) -> AuthResult:
        if client is None:
            return Err(CredentialsMissingError("Missing client credentials"))

        app_key = client.app_key
        secret = secret_value(getattr(client, secret_name))
        if not app_key or not secret:
            return Err(CredentialsMissingError("Missing client credentials"))

        return Ok(AuthInfo(scheme=BASIC_SCHEME, username=app_key, password=secret))

    def _try_app(self, client: Optional[AuthContext]) -> AuthResult:
        return self._basic_pair(client, "app_secret")

    def _try_master(self, client: Optional[AuthContext]) -> AuthResult:
        return self._basic_pair(client, "master_secret")

    def _try_session(self, client: Optional[AuthContext]) -> AuthResult:
        active_user = client.active_user if client is not None else None
        token = session_token(active_user, self._settings.kmd_attribute)
        if active_user is None or not token:
            return Err(
                NoActiveSessionError(
                    "There is not an active user. Please login a user and retry the request."
                )
            )
        return Ok(AuthInfo(scheme=SESSION_SCHEME, credentials=token))

    # -- evaluation ---------------------------------------------------------

    def evaluate(self, strategy: str, client: Optional[AuthContext]) -> AuthResult:
        """Evaluate a strategy by name without raising credential errors."""
        primitive = self._primitives.get(strategy)
        if primitive is not None:
            result = primitive(client)
            logger.debug(f"{LOG_PREFIX} evaluate: strategy={strategy}, result={result!r}")
            return result

        cascade = CASCADES.get(strategy)
        if cascade is None:
            raise ValueError(f"Unknown auth strategy: {strategy}")

        failures = []
        for candidate in cascade.candidates:
            result = self.evaluate(candidate, client)
            if isinstance(result, Ok):
                logger.debug(f"{LOG_PREFIX} evaluate: strategy={strategy} resolved by {candidate}")
                return result
            failures.append(result)

        surfaced = failures[0] if cascade.surface == "first" else failures[-1]
        logger.debug(
            f"{LOG_PREFIX} evaluate: strategy={strategy} exhausted candidates, "
            f"surfacing {surfaced.error.name}"
        )
        return surfaced

    def _raise_or_return(self, strategy: str, client: Optional[AuthContext]) -> Optional[AuthInfo]:
        result = self.evaluate(strategy, client)
        if isinstance(result, Err):
            raise result.error
        return result.value

    def resolve(
        self, auth_type: Union[AuthType, str, None], client: Optional[AuthContext]
    ) -> Optional[AuthInfo]:
        """Resolve an auth type. None or Default uses the default cascade.

        Names are matched case-insensitively; unknown names raise
        ValidationError.
        """
        strategy = STRATEGY_BY_AUTH_TYPE[parse_auth_type(auth_type)]

        app_key = client.app_key if client is not None else None
        logger.debug(
            f"{LOG_PREFIX} resolve: auth_type={auth_type}, strategy={strategy}, "
            f"app_key={mask_value(app_key)}"
        )
        return self._raise_or_return(strategy, client)

    # -- named strategies ---------------------------------------------------

    def none(self, client: Optional[AuthContext] = None) -> None:
        return None

    def app(self, client: Optional[AuthContext]) -> Optional[AuthInfo]:
        return self._raise_or_return("app", client)

    def master(self, client: Optional[AuthContext]) -> Optional[AuthInfo]:
        return self._raise_or_return("master", client)

    def basic(self, client: Optional[AuthContext]) -> Optional[AuthInfo]:
        return self._raise_or_return("basic", client)

    def session(self, client: Optional[AuthContext]) -> Optional[AuthInfo]:
        return self._raise_or_return("session", client)

    def all(self, client: Optional[AuthContext]) -> Optional[AuthInfo]:
        return self._raise_or_return("all", client)

    def default(self, client: Optional[AuthContext]) -> Optional[AuthInfo]:
        return self._raise_or_return("default", client)
