"""
Request objects: a config plus a single-shot execution state.

A request starts idle. execute() moves it to executing and hands the
materialized request to the transport; completion is the transport's concern
and the request never returns to idle.
"""
import logging
from collections.abc import Mapping
from typing import Any, Dict, Optional

from .auth.encoding import mask_value
from .auth.resolver import AuthResolver
from .config import ApiRequestConfig, RequestConfig
from .errors import ReentrancyError, ValidationError
from .headers import HeaderMap
from .types import AuthorizationHeader, PreparedRequest, Transport

logger = logging.getLogger("kinvey_request.request")

AUTHORIZATION_HEADER = "Authorization"


class Request:
    """Wraps one RequestConfig and guards against re-execution."""

    config_class = RequestConfig
    accepted_configs = (RequestConfig, ApiRequestConfig)

    def __init__(self, config: Any = None, transport: Optional[Transport] = None) -> None:
        self.config = config
        self.transport = transport
        self._executing = False

    @property
    def config(self):
        return self._config

    @config.setter
    def config(self, config: Any) -> None:
        if config is None:
            config = self.config_class()
        elif not isinstance(config, self.accepted_configs):
            to_json = getattr(config, "to_json", None)
            if callable(to_json):
                config = to_json()
            if not isinstance(config, Mapping):
                raise ValidationError("config must be a request config or a mapping.")
            config = self.config_class(**config)
        self._config = config

    @property
    def method(self) -> str:
        return self.config.method

    @method.setter
    def method(self, method: str) -> None:
        self.config.method = method

    @property
    def headers(self) -> HeaderMap:
        """Headers as they will be sent.

        For an ApiRequestConfig this is a fresh computed map, so edits made
        on it are discarded. Use `base_headers` for lasting changes.
        """
        return self.config.headers

    @headers.setter
    def headers(self, headers: Any) -> None:
        self.config.headers = headers

    @property
    def url(self) -> str:
        return self.config.url

    @url.setter
    def url(self, url: str) -> None:
        self.config.url = url

    @property
    def body(self) -> Any:
        return self.config.body

    @body.setter
    def body(self, body: Any) -> None:
        self.config.body = body

    @property
    def data(self) -> Any:
        return self.body

    @data.setter
    def data(self, data: Any) -> None:
        self.body = data

    def is_executing(self) -> bool:
        return self._executing

    def _ensure_idle(self) -> None:
        if self.is_executing():
            raise ReentrancyError(
                "Unable to execute the request. The request is already executing."
            )

    def prepare(self) -> PreparedRequest:
        """Materialize method, url, headers and body for the transport."""
        return PreparedRequest(
            method=self.method,
            url=self.url,
            headers=self.headers.to_json(),
            body=self.body,
            timeout=self.config.timeout,
            follow_redirect=self.config.follow_redirect,
        )

    async def execute(self) -> Any:
        """Move to executing and hand the prepared request to the transport.

        Returns the transport's result, or the prepared request when no
        transport is attached.
        """
        self._ensure_idle()

        # prepare() validates derived headers; a failure leaves the request idle
        prepared = self.prepare()
        self._executing = True
        logger.debug(f"Request.execute: method={prepared.method}, url={prepared.url}")

        if self.transport is None:
            return prepared
        return await self.transport.send(prepared)

    def cancel(self) -> None:
        """Cancellation hook. Performs no state transition."""
        logger.debug(f"Request.cancel: executing={self._executing}")

    def to_json(self) -> Dict[str, Any]:
        return {
            "method": self.method,
            "headers": self.headers.to_json(),
            "url": self.url,
            "body": self.body,
            "data": self.body,
        }


class ApiRequest(Request):
    """Request that resolves and attaches the Authorization header on execute."""

    config_class = ApiRequestConfig
    accepted_configs = (ApiRequestConfig,)

    def __init__(
        self,
        config: Any = None,
        transport: Optional[Transport] = None,
        resolver: Optional[AuthResolver] = None,
    ) -> None:
        super().__init__(config, transport)
        self._resolver = resolver or AuthResolver(self.config.settings)

    @property
    def auth_type(self):
        return self.config.auth_type

    @property
    def client(self) -> Any:
        return self.config.client

    @property
    def query(self) -> Any:
        return self.config.query

    @property
    def authorization_header(self) -> Optional[AuthorizationHeader]:
        """Resolve the Authorization header for the configured auth type."""
        auth_info = self._resolver.resolve(self.auth_type, self.client)
        if auth_info is None:
            return None
        header = AuthorizationHeader(AUTHORIZATION_HEADER, auth_info.header_value())
        logger.debug(
            f"ApiRequest.authorization_header: scheme={auth_info.scheme}, "
            f"value={mask_value(header.value)}"
        )
        return header

    @property
    def base_headers(self) -> HeaderMap:
        """Stored headers. Edits here persist into every prepared request."""
        return self.config.base_headers

    async def execute(self) -> Any:
        self._ensure_idle()

        header = self.authorization_header
        if header is not None:
            self.config.base_headers.set(header.name, header.value)
        return await super().execute()

    def to_json(self) -> Dict[str, Any]:
        result = super().to_json()
        result["query"] = self.query
        return result
