"""
Client context consumed by the auth resolver, plus the shared-client singleton.

The request layer reads these credentials; it never mutates them.
"""
import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, SecretStr

logger = logging.getLogger("kinvey_request.client")


class ClientContext(BaseModel):
    """Credentials known to the client."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    app_key: Optional[str] = None
    app_secret: Optional[SecretStr] = None
    master_secret: Optional[SecretStr] = None
    active_user: Optional[Any] = None

    def __repr__(self) -> str:
        return (
            f"ClientContext(app_key={self.app_key!r}, "
            f"has_app_secret={self.app_secret is not None}, "
            f"has_master_secret={self.master_secret is not None}, "
            f"has_active_user={self.active_user is not None})"
        )


_shared_client: Optional[Any] = None


def init_shared_client(client: Any) -> Any:
    """Register the client used by configs that are not given one."""
    global _shared_client
    _shared_client = client
    logger.debug(f"init_shared_client: client={client!r}")
    return client


def get_shared_client() -> Optional[Any]:
    return _shared_client


def reset_shared_client() -> None:
    global _shared_client
    _shared_client = None
