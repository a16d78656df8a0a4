"""
Request-layer tunables.

Values have fixed defaults and may be overridden explicitly or from the
process environment via RequestSettings.from_env().
"""
import logging
import os
from typing import Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger("kinvey_request.settings")

DEFAULT_TIMEOUT = 30
DEFAULT_API_VERSION = 4
DEFAULT_MAX_PROPERTIES_BYTES = 2000
DEFAULT_KMD_ATTRIBUTE = "_kmd"

ENV_DEFAULT_TIMEOUT = "KINVEY_DEFAULT_TIMEOUT"
ENV_DEFAULT_API_VERSION = "KINVEY_DEFAULT_API_VERSION"
ENV_MAX_HEADER_BYTES = "KINVEY_MAX_HEADER_BYTES"
ENV_KMD_ATTRIBUTE = "KINVEY_KMD_ATTRIBUTE"


class RequestSettings(BaseModel):
    """Ambient defaults applied by request configs."""

    model_config = ConfigDict(frozen=True)

    default_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    """Timeout in seconds used when a non-numeric timeout is given."""

    default_api_version: int = Field(default=DEFAULT_API_VERSION, ge=0)
    """API version used when a non-numeric version is given."""

    max_properties_bytes: int = Field(default=DEFAULT_MAX_PROPERTIES_BYTES, gt=0)
    """Serialized custom properties must stay strictly below this size."""

    kmd_attribute: str = Field(default=DEFAULT_KMD_ATTRIBUTE, min_length=1)
    """Active-user metadata attribute carrying the session token."""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "RequestSettings":
        """Build settings from KINVEY_* environment variables."""
        env = os.environ if environ is None else environ
        values = {
            "default_timeout": _read_number(env, ENV_DEFAULT_TIMEOUT, float, DEFAULT_TIMEOUT),
            "default_api_version": _read_number(
                env, ENV_DEFAULT_API_VERSION, int, DEFAULT_API_VERSION
            ),
            "max_properties_bytes": _read_number(
                env, ENV_MAX_HEADER_BYTES, int, DEFAULT_MAX_PROPERTIES_BYTES
            ),
            "kmd_attribute": env.get(ENV_KMD_ATTRIBUTE) or DEFAULT_KMD_ATTRIBUTE,
        }
        logger.debug(f"RequestSettings.from_env: resolved={values}")
        return cls(**values)


def _read_number(env: Mapping[str, str], name: str, cast, default):
    raw = env.get(name)
    if raw is None or raw == "":
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"{name}={raw!r} is not a valid number, using default {default}")
        return default
    if value <= 0:
        logger.warning(f"{name}={raw!r} must be > 0, using default {default}")
        return default
    return value


DEFAULT_SETTINGS = RequestSettings()
