"""
Authorization header encoding.
"""
import base64
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import SecretStr


def secret_value(value: Any) -> Optional[str]:
    """Unwrap a SecretStr (or plain value) into a string."""
    if value is None:
        return None
    if isinstance(value, SecretStr):
        return value.get_secret_value()
    return str(value)


def mask_value(value: Optional[str], visible_chars: int = 4) -> str:
    """Mask a credential for logging.

    A leading auth scheme ("Basic ", "Kinvey ") stays readable; only the
    first `visible_chars` of the credential itself are shown.
    """
    if not value:
        return "<empty>"
    scheme, sep, credential = value.partition(" ")
    if not sep:
        scheme, credential = "", value
    if len(credential) <= visible_chars:
        hidden = "*" * len(credential)
    else:
        hidden = credential[:visible_chars] + "*" * (len(credential) - visible_chars)
    return f"{scheme} {hidden}" if scheme else hidden


def encode_basic_credentials(username: str, password: Optional[str]) -> str:
    """Return base64("username:password")."""
    text = f"{username}:{password if password is not None else ''}"
    return base64.b64encode(text.encode("utf-8")).decode("utf-8")


@dataclass(frozen=True)
class AuthInfo:
    """Resolved credentials for one scheme.

    Either `credentials` is used verbatim, or `username`/`password` are
    base64-encoded into the header value.
    """

    scheme: str
    credentials: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def header_value(self) -> str:
        credentials = self.credentials
        if self.username:
            credentials = encode_basic_credentials(self.username, self.password)
        return f"{self.scheme} {credentials}"

    def __repr__(self) -> str:
        return (
            f"AuthInfo(scheme={self.scheme!r}, "
            f"credentials={mask_value(self.credentials)!r}, "
            f"username={self.username!r}, "
            f"password={mask_value(self.password)!r})"
        )
