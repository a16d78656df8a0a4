"""
Auth resolution for kinvey_request.
"""
from .encoding import AuthInfo, encode_basic_credentials
from .resolver import CASCADES, AuthResolver, Cascade, Err, Ok, session_token

__all__ = [
    "AuthInfo",
    "AuthResolver",
    "CASCADES",
    "Cascade",
    "Err",
    "Ok",
    "encode_basic_credentials",
    "session_token",
]
