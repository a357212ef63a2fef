from .authentication import (
    BASIC,
    BEARER,
    SmartcarAuthenticator,
    encode_basic_credentials,
    generate_basic_management_auth,
)
from .auth_client import AuthClient, determine_mode, is_expired

__all__ = [
    "AuthClient",
    "BASIC",
    "BEARER",
    "SmartcarAuthenticator",
    "determine_mode",
    "encode_basic_credentials",
    "generate_basic_management_auth",
    "is_expired",
]
