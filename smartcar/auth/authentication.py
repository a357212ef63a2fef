"""
Authentication handling for Smartcar API requests.
Supports HTTP Basic credentials (client id/secret, management token) and Bearer access tokens.
"""

import base64
from typing import Dict, Optional

BASIC = "BASIC"
BEARER = "BEARER"

DEFAULT_MANAGEMENT_USERNAME = "default"


def encode_basic_credentials(username: str, password: str) -> str:
    """Base64 of ``username:password`` as used in a Basic Authorization header."""
    return base64.b64encode(f"{username}:{password}".encode()).decode()


def generate_basic_management_auth(amt: str, username: Optional[str] = None) -> str:
    """Basic credentials for the application management token (``default:amt``)."""
    return encode_basic_credentials(username or DEFAULT_MANAGEMENT_USERNAME, amt)


class SmartcarAuthenticator:
    """Builds the Authorization header for Smartcar API requests."""

    def __init__(self, token: str, auth_type: str = BEARER):
        if auth_type not in (BASIC, BEARER):
            raise ValueError(f"Unsupported auth type: {auth_type}")
        self.token = token
        self.auth_type = auth_type

    @classmethod
    def basic(cls, username: str, password: str) -> "SmartcarAuthenticator":
        """Authenticator for client credentials or a management token."""
        return cls(encode_basic_credentials(username, password), BASIC)

    @classmethod
    def bearer(cls, access_token: str) -> "SmartcarAuthenticator":
        return cls(access_token, BEARER)

    def authorization(self) -> str:
        scheme = "Basic" if self.auth_type == BASIC else "Bearer"
        return f"{scheme} {self.token}"

    def get_headers(self) -> Dict[str, str]:
        """Get authentication headers."""
        return {"Authorization": self.authorization()}
