"""
OAuth 2.0 authorization code flow against Smartcar Connect.
Builds authorization URLs and exchanges codes / refresh tokens for access tokens.
"""

import json
import logging
import time
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import urlencode

from ..config import ApiConfig, ConfigLoader
from ..errors import InvalidParameterValue, SmartcarApiError, build_error
from ..transport import HttpTransport
from .authentication import SmartcarAuthenticator

logger = logging.getLogger(__name__)

TEST = "test"
LIVE = "live"
SIMULATED = "simulated"
MODES = (TEST, LIVE, SIMULATED)

INVALID_MODE_MESSAGE = (
    "The \"mode\" parameter MUST be one of the following: 'test', 'live', 'simulated'"
)


def determine_mode(test_mode: Optional[bool] = None, mode: Optional[str] = None) -> Optional[str]:
    """
    Resolve the Connect mode from the ``mode`` option or the deprecated ``test_mode`` flag.

    Returns None when neither is given.

    Raises:
        InvalidParameterValue: if ``mode`` is not one of test, live, simulated.
    """
    if mode is not None:
        if mode not in MODES:
            raise InvalidParameterValue(INVALID_MODE_MESSAGE)
        return mode
    if test_mode is not None:
        return TEST if test_mode else LIVE
    return None


def _flags_param(flags: Optional[Mapping[str, Any]]) -> Optional[str]:
    if not flags:
        return None
    return " ".join(
        f"{key}:{str(value).lower() if isinstance(value, bool) else value}"
        for key, value in flags.items()
    )


def is_expired(expires_at: Optional[float]) -> bool:
    """True when ``expires_at`` (seconds since epoch) is in the past."""
    if expires_at is None:
        return False
    return time.time() >= float(expires_at)


class AuthClient:
    """
    OAuth client for Smartcar Connect.

    Credentials and redirect URI default to ``SMARTCAR_CLIENT_ID``,
    ``SMARTCAR_CLIENT_SECRET`` and ``SMARTCAR_REDIRECT_URI``.
    """

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        mode: Optional[str] = None,
        test_mode: Optional[bool] = None,
        config: Optional[ApiConfig] = None,
        transport: Optional[HttpTransport] = None,
    ):
        self.mode = determine_mode(test_mode, mode) or LIVE

        loader = ConfigLoader()
        self.client_id = client_id or loader.get("SMARTCAR_CLIENT_ID")
        self.client_secret = client_secret or loader.get("SMARTCAR_CLIENT_SECRET")
        self.redirect_uri = redirect_uri or loader.get("SMARTCAR_REDIRECT_URI")

        self.config = config or ApiConfig.from_env()
        self.transport = transport or HttpTransport(timeout=self.config.timeout)

    def get_auth_url(self, scope: Iterable[str], options: Optional[Mapping[str, Any]] = None) -> str:
        """
        Generate the Connect authorization URL.

        Args:
            scope: Permissions to request, e.g. ``["read_odometer", "read_vin"]``.
            options: Optional ``force_prompt``, ``state``, ``make_bypass`` (or
                ``make``), ``flags`` and ``single_select`` (``{"vin": ...}`` or
                ``{"enabled": bool}``). ``approval_prompt=force`` is sent only
                with ``force_prompt``; otherwise Connect applies its ``auto`` default.
        """
        options = dict(options or {})
        params: Dict[str, Any] = {
            "client_id": self.client_id,
            "mode": self.mode,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(scope),
        }
        if options.get("force_prompt"):
            params["approval_prompt"] = "force"
        if options.get("state") is not None:
            params["state"] = options["state"]
        make = options.get("make_bypass", options.get("make"))
        if make is not None:
            params["make"] = make
        flags = _flags_param(options.get("flags"))
        if flags:
            params["flags"] = flags

        single_select = options.get("single_select")
        if single_select:
            if single_select.get("vin"):
                params["single_select"] = "true"
                params["single_select_vin"] = single_select["vin"]
            elif single_select.get("enabled") is not None:
                params["single_select"] = "true" if single_select["enabled"] else "false"

        query = urlencode(sorted(params.items()))
        return f"{self.config.connect_origin.rstrip('/')}/oauth/authorize?{query}"

    async def exchange_code(self, code: str, flags: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Exchange an authorization code for an access token."""
        return await self._token_request(
            {"grant_type": "authorization_code", "code": code, "redirect_uri": self.redirect_uri},
            flags,
        )

    async def exchange_refresh_token(self, token: str, flags: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """Exchange a refresh token for a new access token."""
        return await self._token_request({"grant_type": "refresh_token", "refresh_token": token}, flags)

    @staticmethod
    def is_expired(expires_at: Optional[float]) -> bool:
        return is_expired(expires_at)

    async def _token_request(self, data: Dict[str, str], flags: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        url = f"{self.config.auth_origin.rstrip('/')}/oauth/token"
        flags_value = _flags_param(flags)
        if flags_value:
            url += "?" + urlencode({"flags": flags_value})

        headers = dict(SmartcarAuthenticator.basic(self.client_id, self.client_secret).get_headers())
        headers["Content-Type"] = "application/x-www-form-urlencoded"
        headers["Accept"] = "application/json"

        response = await self.transport.send("POST", url, headers, urlencode(data))
        logger.debug("OAuth token request -> Status: %s", response.status)

        error = build_error(response.status, response.body, response.headers)
        if error:
            logger.warning("OAuth token request failed: %s", error.message)
            raise error

        try:
            token = json.loads(response.body)
        except ValueError as e:
            raise SmartcarApiError(response.status, f"Invalid token response: {e}") from e

        if token.get("expires_in") is not None:
            token["expires_at"] = int(time.time()) + int(token["expires_in"])
        return token
