"""OAuth2 provider for the Xero identity service.

Wraps an authlib ``OAuth2Session`` with Xero's endpoints, scope format and
error vocabulary. Token endpoint responses are checked by a compliance hook
before authlib parses them, so error statuses surface as
``IdentityProviderError`` instead of generic OAuth errors.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional

from authlib.integrations.requests_client import OAuth2Session

from .exceptions import IdentityProviderError, RateLimitExceededError, ResourceOwnerError

logger = logging.getLogger(__name__)

AUTHORIZATION_URL = "https://login.xero.com/identity/connect/authorize"
TOKEN_URL = "https://identity.xero.com/connect/token"
SCOPE_SEPARATOR = " "
DEFAULT_SCOPES = ["offline_access"]

ERROR_MAP = {
    "invalid_client": "Invalid client credentials",
    "unsupported_grant_type": "Missing required grant_type parameter",
    "invalid_grant": "Invalid, expired, or already used code",
    "unauthorized_client": "Invalid callback URI",
}

UNKNOWN_ERROR = "An unknown error occurred with this request"


def get_response_message(data: Any) -> str:
    """Resolve a human readable message from a token error response body."""
    if isinstance(data, dict) and data.get("error") is not None:
        code = data["error"]
        return ERROR_MAP.get(code, f"Unknown error code {code}")
    return UNKNOWN_ERROR


class XeroProvider:
    """OAuth2 authorization code and refresh token flows against Xero.

    Usage:
        provider = XeroProvider("client-id", "secret", "https://example.com/callback",
                                scopes=get_valid_scopes("accounting"))
        url = provider.get_authorization_url()
        token = provider.get_access_token("authorization_code", code="...")
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str = "",
        scopes: Optional[List[str]] = None,
        handler=None,
    ):
        """Initialize provider.

        Args:
            client_id: Xero app client id
            client_secret: Xero app client secret
            redirect_uri: Registered callback URI
            scopes: Scopes to request (defaults to offline_access)
            handler: Optional requests transport adapter for the token endpoint
        """
        self.client_id = client_id
        self.redirect_uri = redirect_uri
        self.scopes = list(scopes) if scopes else self.get_default_scopes()
        self.state: Optional[str] = None

        self.session = OAuth2Session(
            client_id,
            client_secret,
            scope=SCOPE_SEPARATOR.join(self.scopes),
            redirect_uri=redirect_uri or None,
        )
        if handler is not None:
            self.session.mount("https://", handler)
            self.session.mount("http://", handler)

        self.session.register_compliance_hook("access_token_response", self.check_response)
        self.session.register_compliance_hook("refresh_token_response", self.check_response)

    @staticmethod
    def get_default_scopes() -> List[str]:
        return list(DEFAULT_SCOPES)

    def get_base_authorization_url(self) -> str:
        return AUTHORIZATION_URL

    def get_base_access_token_url(self, params: Optional[Dict[str, Any]] = None) -> str:
        return TOKEN_URL

    def get_authorization_url(self, state: Optional[str] = None, **kwargs) -> str:
        """Build the URL to send the user to for consent.

        The state (generated when not given) is kept on ``self.state`` so the
        callback can be checked against it.
        """
        url, self.state = self.session.create_authorization_url(
            self.get_base_authorization_url(), state=state, **kwargs
        )
        return url

    def get_access_token(self, grant: str, **params):
        """Exchange a grant for an access token.

        Args:
            grant: Grant type, e.g. "authorization_code" or "refresh_token"
            **params: Grant parameters such as code or refresh_token

        Returns:
            authlib OAuth2Token (dict) with access_token, refresh_token,
            expires_at and token_type

        Raises:
            RateLimitExceededError: On HTTP 429
            IdentityProviderError: On any other HTTP error status
        """
        logger.info("Requesting Xero access token with grant %s", grant)
        return self.session.fetch_token(
            self.get_base_access_token_url(params),
            grant_type=grant,
            **params,
        )

    def get_resource_owner_details_url(self, token) -> str:
        raise ResourceOwnerError()

    def get_resource_owner(self, token):
        raise ResourceOwnerError()

    def check_response(self, response):
        """Raise on error statuses from the token endpoint.

        Args:
            response: requests Response from the token endpoint

        Returns:
            The response unchanged when the status is below 400
        """
        status_code = response.status_code
        if status_code == 429:
            logger.warning("Xero token endpoint rate limit exceeded")
            raise RateLimitExceededError("Rate limit exceeded", status_code, response.text)
        if status_code >= 400:
            try:
                data = response.json()
            except ValueError:
                data = None
            message = get_response_message(data)
            logger.warning("Xero token request rejected (%s): %s", status_code, message)
            raise IdentityProviderError(message, status_code, data if data is not None else response.text)
        return response

    def close(self) -> None:
        self.session.close()
