"""HTTP client for the Xero APIs.

Handles configuration validation, request signing or bearer authentication,
legacy OAuth1 token exchange, and creation from OAuth2 tokens with tenant
discovery.
"""
from __future__ import annotations
import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from .conditions import QueryHelper, parse_parameters
from .exceptions import XeroError
from .models import RefreshedToken, TenantConnection
from .options import VALID_URLS, build_auth, is_valid_private_key, is_valid_url, validate_options
from .provider import XeroProvider
from .scopes import get_valid_scopes

logger = logging.getLogger(__name__)

DEFAULT_BASE_URI = "https://api.xero.com/api.xro/2.0/"
OAUTH_BASE_URI = "https://api.xero.com/oauth/"
CONNECTIONS_URL = "https://api.xero.com/connections"

_SESSION_ATTRIBUTES = ("verify", "cert", "proxies")


def parse_token_response(body: str) -> Dict[str, str]:
    """Parse a form-encoded OAuth1 token response body."""
    return parse_parameters(body)


class XeroClient(QueryHelper):
    """HTTP client for the Xero APIs.

    Features:
    - Configuration validated before any request is made
    - OAuth1 request signing (public and private applications)
    - OAuth2 bearer tokens with the xero-tenant-id header
    - Condition builder for the ``where`` and ``order`` query parameters

    Usage:
        client = XeroClient({
            "base_uri": "https://api.xero.com/api.xro/2.0/",
            "scheme": "oauth2",
            "auth_token": token,
            "tenant": tenant_id,
        })
        client.add_condition("Name", "ACME", "StartsWith")
        response = client.get("Contacts", params=client.compile_conditions())
    """

    def __init__(self, config: Optional[Mapping[str, Any]] = None):
        """Initialize Xero client.

        Args:
            config: Configuration mapping with keys:
                - base_uri: One of VALID_URLS or a URL under the OAuth root
                - scheme: "oauth1" (default) or "oauth2"
                - consumer_key, consumer_secret, application, private_key,
                  token, token_secret, callback, verifier: OAuth1 settings
                - auth_token, tenant: OAuth2 settings
                - handler: requests transport adapter to send requests through
                - options: Transport options (headers, params, timeout, verify,
                  cert, proxies, hooks)

        Raises:
            InvalidOptionsError: If the configuration is not valid
        """
        super().__init__()
        config = config or {}
        self.options = validate_options(config).raise_for_error()
        self.base_uri: str = self.options.base_uri
        self.scheme: str = self.options.scheme
        self.timeout = None
        self._tenant_ids: List[TenantConnection] = []
        self._refreshed_token: Optional[RefreshedToken] = None

        self.session = requests.Session()
        handler = config.get("handler")
        if handler is not None:
            self.session.mount("https://", handler)
            self.session.mount("http://", handler)
        self._apply_transport_options(config.get("options") or {})

        # Auth runs after headers are merged, so it signs the final request.
        self.session.auth = build_auth(self.options)
        logger.debug("Created Xero client for %s (scheme=%s)", self.base_uri, self.scheme)

    def _apply_transport_options(self, transport: Mapping[str, Any]) -> None:
        for key, value in transport.items():
            if key == "headers":
                self.session.headers.update(value)
            elif key == "params":
                self.session.params.update(value)
            elif key == "timeout":
                self.timeout = value
            elif key == "hooks":
                for event, hooks in value.items():
                    if callable(hooks):
                        hooks = [hooks]
                    self.session.hooks.setdefault(event, []).extend(hooks)
            elif key in _SESSION_ATTRIBUTES:
                setattr(self.session, key, value)
            else:
                logger.warning("Ignoring unsupported transport option %s", key)

    # ─────────────────────────────────────────────────────────────────────────
    # URL and key helpers
    # ─────────────────────────────────────────────────────────────────────────
    @staticmethod
    def get_valid_urls() -> List[str]:
        return list(VALID_URLS)

    @staticmethod
    def is_valid_url(base_uri: Any) -> bool:
        return is_valid_url(base_uri)

    @staticmethod
    def is_valid_private_key(filename: Any) -> bool:
        return is_valid_private_key(filename)

    def _build_url(self, path: str) -> str:
        if path.startswith(("https://", "http://")):
            return path
        return f"{self.base_uri.rstrip('/')}/{path.lstrip('/')}"

    # ─────────────────────────────────────────────────────────────────────────
    # HTTP verbs
    # ─────────────────────────────────────────────────────────────────────────
    def request(self, method: str, path: str, **kwargs) -> requests.Response:
        """Send an authenticated request.

        Args:
            method: HTTP method
            path: Path relative to base_uri, or an absolute URL
            **kwargs: Additional arguments for requests.Session.request

        Returns:
            Response object

        Raises:
            requests.HTTPError: On HTTP error status
            requests.RequestException: On transport failure
        """
        url = self._build_url(path)
        if self.timeout is not None:
            kwargs.setdefault("timeout", self.timeout)
        logger.debug("%s %s", method.upper(), url)
        resp = self.session.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> requests.Response:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Any] = None, data: Optional[Any] = None, **kwargs) -> requests.Response:
        return self.request("POST", path, json=json, data=data, **kwargs)

    def put(self, path: str, json: Optional[Any] = None, **kwargs) -> requests.Response:
        return self.request("PUT", path, json=json, **kwargs)

    def delete(self, path: str, **kwargs) -> requests.Response:
        return self.request("DELETE", path, **kwargs)

    def close(self) -> None:
        self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ─────────────────────────────────────────────────────────────────────────
    # Legacy OAuth1 token exchange
    # ─────────────────────────────────────────────────────────────────────────
    @classmethod
    def _exchange_oauth1_token(cls, path: str, config: Dict[str, Any], options: Optional[Mapping[str, Any]]) -> Dict[str, str]:
        # Caller options only fill keys the exchange does not set itself.
        merged = dict(options or {})
        merged.update(config)
        with cls(merged) as client:
            response = client.post(path)
        tokens = parse_token_response(response.text)
        logger.info("Received OAuth1 token response from %s", path)
        return tokens

    @classmethod
    def get_request_token(cls, consumer_key: str, consumer_secret: str, options: Optional[Mapping[str, Any]] = None) -> Dict[str, str]:
        """Get an unauthorized OAuth1 request token.

        Args:
            consumer_key: Application consumer key
            consumer_secret: Application consumer secret
            options: Extra client configuration (callback, handler, options)

        Returns:
            Parsed token response, e.g. {"oauth_token": ..., "oauth_token_secret": ...}
        """
        config = {
            "base_uri": OAUTH_BASE_URI,
            "consumer_key": consumer_key,
            "consumer_secret": consumer_secret,
            "application": "public",
        }
        return cls._exchange_oauth1_token("RequestToken", config, options)

    @classmethod
    def get_access_token(
        cls,
        consumer_key: str,
        consumer_secret: str,
        token: str,
        token_secret: str,
        verifier: str,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, str]:
        """Exchange an authorized request token and verifier for an access token."""
        config = {
            "base_uri": OAUTH_BASE_URI,
            "consumer_key": consumer_key,
            "consumer_secret": consumer_secret,
            "token": token,
            "token_secret": token_secret,
            "verifier": verifier,
            "application": "public",
        }
        return cls._exchange_oauth1_token("AccessToken", config, options)

    # ─────────────────────────────────────────────────────────────────────────
    # OAuth2 tenants
    # ─────────────────────────────────────────────────────────────────────────
    def _fetch_connections(self) -> List[TenantConnection]:
        response = self.get(CONNECTIONS_URL)
        data = response.json()
        if data is None:
            data = []
        if not isinstance(data, list):
            raise XeroError(f"Expected a list of connections, got {type(data).__name__}")
        connections = [TenantConnection.from_dict(item) for item in data]
        logger.info("Discovered %d Xero tenant connection(s)", len(connections))
        return connections

    def get_connections(self) -> List[TenantConnection]:
        """List the tenants the current token can access.

        Returns:
            Tenant connections, or an empty list if the request failed without
            an HTTP error status

        Raises:
            requests.HTTPError: On HTTP error status
            XeroError: If the response body is not a list of connections
        """
        try:
            return self._fetch_connections()
        except requests.RequestException as exc:
            if exc.response is not None and exc.response.status_code >= 400:
                raise
            logger.warning("Could not list Xero connections: %s", exc)
            return []

    def get_tenant_ids(self) -> List[TenantConnection]:
        """The tenant connections discovered when created from a token."""
        return list(self._tenant_ids)

    def get_refreshed_token(self) -> Optional[RefreshedToken]:
        """Token material from a refresh or code exchange, if one happened."""
        return self._refreshed_token

    @classmethod
    def create_from_token(
        cls,
        client_id: str,
        client_secret: str,
        token: str,
        grant: Optional[str] = None,
        api: str = "accounting",
        options: Optional[Mapping[str, Any]] = None,
        collaborators: Optional[Mapping[str, Any]] = None,
        redirect_uri: str = "",
    ) -> "XeroClient":
        """Create an OAuth2 client from a token and discover its tenants.

        Args:
            client_id: Xero app client id
            client_secret: Xero app client secret
            token: Access token, refresh token or authorization code
            grant: None to use token as the access token, "refresh_token" or
                "authorization_code" to exchange it first
            api: API name used to pick scopes for the exchange
            options: Client configuration; base_uri defaults to the
                accounting API
            collaborators: {"handler": adapter} for the token endpoint session
            redirect_uri: Redirect URI registered for the app

        Returns:
            XeroClient with tenant connections and any refreshed token set

        Raises:
            IdentityProviderError: If the token exchange is rejected
            InvalidOptionsError: If options are not valid
            requests.RequestException: If tenant discovery fails
        """
        collaborators = collaborators or {}
        refreshed_token = None

        config: Dict[str, Any] = dict(options or {})
        config.setdefault("base_uri", DEFAULT_BASE_URI)
        config["scheme"] = "oauth2"
        # Refresh tokens are single use, so bad options must fail before the exchange.
        validate_options({**config, "auth_token": token}).raise_for_error()

        if grant is not None:
            provider = XeroProvider(
                client_id,
                client_secret,
                redirect_uri=redirect_uri,
                scopes=get_valid_scopes(api),
                handler=collaborators.get("handler"),
            )
            params: Dict[str, str] = {}
            if grant == "refresh_token":
                params["refresh_token"] = token
            elif grant == "authorization_code":
                params["code"] = token
            try:
                refreshed_token = RefreshedToken.from_response(provider.get_access_token(grant, **params))
            finally:
                provider.close()
            token = refreshed_token.access_token

        config["auth_token"] = token

        instance = cls(config)
        try:
            instance._tenant_ids = instance._fetch_connections()
        except Exception:
            instance.close()
            raise
        instance._refreshed_token = refreshed_token
        return instance

    @classmethod
    def from_settings(
        cls,
        settings,
        token: str,
        grant: Optional[str] = None,
        options: Optional[Mapping[str, Any]] = None,
        collaborators: Optional[Mapping[str, Any]] = None,
    ) -> "XeroClient":
        """Create a client from ``XeroSettings`` and a token.

        ``options`` are merged over the settings, e.g. to pass a handler.
        """
        config = settings.client_options()
        for key, value in (options or {}).items():
            if key == "options" and isinstance(config.get("options"), dict):
                config["options"] = {**config["options"], **value}
            else:
                config[key] = value
        return cls.create_from_token(
            settings.client_id,
            settings.client_secret,
            token,
            grant=grant,
            api=settings.api,
            options=config,
            collaborators=collaborators,
            redirect_uri=settings.redirect_uri,
        )
