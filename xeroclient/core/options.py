"""Client configuration validation and authentication selection.

A configuration mapping selects one of two authentication schemes:

- ``oauth1`` (default): legacy request signing with consumer credentials.
  Private applications sign with RSA-SHA1 and reuse their consumer
  credentials as the token; public applications sign with HMAC-SHA1.
- ``oauth2``: a bearer access token plus an optional tenant id header.

Validation never touches the network and reports the first rule that fails.
"""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from requests.auth import AuthBase
from authlib.integrations.requests_client import OAuth1Auth
from authlib.oauth1 import SIGNATURE_HMAC_SHA1, SIGNATURE_RSA_SHA1

from .exceptions import InvalidOptionsError

logger = logging.getLogger(__name__)

VALID_URLS = (
    "https://identity.xero.com/connect/token",
    "https://api.xero.com/connections",
    "https://api.xero.com/api.xro/2.0/",
    "https://api.xero.com/payroll.xro/1.0/",
    "https://api.xero.com/assets.xro/1.0/",
    "https://api.xero.com/files.xro/1.0/",
)
OAUTH_URL_PREFIX = "https://api.xero.com/oauth"

TENANT_HEADER = "xero-tenant-id"


@dataclass(frozen=True)
class OAuth1Options:
    """Validated configuration for the legacy signing scheme."""
    base_uri: str
    consumer_key: str
    consumer_secret: str
    application: str = "public"
    token: Optional[str] = None
    token_secret: Optional[str] = None
    callback: Optional[str] = None
    verifier: Optional[str] = None
    private_key: Optional[str] = None

    scheme = "oauth1"

    @property
    def is_private(self) -> bool:
        return self.application == "private"


@dataclass(frozen=True)
class OAuth2Options:
    """Validated configuration for the bearer token scheme."""
    base_uri: str
    auth_token: str
    tenant: Optional[str] = None

    scheme = "oauth2"


ClientOptions = Union[OAuth1Options, OAuth2Options]


@dataclass(frozen=True)
class ValidationError:
    """A failed validation rule."""
    message: str
    kind: str = "invalid_configuration"


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of ``validate_options``: either options or an error."""
    options: Optional[ClientOptions] = None
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_for_error(self) -> ClientOptions:
        """Return the validated options or raise InvalidOptionsError."""
        if self.error is not None:
            raise InvalidOptionsError(self.error.message)
        return self.options

    @classmethod
    def failure(cls, message: str) -> "ValidationResult":
        return cls(error=ValidationError(message))


def is_valid_url(base_uri: Any) -> bool:
    """Check a base URL against the known Xero API roots."""
    if not isinstance(base_uri, str):
        return False
    return base_uri in VALID_URLS or base_uri.startswith(OAUTH_URL_PREFIX)


def is_valid_private_key(filename: Any) -> bool:
    """Check that a private key path is an existing, readable file.

    Only the filesystem is probed; the key content is not parsed here.
    """
    if not filename:
        return False
    path = Path(filename)
    try:
        resolved = path.resolve(strict=True)
    except (OSError, RuntimeError):
        return False
    return not resolved.is_dir() and os.access(resolved, os.R_OK)


def _missing(config: Mapping[str, Any], key: str) -> bool:
    return not config.get(key)


def validate_options(config: Mapping[str, Any]) -> ValidationResult:
    """Validate a client configuration mapping.

    Rules are checked in order and the first failure wins:

    1. base_uri is set and is a known API root
    2. oauth1: consumer_key, consumer_secret, then private_key for private apps
    3. oauth2: auth_token
    4. any other scheme is rejected

    Args:
        config: Configuration mapping (not modified)

    Returns:
        ValidationResult holding scheme-specific options or the first error
    """
    scheme = config.get("scheme")
    if scheme is None:
        scheme = "oauth1"

    if _missing(config, "base_uri") or not is_valid_url(config["base_uri"]):
        return ValidationResult.failure("API URL is not valid.")

    if scheme == "oauth1":
        if _missing(config, "consumer_key"):
            return ValidationResult.failure("Missing required parameter consumer_key")
        if _missing(config, "consumer_secret"):
            return ValidationResult.failure("Missing required parameter consumer_secret")

        application = config.get("application") or "public"
        token = config.get("token")
        token_secret = config.get("token_secret")
        if application == "private":
            # Private applications use their consumer credentials as the token.
            token = config["consumer_key"]
            token_secret = config["consumer_secret"]
            if not is_valid_private_key(config.get("private_key")):
                return ValidationResult.failure("Missing required parameter private_key")

        return ValidationResult(options=OAuth1Options(
            base_uri=config["base_uri"],
            consumer_key=config["consumer_key"],
            consumer_secret=config["consumer_secret"],
            application=application,
            token=token,
            token_secret=token_secret,
            callback=config.get("callback"),
            verifier=config.get("verifier"),
            private_key=config.get("private_key") if application == "private" else None,
        ))

    if scheme == "oauth2":
        if config.get("auth_token") is None:
            return ValidationResult.failure("Missing required parameter auth_token")
        return ValidationResult(options=OAuth2Options(
            base_uri=config["base_uri"],
            auth_token=config["auth_token"],
            tenant=config.get("tenant"),
        ))

    return ValidationResult.failure("Invalid scheme provided")


class BearerTokenAuth(AuthBase):
    """Attach an OAuth2 bearer token and optional Xero tenant header."""

    def __init__(self, token: str, tenant: Optional[str] = None):
        self.token = token
        self.tenant = tenant

    def __call__(self, request):
        request.headers["Authorization"] = f"Bearer {self.token}"
        if self.tenant is not None:
            request.headers[TENANT_HEADER] = self.tenant
        return request


def build_auth(options: ClientOptions) -> AuthBase:
    """Build the requests auth handler for validated options."""
    if isinstance(options, OAuth2Options):
        return BearerTokenAuth(options.auth_token, options.tenant)

    if options.is_private:
        logger.debug("Using RSA-SHA1 signing for private application")
        rsa_key = Path(options.private_key).read_text()
        return OAuth1Auth(
            options.consumer_key,
            client_secret=options.consumer_secret,
            token=options.token,
            token_secret=options.token_secret,
            rsa_key=rsa_key,
            signature_method=SIGNATURE_RSA_SHA1,
        )

    logger.debug("Using HMAC-SHA1 signing for public application")
    return OAuth1Auth(
        options.consumer_key,
        client_secret=options.consumer_secret,
        token=options.token,
        token_secret=options.token_secret,
        redirect_uri=options.callback,
        verifier=options.verifier,
        signature_method=SIGNATURE_HMAC_SHA1,
    )
