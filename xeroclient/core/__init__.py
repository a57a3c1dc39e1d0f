"""Xero API client library.

Architecture:
- client.py: HTTP client, OAuth1 token exchange, creation from OAuth2 tokens
- options.py: Configuration validation and authentication selection
- provider.py: OAuth2 provider for the Xero identity service
- conditions.py: Builder for where/order query parameters
- scopes.py: OAuth2 scope catalog
- models.py: Tenant connection and refreshed token records
- exceptions.py: Typed exceptions for error handling

Usage:
    from xeroclient.core import XeroClient

    client = XeroClient.create_from_token(client_id, client_secret, refresh_token, "refresh_token")
    tenant = client.get_tenant_ids()[0]
    new_refresh_token = client.get_refreshed_token().refresh_token
"""
from .client import (
    XeroClient,
    parse_token_response,
    DEFAULT_BASE_URI,
    OAUTH_BASE_URI,
    CONNECTIONS_URL,
)
from .conditions import (
    QueryHelper,
    QueryBuilder,
    parse_parameters,
    CONDITION_OPERATORS,
    LOGICAL_OPERATORS,
)
from .exceptions import (
    XeroError,
    InvalidOptionsError,
    InvalidArgumentError,
    ResourceOwnerError,
    IdentityProviderError,
    RateLimitExceededError,
)
from .models import TenantConnection, RefreshedToken
from .options import (
    OAuth1Options,
    OAuth2Options,
    ValidationError,
    ValidationResult,
    BearerTokenAuth,
    validate_options,
    build_auth,
    is_valid_url,
    is_valid_private_key,
    VALID_URLS,
)
from .provider import XeroProvider, get_response_message, AUTHORIZATION_URL, TOKEN_URL
from .scopes import get_valid_scopes, is_valid_scope, VALID_SCOPES

__all__ = [
    # Client
    "XeroClient",
    "parse_token_response",
    "DEFAULT_BASE_URI",
    "OAUTH_BASE_URI",
    "CONNECTIONS_URL",
    
    # Conditions
    "QueryHelper",
    "QueryBuilder",
    "parse_parameters",
    "CONDITION_OPERATORS",
    "LOGICAL_OPERATORS",
    
    # Exceptions
    "XeroError",
    "InvalidOptionsError",
    "InvalidArgumentError",
    "ResourceOwnerError",
    "IdentityProviderError",
    "RateLimitExceededError",
    
    # Models
    "TenantConnection",
    "RefreshedToken",
    
    # Options
    "OAuth1Options",
    "OAuth2Options",
    "ValidationError",
    "ValidationResult",
    "BearerTokenAuth",
    "validate_options",
    "build_auth",
    "is_valid_url",
    "is_valid_private_key",
    "VALID_URLS",
    
    # Provider
    "XeroProvider",
    "get_response_message",
    "AUTHORIZATION_URL",
    "TOKEN_URL",
    
    # Scopes
    "get_valid_scopes",
    "is_valid_scope",
    "VALID_SCOPES",
]
