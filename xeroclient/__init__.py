"""Xero API client: authentication, query helpers and tenant discovery."""
from .core import (
    XeroClient,
    XeroProvider,
    QueryBuilder,
    XeroError,
    InvalidOptionsError,
    InvalidArgumentError,
    ResourceOwnerError,
    IdentityProviderError,
    RateLimitExceededError,
    get_valid_scopes,
    is_valid_scope,
)

__all__ = [
    "XeroClient",
    "XeroProvider",
    "QueryBuilder",
    "XeroError",
    "InvalidOptionsError",
    "InvalidArgumentError",
    "ResourceOwnerError",
    "IdentityProviderError",
    "RateLimitExceededError",
    "get_valid_scopes",
    "is_valid_scope",
]
