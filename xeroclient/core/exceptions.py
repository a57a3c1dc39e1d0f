"""Xero-specific exceptions for error handling."""


class XeroError(Exception):
    """Base exception for all Xero client operations."""
    pass


class InvalidOptionsError(XeroError, ValueError):
    """Client configuration failed validation before any request was sent."""
    pass


class InvalidArgumentError(XeroError, ValueError):
    """Malformed input to the query condition builder."""
    pass


class ResourceOwnerError(XeroError, NotImplementedError):
    """Xero has no resource owner (user info) endpoint."""

    def __init__(self, message: str = "Xero does not support resource owner lookups"):
        super().__init__(message)


class IdentityProviderError(XeroError):
    """Error response from the Xero identity (token) endpoint.
    
    Attributes:
        status_code: HTTP status code
        message: Resolved error message
        response_body: Parsed or raw response body
    """
    
    def __init__(self, message: str, status_code: int, response_body=None):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        super().__init__(f"[{status_code}] {message}")


class RateLimitExceededError(IdentityProviderError):
    """The identity endpoint answered 429 Too Many Requests."""
    pass
