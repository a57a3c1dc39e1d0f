"""Records populated when a client is created from an OAuth2 token."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class TenantConnection:
    """One organisation (or practice) the access token is authorized for."""
    id: Optional[str]
    tenant_id: Optional[str]
    tenant_type: Optional[str]
    tenant_name: Optional[str] = None
    created_date_utc: Optional[str] = None
    updated_date_utc: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TenantConnection":
        """Build from an item of the /connections response."""
        return cls(
            id=data.get("id"),
            tenant_id=data.get("tenantId"),
            tenant_type=data.get("tenantType"),
            tenant_name=data.get("tenantName"),
            created_date_utc=data.get("createdDateUtc"),
            updated_date_utc=data.get("updatedDateUtc"),
            raw=dict(data),
        )


@dataclass(frozen=True)
class RefreshedToken:
    """Token material returned by a refresh token or authorization code exchange."""
    access_token: str
    refresh_token: Optional[str] = None
    expires_at: Optional[int] = None
    expires_in: Optional[int] = None
    token_type: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_response(cls, token: Mapping[str, Any]) -> "RefreshedToken":
        return cls(
            access_token=token["access_token"],
            refresh_token=token.get("refresh_token"),
            expires_at=token.get("expires_at"),
            expires_in=token.get("expires_in"),
            token_type=token.get("token_type"),
            raw=dict(token),
        )
