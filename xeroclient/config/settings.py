"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_BASE_URI = "https://api.xero.com/api.xro/2.0/"


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
        except OSError as e:
            logger.warning("[settings] Failed to read /run/secrets/%s: %s", secret_name, e)
        else:
            if secret_value:
                logger.info("[settings] Loaded %s from /run/secrets", secret_name)
                return secret_value

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            logger.info("[settings] Loaded %s from environment (fallback)", env_var)
            return secret_value

    return None


def _require(var_name: str, value: Optional[str]) -> str:
    if not value:
        raise RuntimeError(f"Environment variable {var_name} is required.")
    return value


@dataclass
class XeroSettings:
    """Xero application configuration container."""
    client_id: str
    client_secret: str
    redirect_uri: str = ""
    api: str = "accounting"
    base_uri: str = DEFAULT_BASE_URI
    tenant_id: str = ""
    request_timeout: Optional[float] = None

    def client_options(self) -> Dict[str, Any]:
        """Client configuration for ``XeroClient.create_from_token``."""
        options: Dict[str, Any] = {"base_uri": self.base_uri}
        if self.tenant_id:
            options["tenant"] = self.tenant_id
        if self.request_timeout is not None:
            options["options"] = {"timeout": self.request_timeout}
        return options


def load_settings() -> XeroSettings:
    """Load Xero settings from environment and /run/secrets.

    Raises:
        RuntimeError: If a required variable is missing or malformed
    """
    client_id = _require("XERO_CLIENT_ID", os.environ.get("XERO_CLIENT_ID"))
    client_secret = _require(
        "XERO_CLIENT_SECRET",
        _load_secret_from_file("xero_client_secret", "XERO_CLIENT_SECRET"),
    )

    timeout_str = os.environ.get("XERO_REQUEST_TIMEOUT", "").strip()
    request_timeout = None
    if timeout_str:
        try:
            request_timeout = float(timeout_str)
        except ValueError:
            raise RuntimeError(f"XERO_REQUEST_TIMEOUT must be a number, got {timeout_str!r}") from None

    settings = XeroSettings(
        client_id=client_id,
        client_secret=client_secret,
        redirect_uri=os.environ.get("XERO_REDIRECT_URI", ""),
        api=os.environ.get("XERO_API", "accounting").strip() or "accounting",
        base_uri=os.environ.get("XERO_BASE_URI", DEFAULT_BASE_URI),
        tenant_id=os.environ.get("XERO_TENANT_ID", ""),
        request_timeout=request_timeout,
    )
    logger.info("[settings] api=%s; client_id=%s...", settings.api, client_id[:4])
    return settings
