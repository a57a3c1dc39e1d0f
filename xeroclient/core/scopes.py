"""OAuth2 scope catalog for the Xero APIs."""
from __future__ import annotations
from typing import Iterable, List, Optional

BASE_SCOPES = ("offline_access",)

VALID_SCOPES = (
    "offline_access", "openid", "profile", "email",
    "accounting.transactions", "accounting.transactions.read",
    "accounting.reports.read", "accounting.journals.read",
    "accounting.settings", "accounting.settings.read",
    "accounting.contacts", "accounting.contacts.read",
    "accounting.attachments", "accounting.attachments.read",
    "payroll.employees", "payroll.employees.read",
    "payroll.payruns", "payroll.payruns.read",
    "payroll.payslip", "payroll.payslip.read",
    "payroll.timesheets", "payroll.timesheets.read",
    "payroll.settings", "payroll.settings.read",
    "files", "files.read",
    "assets", "assets.read",
    "projects", "projects.read",
    "paymentservices", "bankfeeds",
)

_ACCOUNTING_TYPES = ("transactions", "settings", "contacts", "attachments")
_PAYROLL_TYPES = ("employees", "payruns", "payslip", "timesheets", "settings")


def is_valid_scope(scope: str) -> bool:
    """Check if a scope is a known Xero scope."""
    return scope in VALID_SCOPES


def get_valid_scopes(api: Optional[str] = "", custom: Optional[Iterable[str]] = None) -> List[str]:
    """Get the scopes an application needs for an API.
    
    Args:
        api: One of openid, accounting, payroll_<country>, files, assets,
            projects, restricted or custom
        custom: Scopes to use when api is "custom"; unknown scopes are dropped
        
    Returns:
        Ordered list of scopes. Duplicates are kept.
    """
    api = api or ""
    if api == "custom":
        return [scope for scope in (custom or []) if is_valid_scope(scope)]

    scopes = list(BASE_SCOPES)
    if api == "openid":
        scopes.extend(["openid", "profile", "email"])
    elif api == "accounting":
        for scope_type in _ACCOUNTING_TYPES:
            scopes.append(f"accounting.{scope_type}")
            scopes.append(f"accounting.{scope_type}.read")
        scopes.extend(["accounting.reports.read", "accounting.journals.read"])
    elif api.startswith("payroll"):
        # Country payroll APIs share one scope set for now.
        for scope_type in _PAYROLL_TYPES:
            scopes.append(f"payroll.{scope_type}")
            scopes.append(f"payroll.{scope_type}.read")
    elif api in ("files", "assets", "projects"):
        scopes.extend([api, f"{api}.read"])
    elif api == "restricted":
        scopes.extend(["paymentservices", "bankfeeds"])

    return scopes
