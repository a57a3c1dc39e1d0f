"""Configuration module for the Xero client."""
from .settings import XeroSettings, load_settings

__all__ = ["XeroSettings", "load_settings"]
