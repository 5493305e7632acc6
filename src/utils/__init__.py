"""Utility modules for the SEO ROI scoring engine."""

from .config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
