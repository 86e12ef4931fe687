"""Utility functions for the local agent."""

from .config import Settings, is_localhost_url, load_settings

__all__ = [
    "Settings",
    "load_settings",
    "is_localhost_url",
]
