"""Configuration management."""

from __future__ import annotations

from paliers.config.settings import Settings, get_settings

__all__ = ["Settings", "get_settings"]
