"""
Configuration package for mathdown

Provides application settings via environment variables using pydantic-settings.
"""

from .settings import appsettings, AppSettings, STYLESHEET_HEADER

__all__ = ["appsettings", "AppSettings", "STYLESHEET_HEADER"]
