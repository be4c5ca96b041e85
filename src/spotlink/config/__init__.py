"""Configuration module for spotlink."""

from .settings import AppConfig, LoginCredentials, Settings

__all__ = ["AppConfig", "LoginCredentials", "Settings"]
