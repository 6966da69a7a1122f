"""Configuration module for the IDM integration."""
from .settings import IdmSettings, load_settings

__all__ = ["IdmSettings", "load_settings"]
