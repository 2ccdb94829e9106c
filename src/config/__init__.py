# src/config/__init__.py
"""
Конфигурация трекера наград.
"""

from src.config.loader import Settings, get_settings, settings

__all__ = ["Settings", "get_settings", "settings"]
