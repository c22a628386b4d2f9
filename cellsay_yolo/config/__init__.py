"""
Configuration module for the YOLO plugin demo.

Provides centralized configuration using Pydantic Settings with environment variable support.
"""

from cellsay_yolo.config.settings import Settings, get_settings


__all__ = ['Settings', 'get_settings']
