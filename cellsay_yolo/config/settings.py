"""
Centralized configuration using Pydantic Settings.

All configuration is loaded from environment variables with sensible defaults.
Use get_settings() to access the singleton settings instance.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    All settings can be overridden via environment variables.
    Example: CHANNEL_BACKEND=http ENGINE_URL=http://edge:9600 uvicorn cellsay_yolo.main:app
    """

    # ==========================================================================
    # Channel Configuration
    # ==========================================================================
    channel_name: str = Field(
        default='yolo_single_image_channel', description='Method channel name'
    )

    channel_backend: Literal['local', 'http'] = Field(
        default='local',
        description="'local' runs the Ultralytics engine in-process, 'http' forwards to ENGINE_URL",
    )

    engine_url: str = Field(
        default='http://localhost:9600', description='Remote engine base URL (http backend)'
    )

    engine_timeout: float = Field(default=30.0, description='HTTP channel timeout in seconds')

    # ==========================================================================
    # Model Configuration
    # ==========================================================================
    weights_path: str = Field(default='yolo11n.pt', description='Model weights for the demo')

    use_multi_instance: bool = Field(
        default=False, description='Run the demo model under its own engine instance id'
    )

    load_model_on_startup: bool = Field(
        default=True, description='Load the model when the demo service starts'
    )

    # ==========================================================================
    # Threshold Defaults (demo sliders)
    # ==========================================================================
    default_confidence_threshold: float = Field(default=0.5, ge=0.0, le=1.0)

    default_iou_threshold: float = Field(default=0.45, ge=0.0, le=1.0)

    default_num_items_threshold: int = Field(default=30, ge=1, le=100)

    # ==========================================================================
    # Performance Configuration
    # ==========================================================================
    max_file_size_mb: int = Field(default=50, description='Maximum upload file size in MB')

    slow_request_threshold_ms: int = Field(
        default=500, description='Log requests slower than this threshold'
    )

    log_level: str = Field(default='INFO', description='Root logging level')

    # ==========================================================================
    # API Configuration
    # ==========================================================================
    api_title: str = Field(default='Cellsay YOLO Demo', description='API title for OpenAPI docs')

    api_description: str = Field(
        default='Object detection demo over the YOLO method channel',
        description='API description for OpenAPI docs',
    )

    api_version: str = Field(default='1.0.0', description='API version')

    # ==========================================================================
    # Computed Properties
    # ==========================================================================
    @property
    def max_file_size_bytes(self) -> int:
        """Maximum file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    class Config:
        env_prefix = ''  # No prefix for env vars
        case_sensitive = False
        extra = 'ignore'


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance (singleton pattern).

    Returns:
        Settings: Application settings
    """
    return Settings()
