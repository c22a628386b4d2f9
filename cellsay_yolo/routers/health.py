"""
Health and Monitoring Router

Provides service info and health checks.
"""

import logging
import os

import psutil
from fastapi import APIRouter

from cellsay_yolo.clients.channel import LocalMethodChannel
from cellsay_yolo.core.dependencies import AppStateDep


logger = logging.getLogger(__name__)

router = APIRouter(
    tags=['Health & Monitoring'],
)


@router.get('/')
def root(state: AppStateDep):
    """Service information endpoint."""
    settings = state.settings
    return {
        'service': settings.api_title,
        'status': 'running',
        'endpoints': {
            'predict': '/predict',
            'thresholds': '/thresholds',
            'streaming_config': '/config/streaming',
            'models': '/models',
            'channel': f'/channels/{settings.channel_name}/{{method}}',
        },
        'channel_backend': settings.channel_backend,
    }


@router.get('/health')
def health(state: AppStateDep):
    """
    Health check with process metrics.

    Status is 'degraded' while no model is loaded.
    """
    settings = state.settings
    process = psutil.Process(os.getpid())
    memory_info = process.memory_info()

    model_loaded = state.yolo is not None and state.yolo.is_loaded
    channel = state.channel

    return {
        'status': 'healthy' if model_loaded else 'degraded',
        'model': {
            'path': settings.weights_path,
            'loaded': model_loaded,
            'instance_id': state.yolo.instance_id if state.yolo is not None else None,
        },
        'channel': {
            'name': channel.name if channel is not None else settings.channel_name,
            'backend': settings.channel_backend,
            'methods': channel.methods if isinstance(channel, LocalMethodChannel) else None,
        },
        'performance': {
            'memory_mb': round(memory_info.rss / 1024 / 1024, 2),
            'cpu_percent': process.cpu_percent(),
            'max_file_size_mb': settings.max_file_size_mb,
            'slow_request_threshold_ms': settings.slow_request_threshold_ms,
        },
    }
