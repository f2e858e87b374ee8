"""REST delivery for jobs, courses and skill matching."""

from .app import create_app
from .metrics import MetricsCollector, metrics

__all__ = ['create_app', 'MetricsCollector', 'metrics']
