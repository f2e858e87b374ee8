"""Metrics endpoint for monitoring deduplication and matching activity."""
import time
from typing import Dict, Any
from dataclasses import dataclass, field
from collections import deque
from fastapi import APIRouter
import logging

logger = logging.getLogger(__name__)


@dataclass
class MetricsCollector:
    """Collects and stores application metrics."""

    # Job creation metrics
    jobs_created: int = 0
    fingerprint_conflicts: int = 0

    # Duplicate detection metrics
    duplicates_removed: int = 0

    # Matching metrics
    match_requests: int = 0
    recommendation_requests: int = 0

    # Response time tracking (last 100 requests)
    response_times: deque = field(default_factory=lambda: deque(maxlen=100))

    start_time: float = field(default_factory=time.time)

    def record_job_created(self) -> None:
        self.jobs_created += 1

    def record_fingerprint_conflict(self) -> None:
        self.fingerprint_conflicts += 1

    def record_duplicates_removed(self, count: int) -> None:
        """Record duplicates removed during search post-processing.

        Args:
            count: Number of duplicates removed
        """
        self.duplicates_removed += count

    def record_match_request(self) -> None:
        self.match_requests += 1

    def record_recommendation_request(self) -> None:
        self.recommendation_requests += 1

    def record_response_time(self, duration: float) -> None:
        self.response_times.append(duration)

    def get_average_response_time(self) -> float:
        """Get average response time from recent requests.

        Returns:
            Average response time in seconds
        """
        if not self.response_times:
            return 0.0
        return sum(self.response_times) / len(self.response_times)

    def get_uptime(self) -> float:
        return time.time() - self.start_time

    def reset(self) -> None:
        """Zero every counter and restart the uptime clock."""
        self.jobs_created = 0
        self.fingerprint_conflicts = 0
        self.duplicates_removed = 0
        self.match_requests = 0
        self.recommendation_requests = 0
        self.response_times.clear()
        self.start_time = time.time()


# Global metrics collector
metrics = MetricsCollector()


def create_metrics_router(collector: MetricsCollector = None) -> APIRouter:
    """Create FastAPI router for metrics endpoints.

    Args:
        collector: Metrics collector to expose (defaults to the global one)

    Returns:
        FastAPI router with metrics endpoints
    """
    collector = collector or metrics
    router = APIRouter(prefix="/metrics", tags=["metrics"])

    @router.get("")
    async def get_metrics() -> Dict[str, Any]:
        """Get all application metrics."""
        return {
            "jobs": {
                "created": collector.jobs_created,
                "fingerprint_conflicts": collector.fingerprint_conflicts,
                "duplicates_removed": collector.duplicates_removed,
            },
            "matching": {
                "match_requests": collector.match_requests,
                "recommendation_requests": collector.recommendation_requests,
            },
            "performance": {
                "average_response_time_ms": collector.get_average_response_time() * 1000,
                "uptime_seconds": collector.get_uptime(),
            },
        }

    @router.get("/health")
    async def health_check() -> Dict[str, Any]:
        """Health check endpoint.

        Returns:
            Health status and basic metrics
        """
        avg_response_time = collector.get_average_response_time()
        status = "healthy"
        if avg_response_time > 1.0:
            status = "degraded"
        if avg_response_time > 5.0:
            status = "unhealthy"

        return {
            "status": status,
            "uptime_seconds": collector.get_uptime(),
            "average_response_time_ms": avg_response_time * 1000,
            "jobs_created": collector.jobs_created,
        }

    @router.post("/reset")
    async def reset_metrics() -> Dict[str, str]:
        collector.reset()
        logger.info("Metrics reset")
        return {"message": "Metrics reset successfully"}

    return router
