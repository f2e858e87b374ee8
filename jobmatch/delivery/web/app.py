"""FastAPI application factory."""
import logging
import time
from typing import Optional
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from jobmatch.config import config
from jobmatch.core import JobService, CourseService
from jobmatch.database import Database
from jobmatch.domain.deduplication import JobDeduplicator
from jobmatch.domain.matching import create_skill_matcher
from jobmatch.error_handling import register_error_handlers
from jobmatch.delivery.web.handler import JobMatchWebHandler
from jobmatch.delivery.web.metrics import MetricsCollector, create_metrics_router, metrics

logger = logging.getLogger(__name__)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Middleware to track response times."""

    def __init__(self, app, collector: MetricsCollector):
        super().__init__(app)
        self.collector = collector

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        process_time = time.time() - start_time

        self.collector.record_response_time(process_time)
        response.headers["X-Process-Time"] = str(process_time)
        return response


def create_app(db_url: Optional[str] = None,
               taxonomy_path: Optional[str] = None,
               collector: Optional[MetricsCollector] = None) -> FastAPI:
    """Create and configure the FastAPI app.

    Args:
        db_url: Database URL (defaults to DATABASE_URL)
        taxonomy_path: YAML skill taxonomy (defaults to SKILL_TAXONOMY_PATH, then the built-in one)
        collector: Metrics collector (defaults to the global one)
    """
    db_config = config.get_database_config()
    matching_config = config.get_matching_config()
    collector = collector or metrics

    app = FastAPI(
        title="JobMatch API",
        version="1.0",
        description="Job deduplication, skill matching and course recommendations",
    )
    app.add_middleware(MetricsMiddleware, collector=collector)
    register_error_handlers(app)

    database = Database(db_url or db_config['url'], echo=db_config['echo'])
    matcher = create_skill_matcher(taxonomy_path or matching_config['taxonomy_path'])
    job_service = JobService(
        database,
        deduplicator=JobDeduplicator(matching_config['similarity_threshold']),
        matcher=matcher,
        enable_deduplication=matching_config['enable_deduplication'],
        metrics=collector,
    )
    course_service = CourseService(
        database,
        default_limit=matching_config['recommendation_limit'],
        metrics=collector,
    )

    JobMatchWebHandler(app, job_service, course_service, matcher)
    app.include_router(create_metrics_router(collector))

    logger.info("JobMatch API configured")
    return app
