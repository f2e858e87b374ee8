"""Tests for metrics collection and the metrics router."""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from jobmatch.delivery.web.metrics import MetricsCollector, create_metrics_router


class TestMetricsCollector:
    """Test the in-process counters."""

    def test_counters(self):
        collector = MetricsCollector()
        collector.record_job_created()
        collector.record_job_created()
        collector.record_fingerprint_conflict()
        collector.record_duplicates_removed(3)
        collector.record_match_request()
        collector.record_recommendation_request()

        assert collector.jobs_created == 2
        assert collector.fingerprint_conflicts == 1
        assert collector.duplicates_removed == 3
        assert collector.match_requests == 1
        assert collector.recommendation_requests == 1

    def test_average_response_time(self):
        collector = MetricsCollector()
        assert collector.get_average_response_time() == 0.0
        collector.record_response_time(0.1)
        collector.record_response_time(0.3)
        assert collector.get_average_response_time() == pytest.approx(0.2)

    def test_response_times_are_bounded(self):
        collector = MetricsCollector()
        for _ in range(150):
            collector.record_response_time(0.01)
        assert len(collector.response_times) == 100

    def test_reset(self):
        collector = MetricsCollector()
        collector.record_job_created()
        collector.record_response_time(1.0)
        collector.reset()
        assert collector.jobs_created == 0
        assert collector.get_average_response_time() == 0.0


class TestMetricsRouter:
    """Test the metrics endpoints."""

    @pytest.fixture
    def collector(self):
        return MetricsCollector()

    @pytest.fixture
    def client(self, collector):
        app = FastAPI()
        app.include_router(create_metrics_router(collector))
        return TestClient(app)

    def test_metrics_structure(self, client, collector):
        collector.record_match_request()
        data = client.get("/metrics").json()
        assert set(data) == {"jobs", "matching", "performance"}
        assert data["matching"]["match_requests"] == 1
        assert "uptime_seconds" in data["performance"]

    @pytest.mark.parametrize("response_time,status", [
        (0.1, "healthy"),
        (2.0, "degraded"),
        (6.0, "unhealthy"),
    ])
    def test_health_status(self, client, collector, response_time, status):
        collector.record_response_time(response_time)
        assert client.get("/metrics/health").json()["status"] == status
