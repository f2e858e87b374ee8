"""Tests for the REST API."""
import pytest
from fastapi.testclient import TestClient
from jobmatch.delivery.web.app import create_app
from jobmatch.delivery.web.metrics import MetricsCollector


@pytest.fixture
def collector():
    return MetricsCollector()


@pytest.fixture
def client(collector):
    """Create a test client backed by an in-memory database."""
    app = create_app(db_url="sqlite:///:memory:", collector=collector)
    return TestClient(app)


@pytest.fixture
def job_payload():
    return {
        "title": "Software Engineer",
        "company": "Acme Corp",
        "location_text": "Mumbai",
        "city": "Mumbai",
        "description": "Python and Django backend work",
    }


def create_job(client, payload):
    response = client.post("/jobs", json=payload)
    assert response.status_code == 201
    return response.json()


class TestJobEndpoints:
    """Test job CRUD endpoints."""

    def test_create_job(self, client, job_payload):
        job = create_job(client, job_payload)
        assert job["id"]
        assert len(job["fingerprint"]) == 64
        assert "python" in job["skills"]
        assert job["job_type"] == "full-time"
        assert job["source"] == "manual"

    def test_create_duplicate_job_conflicts(self, client, job_payload):
        first = create_job(client, job_payload)
        response = client.post("/jobs", json=dict(job_payload, title="software engineer "))
        assert response.status_code == 409
        assert response.json() == {
            "error": "DuplicateFingerprintError",
            "message": "Job already exists",
            "fingerprint": first["fingerprint"],
        }

    def test_create_job_validation(self, client):
        response = client.post("/jobs", json={"company": "Acme"})
        assert response.status_code == 422

    def test_get_job(self, client, job_payload):
        job = create_job(client, job_payload)
        response = client.get(f"/jobs/{job['id']}")
        assert response.status_code == 200
        assert response.json()["title"] == "Software Engineer"

    def test_get_missing_job(self, client):
        response = client.get("/jobs/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"error": "NotFoundError", "message": "Job not found"}

    def test_update_job(self, client, job_payload):
        job = create_job(client, job_payload)
        response = client.patch(f"/jobs/{job['id']}", json={"salary_min": 40000})
        assert response.status_code == 200
        assert response.json()["fingerprint"] == job["fingerprint"]

        response = client.patch(f"/jobs/{job['id']}", json={"title": "Staff Engineer"})
        assert response.status_code == 200
        assert response.json()["fingerprint"] != job["fingerprint"]

    def test_update_conflict(self, client, job_payload):
        create_job(client, job_payload)
        other = create_job(client, dict(job_payload, title="QA Engineer"))
        response = client.patch(f"/jobs/{other['id']}", json={"title": "Software Engineer"})
        assert response.status_code == 409

    def test_delete_job(self, client, job_payload):
        job = create_job(client, job_payload)
        assert client.delete(f"/jobs/{job['id']}").status_code == 204
        assert client.get(f"/jobs/{job['id']}").status_code == 404
        assert client.delete(f"/jobs/{job['id']}").status_code == 404


class TestSearchAndMatchEndpoints:
    """Test search, match and duplicate listing."""

    @pytest.fixture
    def jobs(self, client, job_payload):
        return [
            create_job(client, job_payload),
            create_job(client, dict(job_payload, company="Acme Corporation")),
            create_job(client, {
                "title": "Data Scientist", "company": "Globex", "location_text": "Berlin",
                "city": "Berlin", "skills": ["python", "pandas"], "job_type": "contract",
            }),
        ]

    def test_search_deduplicates(self, client, collector, jobs):
        response = client.get("/jobs/search")
        assert response.status_code == 200
        body = response.json()
        assert body["pagination"]["total"] == 2
        assert {job["company"] for job in body["data"]} == {"Acme Corp", "Globex"}
        assert collector.duplicates_removed == 1

    def test_search_filters(self, client, jobs):
        body = client.get("/jobs/search", params={"skills": ["pandas"]}).json()
        assert [job["title"] for job in body["data"]] == ["Data Scientist"]

        body = client.get("/jobs/search", params={"job_type": "contract"}).json()
        assert [job["title"] for job in body["data"]] == ["Data Scientist"]

        body = client.get("/jobs/search", params={"query": "globex"}).json()
        assert [job["company"] for job in body["data"]] == ["Globex"]

    def test_search_pagination(self, client, jobs):
        body = client.get("/jobs/search", params={"page": 1, "limit": 1}).json()
        assert len(body["data"]) == 1
        assert body["pagination"] == {
            "page": 1, "limit": 1, "total": 2, "total_pages": 2, "has_next": True, "has_prev": False,
        }

    def test_match(self, client, jobs):
        response = client.post("/jobs/match", json={"skills": ["python", "pandas"]})
        assert response.status_code == 200
        data = response.json()["data"]
        assert data[0]["title"] == "Data Scientist"
        assert data[0]["match_score"] == pytest.approx(1.0)
        scores = [job["match_score"] for job in data]
        assert scores == sorted(scores, reverse=True)
        assert all(score > 0 for score in scores)

    def test_match_requires_skills(self, client):
        assert client.post("/jobs/match", json={"skills": []}).status_code == 422

    def test_duplicates(self, client, jobs):
        groups = client.get("/jobs/duplicates").json()
        assert len(groups) == 1
        assert [job["company"] for job in groups[0]] == ["Acme Corp", "Acme Corporation"]


class TestCourseEndpoints:
    """Test course creation and recommendations."""

    def test_create_and_get_course(self, client):
        response = client.post("/courses", json={
            "title": "Docker Basics", "url": "https://c.example/docker",
            "tags": ["docker"], "provider": "youtube",
        })
        assert response.status_code == 201
        course = response.json()
        assert course["provider"] == "youtube"
        assert course["level"] == "beginner"

        assert client.get(f"/courses/{course['id']}").json()["title"] == "Docker Basics"
        assert client.get("/courses/missing").status_code == 404

    def test_recommended(self, client, collector):
        client.post("/courses", json={"title": "Figma", "url": "https://c.example/1", "tags": ["figma"]})
        client.post("/courses", json={"title": "Python", "url": "https://c.example/2", "tags": ["python"]})

        response = client.get("/courses/recommended", params={"skills": ["python"], "limit": 1})
        assert response.status_code == 200
        assert [c["title"] for c in response.json()] == ["Python"]
        assert collector.recommendation_requests == 1

    def test_recommended_requires_skills(self, client):
        assert client.get("/courses/recommended").status_code == 422


def test_extract_skills(client):
    response = client.post("/skills/extract", json={"text": "Docker, Kubernetes and Figma"})
    assert response.status_code == 200
    body = response.json()
    assert {"docker", "kubernetes", "figma"} <= set(body["skills"])
    assert "docker" in body["categories"]["devops"]
    assert body["categories"]["design"] == ["figma"]


def test_metrics_endpoints(client, job_payload):
    create_job(client, job_payload)
    client.post("/jobs", json=job_payload)

    response = client.get("/metrics")
    assert response.status_code == 200
    data = response.json()
    assert data["jobs"]["created"] == 1
    assert data["jobs"]["fingerprint_conflicts"] == 1
    assert "X-Process-Time" in response.headers

    health = client.get("/metrics/health").json()
    assert health["status"] == "healthy"
    assert health["jobs_created"] == 1

    assert client.post("/metrics/reset").status_code == 200
    assert client.get("/metrics").json()["jobs"]["created"] == 0


def test_deactivated_job_not_found(client, job_payload):
    job = create_job(client, job_payload)
    assert client.patch(f"/jobs/{job['id']}", json={"is_active": False}).status_code == 200
    assert client.get(f"/jobs/{job['id']}").status_code == 404
    assert client.delete(f"/jobs/{job['id']}").status_code == 204


def test_patch_null_clears_field(client, job_payload):
    job = create_job(client, dict(job_payload, external_url="https://jobs.example/1", salary_min=1000))
    response = client.patch(f"/jobs/{job['id']}", json={"external_url": None, "salary_min": None})
    assert response.status_code == 200
    assert response.json()["external_url"] is None
    assert response.json()["salary_min"] is None


def test_skill_relevance(client):
    response = client.post("/skills/relevance", json={
        "text": "python python and docker",
        "skills": ["python", "docker", "rust"],
    })
    assert response.status_code == 200
    assert [item["skill"] for item in response.json()["skills"]] == ["python", "docker"]
