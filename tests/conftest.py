import os
import sys

import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from cv_evaluator import create_app
from cv_evaluator.extensions import db
from cv_evaluator.models.job import Job
from cv_evaluator.models.upload import Upload


class TestingConfig:
    TESTING = True
    SECRET_KEY = "test"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    REDIS_URL = "redis://localhost:6379/15"
    EVALUATION_QUEUE = "evaluation_queue_test"
    QUEUE_PUBLISH_TIMEOUT = 1
    EVALUATION_JOB_TIMEOUT = 60
    GEMINI_API_KEY = "test-key"
    GEMINI_BASE_URL = "https://gemini.test/v1beta"
    GEMINI_EVALUATION_MODELS = ["model-a", "model-b", "model-c"]
    GEMINI_EXTRACTION_MODELS = ["extract-a", "extract-b"]
    GEMINI_SCORING_TIMEOUT = 30
    GEMINI_EXTRACTION_TIMEOUT = 120
    RAW_TEXT_LIMIT = 5000
    UNKNOWN_TEXT_LIMIT = 10000
    STALE_PROCESSING_MINUTES = 30


SCORE_PAYLOAD = {
    "cv": {"match_rate": 0.82, "feedback": "Strong backend exp"},
    "project": {"score": 8.5, "feedback": "Good error handling"},
    "overall_summary": "Solid candidate",
}


class FakeScoringClient:
    """Stands in for GeminiClient in worker tests."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    def evaluate(self, description, rubric, cv_text, project_text):
        self.calls.append((description, rubric, cv_text, project_text))
        if self.error is not None:
            raise self.error
        return self.payload


class FakeQueue:
    def __init__(self, error=None):
        self.error = error
        self.published = []

    def publish(self, descriptor):
        if self.error is not None:
            raise self.error
        self.published.append(descriptor)
        return f"job-{descriptor.evaluation_id}"


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def job_and_upload(app):
    job = Job(id=2, title="Backend", description="Backend engineer, Python and Redis",
              rubric={"technical_skills": {"weight": 40, "criteria": "APIs"}})
    upload = Upload(id=7, candidate_name="Jane Doe", candidate_email="jane@example.com",
                    cv_text="Jane Doe, 5 years of Python", project_text="RAG service with retries")
    db.session.add_all([job, upload])
    db.session.commit()
    return job, upload
