from flask import current_app

from ..extensions import db
from ..models.job import Job

DEFAULT_RUBRIC = {
    "experience": {
        "weight": 25,
        "criteria": "Years of backend development, project complexity, system scaling experience",
    },
    "achievements": {
        "weight": 20,
        "criteria": "Impactful projects, performance improvements, AI feature implementations",
    },
    "cultural_fit": {
        "weight": 15,
        "criteria": "Communication, learning attitude, remote work capability",
    },
    "technical_skills": {
        "weight": 40,
        "criteria": "Backend languages (Go, PHP), databases (MySQL), message queues (RabbitMQ), API design, AI integration",
    },
}

DEFAULT_JOBS = [
    {
        "title": "Test Job",
        "description": "Backend evaluation system with AI",
        "rubric": {},
    },
    {
        "title": "Product Engineer (Backend)",
        "description": (
            "Product Engineer (Backend) with focus on Go, PHP, MySQL, RabbitMQ, AI/LLM integration, "
            "and building scalable backend systems. Experience with RESTful APIs, database management, "
            "cloud technologies, and AI-powered features is required."
        ),
        "rubric": DEFAULT_RUBRIC,
    },
]


def seed_jobs():
    """Insert the default job specs when the jobs table is empty. Returns rows added."""
    if Job.query.count() > 0:
        return 0
    for spec in DEFAULT_JOBS:
        db.session.add(Job(**spec))
    db.session.commit()
    current_app.logger.info("seeded %d jobs", len(DEFAULT_JOBS))
    return len(DEFAULT_JOBS)


def init_db():
    db.create_all()
    return seed_jobs()
