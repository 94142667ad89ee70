from cv_evaluator.models.job import Job
from cv_evaluator.services.seed import DEFAULT_RUBRIC, seed_jobs


def test_seed_is_idempotent(app):
    assert seed_jobs() == 2
    assert seed_jobs() == 0
    jobs = Job.query.order_by(Job.id).all()
    assert len(jobs) == 2
    assert jobs[1].rubric == DEFAULT_RUBRIC
    assert sum(c["weight"] for c in jobs[1].rubric.values()) == 100
