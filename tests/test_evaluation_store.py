from datetime import datetime, timedelta

import pytest

from cv_evaluator.errors import EvaluationNotFound, InvalidStatusTransition
from cv_evaluator.extensions import db
from cv_evaluator.models.evaluation import EvaluationStatus
from cv_evaluator.services import evaluation_store


def test_create_starts_queued(job_and_upload):
    ev = evaluation_store.create_evaluation(7, 2)
    assert ev.id is not None
    assert evaluation_store.get_evaluation(ev.id).status == "queued"


def test_get_unknown_raises(app):
    with pytest.raises(EvaluationNotFound):
        evaluation_store.get_evaluation(12345)


def test_status_only_moves_forward(job_and_upload):
    ev = evaluation_store.create_evaluation(7, 2)
    evaluation_store.update_status(ev.id, EvaluationStatus.PROCESSING)

    with pytest.raises(InvalidStatusTransition):
        evaluation_store.update_status(ev.id, EvaluationStatus.QUEUED)

    evaluation_store.update_status(ev.id, EvaluationStatus.FAILED)
    for status in EvaluationStatus.ALL:
        with pytest.raises(InvalidStatusTransition):
            evaluation_store.update_status(ev.id, status)
    assert evaluation_store.get_evaluation(ev.id).status == "failed"


def test_result_requires_processing(job_and_upload):
    ev = evaluation_store.create_evaluation(7, 2)
    with pytest.raises(InvalidStatusTransition):
        evaluation_store.update_result(ev.id, {"cv_match_rate": 0.5})

    evaluation_store.update_status(ev.id, EvaluationStatus.PROCESSING)
    done = evaluation_store.update_result(ev.id, {"cv_match_rate": 0.5, "overall_summary": "ok"})
    assert done.status == "completed"
    assert done.cv_match_rate == 0.5


def test_result_rejects_unknown_fields(job_and_upload):
    ev = evaluation_store.create_evaluation(7, 2)
    evaluation_store.update_status(ev.id, EvaluationStatus.PROCESSING)
    with pytest.raises(ValueError):
        evaluation_store.update_result(ev.id, {"status": "queued"})


def test_fail_stale_processing_only_touches_old_processing_rows(job_and_upload):
    old = evaluation_store.create_evaluation(7, 2)
    fresh = evaluation_store.create_evaluation(7, 2)
    queued = evaluation_store.create_evaluation(7, 2)
    evaluation_store.update_status(old.id, EvaluationStatus.PROCESSING)
    evaluation_store.update_status(fresh.id, EvaluationStatus.PROCESSING)

    now = datetime.utcnow()
    old.updated_at = now - timedelta(hours=2)
    db.session.commit()

    ids = evaluation_store.fail_stale_processing(timedelta(minutes=30), now=now)

    assert ids == [old.id]
    assert evaluation_store.get_evaluation(old.id).status == "failed"
    assert evaluation_store.get_evaluation(fresh.id).status == "processing"
    assert evaluation_store.get_evaluation(queued.id).status == "queued"
