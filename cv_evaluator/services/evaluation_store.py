"""Evaluation record store.

Every write commits on its own; the worker relies on that so a status change
is visible to pollers before the scoring call starts.
"""

from datetime import datetime, timedelta

from flask import current_app

from ..extensions import db
from ..errors import EvaluationNotFound, InvalidStatusTransition
from ..models.evaluation import Evaluation, EvaluationStatus

RESULT_FIELDS = ("cv_match_rate", "cv_feedback", "project_score", "project_feedback",
                 "overall_summary", "result_json")


def create_evaluation(upload_id: int, job_id: int) -> Evaluation:
    ev = Evaluation(upload_id=upload_id, job_id=job_id, status=EvaluationStatus.QUEUED)
    db.session.add(ev)
    db.session.commit()
    return ev


def get_evaluation(evaluation_id: int) -> Evaluation:
    ev = db.session.get(Evaluation, evaluation_id)
    if ev is None:
        raise EvaluationNotFound(f"evaluation {evaluation_id} not found")
    return ev


def _transition(ev: Evaluation, status: str):
    if not EvaluationStatus.can_transition(ev.status, status):
        raise InvalidStatusTransition(
            f"evaluation {ev.id}: {ev.status} -> {status} is not allowed")
    ev.status = status
    ev.updated_at = datetime.utcnow()


def update_status(evaluation_id: int, status: str) -> Evaluation:
    ev = get_evaluation(evaluation_id)
    _transition(ev, status)
    db.session.commit()
    current_app.logger.info("evaluation %s -> %s", evaluation_id, status)
    return ev


def update_result(evaluation_id: int, fields: dict) -> Evaluation:
    """Persist score fields and mark the record completed in one commit."""
    unknown = set(fields) - set(RESULT_FIELDS)
    if unknown:
        raise ValueError(f"unknown result fields: {sorted(unknown)}")
    ev = get_evaluation(evaluation_id)
    _transition(ev, EvaluationStatus.COMPLETED)
    for key, value in fields.items():
        setattr(ev, key, value)
    db.session.commit()
    current_app.logger.info("evaluation %s -> completed", evaluation_id)
    return ev


def fail_stale_processing(older_than: timedelta, now: datetime = None) -> list:
    """Mark records stuck in ``processing`` since before ``now - older_than`` as failed.

    Returns the ids that were changed.
    """
    cutoff = (now or datetime.utcnow()) - older_than
    stale = (
        Evaluation.query
        .filter(Evaluation.status == EvaluationStatus.PROCESSING)
        .filter(Evaluation.updated_at < cutoff)
        .order_by(Evaluation.id)
        .all()
    )
    ids = []
    for ev in stale:
        _transition(ev, EvaluationStatus.FAILED)
        ids.append(ev.id)
    if ids:
        db.session.commit()
        current_app.logger.warning("marked %d stale processing evaluations failed: %s", len(ids), ids)
    return ids
