from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..errors import EvaluationNotFound, EvaluatorError, InvalidScoreResult, InvalidStatusTransition
from ..models.job import Job
from ..models.upload import Upload
from ..models.evaluation import EvaluationStatus
from ..services import evaluation_store
from ..services.gemini_wrap import client_from_app
from ..services.scoring import ScoreResult
from .descriptor import JobDescriptor


def _fail(evaluation_id: int, stage: str, reason):
    current_app.logger.error("evaluation %s: stage=%s failed: %s", evaluation_id, stage, reason)
    evaluation_store.update_status(evaluation_id, EvaluationStatus.FAILED)
    return EvaluationStatus.FAILED


def run_evaluation(descriptor: JobDescriptor, client=None) -> str:
    """Drive one evaluation from queued to a terminal state.

    Returns the final status, or None when the record was missing or not queued.
    """
    ev_id = descriptor.evaluation_id
    current_app.logger.info(
        "evaluation %s: processing upload=%s job=%s", ev_id, descriptor.upload_id, descriptor.job_id)
    try:
        evaluation_store.update_status(ev_id, EvaluationStatus.PROCESSING)
    except (EvaluationNotFound, InvalidStatusTransition) as e:
        # redelivered or unknown record; never touch a finished evaluation again
        current_app.logger.warning("evaluation %s: skipped: %s", ev_id, e)
        return None

    try:
        job = db.session.get(Job, descriptor.job_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        return _fail(ev_id, "load_job", e)
    if job is None:
        return _fail(ev_id, "load_job", f"job {descriptor.job_id} not found")

    try:
        upload = db.session.get(Upload, descriptor.upload_id)
    except SQLAlchemyError as e:
        db.session.rollback()
        return _fail(ev_id, "load_upload", e)
    if upload is None:
        return _fail(ev_id, "load_upload", f"upload {descriptor.upload_id} not found")

    current_app.logger.debug(
        "evaluation %s: cv %d chars, project %d chars",
        ev_id, len(upload.cv_text or ""), len(upload.project_text or ""))

    client = client or client_from_app()
    try:
        payload = client.evaluate(job.description, job.rubric, upload.cv_text, upload.project_text)
    except EvaluatorError as e:
        return _fail(ev_id, "score", e)

    try:
        result = ScoreResult.from_payload(payload)
    except InvalidScoreResult as e:
        return _fail(ev_id, "validate", e)

    evaluation_store.update_result(ev_id, result.to_fields())
    current_app.logger.info(
        "evaluation %s: completed match_rate=%s project_score=%s",
        ev_id, result.cv_match_rate, result.project_score)
    return EvaluationStatus.COMPLETED


def _handle(payload):
    try:
        descriptor = JobDescriptor.from_dict(payload)
    except ValueError as e:
        current_app.logger.error("invalid job format, dropping message: %s", e)
        return None
    return run_evaluation(descriptor)


def evaluate_job(payload):
    """RQ entrypoint; runs inside a Flask app context, creating one if needed."""
    if has_app_context():
        return _handle(payload)
    from cv_evaluator import create_app
    app = create_app()
    with app.app_context():
        return _handle(payload)
