from flask import Blueprint, current_app, jsonify, request

from ..extensions import db
from ..errors import EvaluatorError, QueuePublishError, RecordNotFound
from ..models.evaluation import EvaluationStatus
from ..models.job import Job
from ..models.upload import Upload
from ..services import evaluation_store
from ..services.submission import submit_evaluation
from ..services.uploads import create_upload

bp = Blueprint("evaluations", __name__)


def _coerce_int(val):
    if val is None or val == "":
        return None
    if isinstance(val, bool):
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        return None


@bp.errorhandler(RecordNotFound)
def _not_found(e):
    return jsonify({"error": "not found"}), 404


@bp.errorhandler(EvaluatorError)
def _internal_error(e):
    current_app.logger.error("request failed: %s", e)
    return jsonify({"error": "internal error"}), 500


@bp.post("/upload")
def upload_files():
    cv_file = request.files.get("cv_file")
    if cv_file is None:
        return jsonify({"error": "cv_file is required"}), 400
    project_file = request.files.get("project_file")
    if project_file is None:
        return jsonify({"error": "project_file is required"}), 400

    upload = create_upload(
        cv_file.read(), cv_file.filename,
        project_file.read(), project_file.filename,
        candidate_name=request.form.get("candidate_name"),
        candidate_email=request.form.get("candidate_email"),
    )
    return jsonify({
        "upload_id": upload.id,
        "message": "Files uploaded and processed successfully",
    })


@bp.post("/evaluate")
def evaluate():
    data = request.get_json(silent=True) or {}
    upload_id = _coerce_int(data.get("upload_id"))
    job_id = _coerce_int(data.get("job_id"))
    if upload_id is None or job_id is None:
        return jsonify({"error": "upload_id and job_id must be integers"}), 400

    if db.session.get(Upload, upload_id) is None:
        return jsonify({"error": "upload not found"}), 404
    if db.session.get(Job, job_id) is None:
        return jsonify({"error": "job not found"}), 404

    try:
        ev = submit_evaluation(upload_id, job_id)
    except QueuePublishError:
        return jsonify({"error": "failed to queue job"}), 500
    return jsonify({"id": ev.id, "status": ev.status})


@bp.get("/result/<int:evaluation_id>")
def get_result(evaluation_id):
    ev = evaluation_store.get_evaluation(evaluation_id)
    resp = {
        "id": ev.id,
        "status": ev.status,
        "upload_id": ev.upload_id,
        "job_id": ev.job_id,
        "created_at": ev.created_at.isoformat() if ev.created_at else None,
        "updated_at": ev.updated_at.isoformat() if ev.updated_at else None,
    }
    if ev.status == EvaluationStatus.COMPLETED:
        resp["result"] = ev.result_fields()
    return jsonify(resp)
