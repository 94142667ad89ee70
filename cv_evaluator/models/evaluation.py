from ..extensions import db
from .base import TimestampMixin


class EvaluationStatus:
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    ALL = (QUEUED, PROCESSING, COMPLETED, FAILED)
    TERMINAL = (COMPLETED, FAILED)

    # forward-only; queued -> failed covers a submission whose publish failed
    TRANSITIONS = {
        QUEUED: (PROCESSING, FAILED),
        PROCESSING: (COMPLETED, FAILED),
        COMPLETED: (),
        FAILED: (),
    }

    @classmethod
    def can_transition(cls, current, new):
        return new in cls.TRANSITIONS.get(current, ())


class Evaluation(db.Model, TimestampMixin):
    __tablename__ = "evaluations"

    id = db.Column(db.Integer, primary_key=True)
    upload_id = db.Column(db.Integer, db.ForeignKey("uploads.id"), nullable=False)
    job_id = db.Column(db.Integer, db.ForeignKey("jobs.id"), nullable=False)
    status = db.Column(
        db.Enum(*EvaluationStatus.ALL, name="evaluation_status"),
        nullable=False,
        default=EvaluationStatus.QUEUED,
        index=True,
    )

    cv_match_rate = db.Column(db.Float)      # expected 0-1
    cv_feedback = db.Column(db.Text)
    project_score = db.Column(db.Float)      # expected 1-10
    project_feedback = db.Column(db.Text)
    overall_summary = db.Column(db.Text)
    result_json = db.Column(db.JSON, nullable=True)

    @property
    def is_terminal(self):
        return self.status in EvaluationStatus.TERMINAL

    def result_fields(self):
        return {
            "cv_match_rate": self.cv_match_rate,
            "cv_feedback": self.cv_feedback,
            "project_score": self.project_score,
            "project_feedback": self.project_feedback,
            "overall_summary": self.overall_summary,
        }

    def __repr__(self) -> str:
        return f"<Evaluation id={self.id} status={self.status}>"
