from ..extensions import db

class Upload(db.Model):
    __tablename__ = "uploads"

    id = db.Column(db.Integer, primary_key=True)
    candidate_name = db.Column(db.String(255))
    candidate_email = db.Column(db.String(255))
    cv_text = db.Column(db.Text, nullable=False)
    project_text = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<Upload id={self.id} candidate={self.candidate_name!r}>"
