from flask import current_app

from ..extensions import db
from ..models.upload import Upload
from .extraction import extract_text


def create_upload(cv_bytes: bytes, cv_filename: str, project_bytes: bytes, project_filename: str,
                  candidate_name: str = None, candidate_email: str = None, client=None) -> Upload:
    """Extract both documents and store them as one Upload row."""
    cv_text = extract_text(cv_bytes, cv_filename, client=client)
    project_text = extract_text(project_bytes, project_filename, client=client)
    upload = Upload(
        candidate_name=candidate_name,
        candidate_email=candidate_email,
        cv_text=cv_text,
        project_text=project_text,
    )
    db.session.add(upload)
    db.session.commit()
    current_app.logger.info(
        "stored upload %s (cv %d chars, project %d chars)",
        upload.id, len(cv_text), len(project_text))
    return upload
