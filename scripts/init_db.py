"""Create the tables and seed the default job specs (idempotent)."""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from cv_evaluator import create_app
from cv_evaluator.models.job import Job
from cv_evaluator.services.seed import init_db

app = create_app()
with app.app_context():
    added = init_db()
    print("Seeded jobs:", added)
    for job in Job.query.order_by(Job.id).all():
        print(f"  job {job.id}: {job.title}")
