from flask import current_app

from ..errors import QueuePublishError
from ..extensions import evaluation_queue
from ..jobs.descriptor import JobDescriptor
from ..models.evaluation import EvaluationStatus
from . import evaluation_store


def submit_evaluation(upload_id: int, job_id: int, queue=None):
    """Create a queued Evaluation and publish its descriptor.

    If publishing fails the record is marked failed before the error is
    re-raised, so it never sits in ``queued`` with nothing on the queue.
    """
    queue = queue or evaluation_queue
    ev = evaluation_store.create_evaluation(upload_id, job_id)
    descriptor = JobDescriptor(evaluation_id=ev.id, upload_id=upload_id, job_id=job_id)
    try:
        queue.publish(descriptor)
    except QueuePublishError:
        current_app.logger.error("evaluation %s: stage=publish failed, marking failed", ev.id)
        evaluation_store.update_status(ev.id, EvaluationStatus.FAILED)
        raise
    return ev
