import json
from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from rq.serializers import JSONSerializer

from cv_evaluator.errors import QueuePublishError
from cv_evaluator.extensions import EVALUATION_JOB_FUNC, EvaluationQueue, evaluation_queue
from cv_evaluator.jobs.descriptor import JobDescriptor


def test_queue_is_named_and_uses_json(app):
    assert evaluation_queue.queue.name == "evaluation_queue_test"
    assert evaluation_queue.queue.serializer is JSONSerializer


def test_publish_enqueues_descriptor_only(app):
    q = EvaluationQueue()
    q.queue = MagicMock()
    q.queue.enqueue.return_value.id = "rq-1"
    q.job_timeout = 60

    assert q.publish(JobDescriptor(42, 7, 2)) == "rq-1"

    args, kwargs = q.queue.enqueue.call_args
    assert args == (EVALUATION_JOB_FUNC, {"evaluation_id": 42, "upload_id": 7, "job_id": 2})
    assert kwargs["job_timeout"] == 60


def test_publish_wraps_broker_errors(app):
    q = EvaluationQueue()
    q.queue = MagicMock()
    q.queue.enqueue.side_effect = RedisConnectionError("connection refused")

    with pytest.raises(QueuePublishError):
        q.publish(JobDescriptor(42, 7, 2))


def test_publish_without_init_fails(app):
    with pytest.raises(QueuePublishError):
        EvaluationQueue().publish(JobDescriptor(1, 1, 1))


def test_descriptor_wire_format():
    body = json.dumps(JobDescriptor(42, 7, 2).to_dict())
    assert JobDescriptor.from_dict(body) == JobDescriptor(evaluation_id=42, upload_id=7, job_id=2)
    with pytest.raises(ValueError):
        JobDescriptor.from_dict({"evaluation_id": 42, "upload_id": 7})
    with pytest.raises(ValueError):
        JobDescriptor.from_dict({"evaluation_id": "x", "upload_id": 7, "job_id": 2})
