from flask_sqlalchemy import SQLAlchemy
from redis import Redis
from redis.exceptions import RedisError
from rq import Queue, Worker
from rq.serializers import JSONSerializer
from flask import current_app

from .errors import QueuePublishError

# dotted path so the web process never has to import the worker module
EVALUATION_JOB_FUNC = "cv_evaluator.jobs.evaluate.evaluate_job"


class EvaluationQueue:
    """Durable FIFO channel of job descriptors backed by an RQ queue on Redis.

    Messages are stored with RQ's JSON serializer, so the body of every job is
    the plain ``{"evaluation_id", "upload_id", "job_id"}`` object. RQ removes a
    job from the queue as soon as a worker picks it up; a worker that dies
    mid-job leaves it in the failed registry and it is not delivered again.
    """

    def __init__(self):
        self.redis = None
        self.queue = None
        self.job_timeout = None

    def init_app(self, app):
        timeout = app.config.get("QUEUE_PUBLISH_TIMEOUT", 5)
        self.redis = Redis.from_url(
            app.config.get("REDIS_URL"),
            socket_connect_timeout=timeout,
            socket_timeout=timeout,
        )
        self.queue = Queue(
            app.config.get("EVALUATION_QUEUE", "evaluation_queue"),
            connection=self.redis,
            serializer=JSONSerializer,
        )
        self.job_timeout = app.config.get("EVALUATION_JOB_TIMEOUT", 600)
        app.extensions["evaluation_queue"] = self

    def publish(self, descriptor):
        """Enqueue one descriptor. Broker failures surface as QueuePublishError."""
        if self.queue is None:
            raise QueuePublishError("evaluation queue is not initialised")
        try:
            job = self.queue.enqueue(
                EVALUATION_JOB_FUNC,
                descriptor.to_dict(),
                job_timeout=self.job_timeout,
                description=f"evaluation {descriptor.evaluation_id}",
            )
        except RedisError as e:
            current_app.logger.error(
                "publish failed for evaluation %s: %s", descriptor.evaluation_id, e)
            raise QueuePublishError(f"failed to queue evaluation {descriptor.evaluation_id}") from e
        current_app.logger.info(
            "queued evaluation %s as rq job %s", descriptor.evaluation_id, job.id)
        return job.id

    def subscribe(self, burst=False):
        """Run the single consumer. Jobs are handled one at a time in delivery order."""
        if self.queue is None:
            raise RuntimeError("evaluation queue is not initialised")
        worker = Worker([self.queue], connection=self.redis, serializer=JSONSerializer)
        current_app.logger.info("evaluation worker listening on %s", self.queue.name)
        return worker.work(burst=burst, logging_level="INFO")


db = SQLAlchemy()
evaluation_queue = EvaluationQueue()
