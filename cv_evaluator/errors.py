"""Exception hierarchy shared by the pipeline, the worker and the API."""


class EvaluatorError(Exception):
    """Base class for every error raised by cv_evaluator."""


class ExtractionError(EvaluatorError):
    """Raised when an upload cannot be turned into text at all."""


class EvaluationServiceError(EvaluatorError):
    """Raised when every Gemini model failed to produce a usable result."""

    def __init__(self, message, last_error=None):
        super().__init__(message)
        self.last_error = last_error


class InvalidScoreResult(EvaluatorError):
    """Raised when a scoring payload does not have the expected shape."""


class QueuePublishError(EvaluatorError):
    """Raised when a job descriptor could not be handed to the broker."""


class RecordNotFound(EvaluatorError):
    pass


class JobNotFound(RecordNotFound):
    pass


class UploadNotFound(RecordNotFound):
    pass


class EvaluationNotFound(RecordNotFound):
    pass


class InvalidStatusTransition(EvaluatorError):
    """Raised when an evaluation status would move backwards or leave a terminal state."""
