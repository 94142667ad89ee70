from .job import Job
from .upload import Upload
from .evaluation import Evaluation, EvaluationStatus
