import json
from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class JobDescriptor:
    """What travels on the queue: ids only, the worker re-reads the texts."""

    evaluation_id: int
    upload_id: int
    job_id: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> "JobDescriptor":
        if isinstance(data, (str, bytes)):
            data = json.loads(data)
        if not isinstance(data, dict):
            raise ValueError(f"job descriptor must be an object, got {type(data).__name__}")
        try:
            return cls(
                evaluation_id=int(data["evaluation_id"]),
                upload_id=int(data["upload_id"]),
                job_id=int(data["job_id"]),
            )
        except KeyError as e:
            raise ValueError(f"job descriptor is missing {e.args[0]}")
        except (TypeError, ValueError) as e:
            raise ValueError(f"job descriptor has a non-integer id: {e}")
