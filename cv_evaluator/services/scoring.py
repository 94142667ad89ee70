"""Projection of the loosely-typed scoring JSON into a ScoreResult."""

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from ..errors import InvalidScoreResult


def _number(section: str, key: str, value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise InvalidScoreResult(f"{section}.{key} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        raise InvalidScoreResult(f"{section}.{key} must be a number, got {value!r}")
    # NaN and Infinity cannot be served back as JSON
    if not math.isfinite(number):
        raise InvalidScoreResult(f"{section}.{key} must be finite, got {value!r}")
    return number


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def check_score_shape(payload: Any):
    """Raise InvalidScoreResult unless payload has ``cv`` and ``project`` objects."""
    if not isinstance(payload, dict):
        raise InvalidScoreResult(f"expected a JSON object, got {type(payload).__name__}")
    for section in ("cv", "project"):
        if not isinstance(payload.get(section), dict):
            raise InvalidScoreResult(f"missing '{section}' section")


@dataclass
class ScoreResult:
    cv_match_rate: Optional[float]
    cv_feedback: str
    project_score: Optional[float]
    project_feedback: str
    overall_summary: str
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, payload: Any) -> "ScoreResult":
        # values are stored as given: an out-of-range score is the model's answer
        check_score_shape(payload)
        cv = payload["cv"]
        project = payload["project"]
        return cls(
            cv_match_rate=_number("cv", "match_rate", cv.get("match_rate")),
            cv_feedback=_text(cv.get("feedback")),
            project_score=_number("project", "score", project.get("score")),
            project_feedback=_text(project.get("feedback")),
            overall_summary=_text(payload.get("overall_summary")),
            raw=payload,
        )

    def to_fields(self) -> Dict[str, Any]:
        return {
            "cv_match_rate": self.cv_match_rate,
            "cv_feedback": self.cv_feedback,
            "project_score": self.project_score,
            "project_feedback": self.project_feedback,
            "overall_summary": self.overall_summary,
            "result_json": self.raw,
        }
