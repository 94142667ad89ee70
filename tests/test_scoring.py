import pytest

from conftest import SCORE_PAYLOAD

from cv_evaluator.errors import InvalidScoreResult
from cv_evaluator.services.scoring import ScoreResult


def test_projection_keeps_values_and_raw_payload():
    result = ScoreResult.from_payload(SCORE_PAYLOAD)
    assert result.cv_match_rate == 0.82
    assert result.project_score == 8.5
    assert result.overall_summary == "Solid candidate"
    assert result.to_fields()["result_json"] is SCORE_PAYLOAD


@pytest.mark.parametrize("payload", [
    [],
    {"cv": "0.8", "project": {"score": 5}},
    {"cv": {"match_rate": 0.8}},
    {"cv": {"match_rate": "high"}, "project": {"score": 5}},
    {"cv": {"match_rate": True}, "project": {"score": 5}},
    {"cv": {"match_rate": float("nan")}, "project": {"score": 5}},
    {"cv": {"match_rate": 0.5}, "project": {"score": "Infinity"}},
])
def test_bad_shapes_are_rejected(payload):
    with pytest.raises(InvalidScoreResult):
        ScoreResult.from_payload(payload)


def test_numeric_strings_and_missing_values():
    result = ScoreResult.from_payload({"cv": {"match_rate": "0.7"}, "project": {}})
    assert result.cv_match_rate == 0.7
    assert result.project_score is None
    assert result.cv_feedback == ""
    assert result.overall_summary == ""
