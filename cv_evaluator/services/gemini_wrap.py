"""Thin wrapper around the Gemini ``generateContent`` HTTP API.

The REST endpoint is called directly with ``requests`` rather than through an
SDK. Both entry points walk an ordered list of models and stop at the first
one that returns something usable:

- ``evaluate`` scores a CV and a project against a job description/rubric;
- ``extract_pdf_text`` asks a model to read a PDF we could not parse locally.
"""

import base64
import json
from typing import Any, Dict, Iterable, List, Optional

import requests
from flask import current_app

from ..errors import EvaluationServiceError, EvaluatorError
from .scoring import ScoreResult

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

EXTRACTION_PROMPT = """Extract ALL text content from this PDF document. Return ONLY the raw extracted text without any additional comments, formatting, or explanations. Include:

- Personal information (name, email, phone)
- Education history
- Work experience
- Skills and technologies
- Certifications
- Projects and achievements

Return the text exactly as it appears in the document."""

EVALUATION_PROMPT = """You are an evaluator. Use the following job description and rubric to evaluate:

Job Description:
{description}

Rubric:
{rubric}

CV Input:
{cv}

Project Input:
{project}

Define at least these scoring parameters:
 CV Evaluation (Match Rate)
 Technical Skills Match (backend, databases, APIs, cloud, AI/LLM exposure).
 Experience Level (years, project complexity).
 Relevant Achievements (impact, scale).
 Cultural Fit (communication, learning attitude).
 Project Deliverable Evaluation

 Correctness (meets requirements: prompt design, chaining, RAG, handling errors).
 Code Quality (clean, modular, testable).
 Resilience (handles failures, retries).
 Documentation (clear README, explanation of trade-offs).
 Creativity / Bonus (optional improvements like authentication, deployment, dashboards).
 Each parameter can be scored 1-5, then aggregated to final score

Return strict JSON with structure:
{{
  "cv": {{
    "match_rate": float,
    "feedback": string
  }},
  "project": {{
    "score": float,
    "feedback": string
  }},
  "overall_summary": string
}}

IMPORTANT: cv match_rate is between 0-1 and project score is between 1-10 and Return ONLY the raw JSON without any markdown formatting, code blocks, or additional text."""


def format_rubric(rubric: Any) -> str:
    if rubric is None:
        return "{}"
    if isinstance(rubric, str):
        return rubric
    return json.dumps(rubric, indent=2, sort_keys=True, ensure_ascii=False)


def build_evaluation_prompt(description: str, rubric: Any, cv_text: str, project_text: str) -> str:
    return EVALUATION_PROMPT.format(
        description=description or "",
        rubric=format_rubric(rubric),
        cv=cv_text or "",
        project=project_text or "",
    )


def response_text(jr: Any) -> str:
    """Pull ``candidates[0].content.parts[0].text`` out of a generateContent response."""
    if not isinstance(jr, dict):
        raise EvaluationServiceError("response is not a JSON object")
    candidates = jr.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        raise EvaluationServiceError("no candidates in response")
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    if not isinstance(content, dict):
        raise EvaluationServiceError("invalid content format")
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts:
        raise EvaluationServiceError("no parts in content")
    text = parts[0].get("text") if isinstance(parts[0], dict) else None
    if not isinstance(text, str):
        raise EvaluationServiceError("no text in part")
    return text


def clean_json_response(content: str) -> str:
    """Drop markdown fences and keep the outermost ``{...}`` span."""
    content = content.strip()
    if content.startswith("```json"):
        content = content[len("```json"):]
    elif content.startswith("```"):
        content = content[len("```"):]
    if content.endswith("```"):
        content = content[:-len("```")]
    content = content.strip()

    start = content.find("{")
    end = content.rfind("}")
    if start != -1 and end > start:
        content = content[start:end + 1]
    return content.strip()


class GeminiClient:
    def __init__(self, api_key: Optional[str], base_url: str = DEFAULT_BASE_URL,
                 evaluation_models: Iterable[str] = (), extraction_models: Iterable[str] = (),
                 scoring_timeout: float = 30, extraction_timeout: float = 120):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.evaluation_models: List[str] = list(evaluation_models)
        self.extraction_models: List[str] = list(extraction_models)
        self.scoring_timeout = scoring_timeout
        self.extraction_timeout = extraction_timeout

    @classmethod
    def from_config(cls, config) -> "GeminiClient":
        return cls(
            api_key=config.get("GEMINI_API_KEY"),
            base_url=config.get("GEMINI_BASE_URL") or DEFAULT_BASE_URL,
            evaluation_models=config.get("GEMINI_EVALUATION_MODELS") or (),
            extraction_models=config.get("GEMINI_EXTRACTION_MODELS") or (),
            scoring_timeout=config.get("GEMINI_SCORING_TIMEOUT", 30),
            extraction_timeout=config.get("GEMINI_EXTRACTION_TIMEOUT", 120),
        )

    def generate(self, model: str, body: Dict[str, Any], timeout: float) -> str:
        """One bounded POST to one model; returns the first text part."""
        if not self.api_key:
            raise EvaluationServiceError("GEMINI_API_KEY is not configured")
        url = f"{self.base_url}/models/{model}:generateContent"
        r = requests.post(url, params={"key": self.api_key}, json=body,
                          headers={"Content-Type": "application/json"}, timeout=timeout)
        if r.status_code != 200:
            raise EvaluationServiceError(
                f"API request failed with status {r.status_code}: {(r.text or '')[:1000]}")
        return response_text(r.json())

    def attempt_evaluation(self, model: str, prompt: str) -> Dict[str, Any]:
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {"temperature": 0.1, "topP": 0.8, "topK": 40},
        }
        text = self.generate(model, body, self.scoring_timeout)
        payload = json.loads(clean_json_response(text))
        # unusable fields fail this model only
        ScoreResult.from_payload(payload)
        return payload

    def evaluate(self, description: str, rubric: Any, cv_text: str, project_text: str) -> Dict[str, Any]:
        """Score a candidate, trying each evaluation model in order until one answers."""
        prompt = build_evaluation_prompt(description, rubric, cv_text, project_text)
        last_error = None
        for model in self.evaluation_models:
            current_app.logger.info("trying model for evaluation: %s", model)
            try:
                payload = self.attempt_evaluation(model, prompt)
            except (requests.RequestException, ValueError, EvaluatorError) as e:
                last_error = e
                current_app.logger.warning("model %s failed: %s", model, e)
                continue
            current_app.logger.info("evaluation succeeded with model %s", model)
            return payload
        if last_error is None:
            raise EvaluationServiceError("no evaluation models configured")
        raise EvaluationServiceError(f"all models failed: {last_error}", last_error=last_error)

    def extract_pdf_text(self, data: bytes) -> str:
        body = {
            "contents": [{
                "parts": [
                    {"text": EXTRACTION_PROMPT},
                    {"inline_data": {
                        "mime_type": "application/pdf",
                        "data": base64.b64encode(data).decode("ascii"),
                    }},
                ],
            }],
            "generationConfig": {"temperature": 0.1, "maxOutputTokens": 8192},
        }
        last_error = None
        for model in self.extraction_models:
            current_app.logger.info("trying model for PDF extraction: %s", model)
            try:
                text = self.generate(model, body, self.extraction_timeout).strip()
            except (requests.RequestException, ValueError, EvaluatorError) as e:
                last_error = e
                current_app.logger.warning("PDF extraction with %s failed: %s", model, e)
                continue
            if text:
                current_app.logger.info(
                    "extracted %d characters from PDF with %s", len(text), model)
                return text
            last_error = EvaluationServiceError(f"{model} returned no text")
        raise EvaluationServiceError(
            f"all models failed for PDF extraction: {last_error}", last_error=last_error)


def client_from_app() -> GeminiClient:
    return GeminiClient.from_config(current_app.config)
