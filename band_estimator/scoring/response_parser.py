"""
Response Parser
band_estimator/scoring/response_parser.py

Extracts the score record from raw model text. Models wrap JSON in prose or
Markdown fences often enough that both are tolerated:

  1. Drop lines holding only a fence marker (```, ```json, ...); a marker
     sharing its line with content leaves that line in place
  2. Take the substring from the first "{" to the last "}"
  3. Decode it into a ParsedScore

Any failure raises ResponseParseError, which the pipeline recovers from.
"""

import json
import re

from pydantic import ValidationError

from band_estimator.core.exceptions import ResponseParseError
from band_estimator.models.score import ParsedScore


_FENCE_LINE = re.compile(r"^\s*```[\w-]*\s*$")


def strip_code_fences(raw_text: str) -> str:
    """Remove marker-only fence lines and join what is left."""
    kept = [
        line for line in raw_text.splitlines()
        if not _FENCE_LINE.match(line)
    ]
    return "\n".join(kept)


def extract_json_object(raw_text: str) -> str:
    """Substring spanning the first '{' through the last '}'."""
    start = raw_text.find("{")
    end = raw_text.rfind("}")
    if start < 0 or end <= start:
        raise ResponseParseError("No JSON object found in model response")
    return raw_text[start:end + 1]


def parse_model_response(raw_text: str) -> ParsedScore:
    """
    Decode raw model output into a ParsedScore.

    Raises:
        ResponseParseError: no object found, malformed JSON, or missing /
            mistyped required fields.
    """
    if not raw_text or not raw_text.strip():
        raise ResponseParseError("Empty model response")

    candidate = extract_json_object(strip_code_fences(raw_text))
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Malformed JSON in model response: {e}") from e

    try:
        return ParsedScore.model_validate(data)
    except ValidationError as e:
        raise ResponseParseError(
            f"Model response missing required fields: {e.error_count()} error(s)"
        ) from e
