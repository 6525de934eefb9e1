"""
Language-model gateway and response parsing.

``chat`` is the single place that talks to the model API. The typed
helpers below it build the prompt, call the model, and validate the JSON
reply against the pydantic schemas, so callers get a model object or an
``InvalidAIResponseError``, never a half-filled dict.
"""

import json
import logging
import re
import time
from typing import Any, TypeVar

from ollama import Client, ResponseError
from pydantic import BaseModel, ValidationError

from .config import (
    OLLAMA_HOST, OLLAMA_MODEL, OLLAMA_API_KEY,
    LLM_MAX_TOKENS, LLM_TOP_P, LLM_RATE_LIMIT_RETRIES, LLM_BACKOFF_SECONDS,
)
from .errors import InvalidAIResponseError, LLMServiceError
from .models import CategorySet, Ranking, Recalibration, Role
from .prompts import (
    candidate_ranking_messages, category_suggestion_messages, recalibration_messages,
)
from .utils import log_performance_metrics

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

DEFAULT_TEMPERATURE = 0.7
SCORING_TEMPERATURE = 0.5
RATE_LIMIT_STATUS = 429

# ── Ollama client ───────────────────────────────────────────────────────────
_headers = {"Authorization": f"Bearer {OLLAMA_API_KEY}"} if OLLAMA_API_KEY else {}
client = Client(host=OLLAMA_HOST, headers=_headers)

_FENCE_RE = re.compile(r"```(?:json)?\n?")


# ── Gateway ─────────────────────────────────────────────────────────────────

def chat(messages: list[dict[str, str]], temperature: float = DEFAULT_TEMPERATURE) -> str:
    """Send one chat request and return the reply text.

    Rate-limit responses are retried with exponential backoff; every other
    failure is raised as ``LLMServiceError`` straight away.
    """
    options = {
        "temperature": temperature,
        "num_predict": LLM_MAX_TOKENS,
        "top_p": LLM_TOP_P,
        "frequency_penalty": 0,
        "presence_penalty": 0,
    }

    start = time.time()
    attempt = 0
    while True:
        try:
            response = client.chat(model=OLLAMA_MODEL, messages=messages, options=options)
            content = response["message"]["content"] or ""
            log_performance_metrics("LLM call", time.time() - start)
            return content

        except ResponseError as e:
            if e.status_code == RATE_LIMIT_STATUS and attempt < LLM_RATE_LIMIT_RETRIES:
                delay = LLM_BACKOFF_SECONDS * (2 ** attempt)
                attempt += 1
                logger.warning(
                    "LLM rate limited, retry %d/%d in %.1fs",
                    attempt, LLM_RATE_LIMIT_RETRIES, delay,
                )
                time.sleep(delay)
                continue
            log_performance_metrics("LLM call", time.time() - start, success=False)
            logger.error("LLM API error (%s): %s", e.status_code, e.error)
            raise LLMServiceError("Failed to call language model API") from e

        except Exception as e:
            log_performance_metrics("LLM call", time.time() - start, success=False)
            logger.error("LLM API error: %s", e)
            raise LLMServiceError("Failed to call language model API") from e


# ── Response normalization ──────────────────────────────────────────────────

def strip_code_fences(raw: str) -> str:
    """Remove ```json / ``` markers the model sometimes wraps its JSON in."""
    return _FENCE_RE.sub("", raw).strip()


def parse_json_response(raw: str) -> Any:
    """Parse a model reply as JSON, tolerating Markdown code fences."""
    try:
        return json.loads(strip_code_fences(raw or ""))
    except json.JSONDecodeError as e:
        logger.error("Failed to parse AI response: %r", raw)
        raise InvalidAIResponseError("Invalid AI response format") from e


def parse_model_response(raw: str, model: type[ModelT]) -> ModelT:
    """Parse a model reply and validate it against ``model``."""
    data = parse_json_response(raw)
    try:
        return model.model_validate(data)
    except ValidationError as e:
        logger.error("AI response does not match %s: %s\n%r", model.__name__, e, raw)
        raise InvalidAIResponseError("Invalid AI response format") from e


# ── Typed calls ─────────────────────────────────────────────────────────────

def suggest_categories(title: str, description: str, required_skills: str = "") -> CategorySet:
    """Ask the model for a weighted evaluation framework for a role."""
    messages = category_suggestion_messages(title, description, required_skills)
    return parse_model_response(chat(messages), CategorySet)


def rank_candidate(role: Role, cv_text: str) -> Ranking:
    """Score one CV against the role's categories."""
    messages = candidate_ranking_messages(role, cv_text)
    ranking = parse_model_response(chat(messages, SCORING_TEMPERATURE), Ranking)
    logger.info("Parsed ranking, score %s/100", ranking.overall_score)
    return ranking


def recalibrate(ranking: Ranking, notes: str) -> Recalibration:
    """Re-assess a ranked candidate in the light of interview notes."""
    messages = recalibration_messages(ranking, notes)
    return parse_model_response(chat(messages, SCORING_TEMPERATURE), Recalibration)
