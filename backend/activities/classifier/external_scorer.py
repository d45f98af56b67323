# activities/classifier/external_scorer.py
"""
Generative Classifier
=====================

Asks a generative text model to score an activity from 0 to 100 and explain
why. This module has NO Django ORM dependencies: the caller supplies the
activity mapping and, optionally, a resolved ``GoalContext``.

Contract:
---------
``classify_with_ai`` returns ``{"score": int, "reasoning": str}`` on success
and ``None`` on ANY failure. It never derives a classification; the dispatch
policy applies thresholds to the returned score.

Error Codes (logged, never raised):
-----------------------------------
- SCORER_NOT_CONFIGURED: no API key / client
- AUTH_ERROR, RATE_LIMIT, TIMEOUT, CONNECTION_ERROR, BAD_REQUEST, API_ERROR_<status>
- EMPTY_RESPONSE: model replied with nothing
- JSON_PARSE_ERROR: the extracted object did not parse
- VALIDATION_ERROR: no object found, or ``score`` missing or not a finite number
- UNEXPECTED_ERROR: anything else raised by the client
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, Optional

from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AuthenticationError,
    BadRequestError,
    RateLimitError,
)

from .constants import GoalContext, clamp_score
from .generative import (
    ClientNotConfiguredError,
    ScorerUnavailableError,
    extract_json_object,
)

logger = logging.getLogger(__name__)


class GenerativeClassifier:
    """
    Builds the scoring prompt, calls the text client and parses its reply.

    Args:
        client: Any object exposing ``generate(prompt: str) -> str``.
    """

    def __init__(self, client: Any):
        self.client = client

    @property
    def is_configured(self) -> bool:
        return bool(getattr(self.client, "is_configured", True))

    def classify_with_ai(
        self,
        activity: Mapping,
        goal_context: Optional[GoalContext] = None,
    ) -> Optional[Dict[str, Any]]:
        if not isinstance(activity, Mapping):
            raise TypeError(f"activity must be a mapping, got {type(activity).__name__}")

        prompt = self.build_prompt(activity, goal_context)
        description = activity.get("description") or ""

        try:
            raw_content = self.client.generate(prompt)
            logger.debug(f"GenerativeClassifier: Raw response: {str(raw_content)[:200]}...")

            result = self._parse_response(raw_content)

            logger.info(
                f"GenerativeClassifier: Scored '{description[:60]}' "
                f"(score={result['score']}, goal={'yes' if goal_context else 'no'})"
            )
            return result

        except ClientNotConfiguredError as e:
            return self._fail("SCORER_NOT_CONFIGURED", e, level=logging.WARNING)
        except AuthenticationError as e:
            return self._fail("AUTH_ERROR", e)
        except RateLimitError as e:
            return self._fail("RATE_LIMIT", e, level=logging.WARNING)
        except APITimeoutError as e:
            return self._fail("TIMEOUT", e, level=logging.WARNING)
        except APIConnectionError as e:
            return self._fail("CONNECTION_ERROR", e)
        except BadRequestError as e:
            return self._fail("BAD_REQUEST", e)
        except APIStatusError as e:
            return self._fail(f"API_ERROR_{e.status_code}", e)
        except ScorerUnavailableError as e:
            return self._fail("EMPTY_RESPONSE", e, level=logging.WARNING)
        except json.JSONDecodeError as e:
            return self._fail("JSON_PARSE_ERROR", e)
        except ValueError as e:
            return self._fail("VALIDATION_ERROR", e)
        except Exception as e:
            logger.exception(f"GenerativeClassifier failed [UNEXPECTED_ERROR]: {e}")
            return None

    def build_prompt(
        self,
        activity: Mapping,
        goal_context: Optional[GoalContext] = None,
    ) -> str:
        """
        Compose the scoring prompt.

        With a goal context the model is told to judge the activity mainly by
        whether it moves that specific goal forward.
        """
        goal_info = ""
        goal_emphasis = ""
        if goal_context is not None:
            goal_info = (
                f'\nRELATED GOAL: "{goal_context.title}" ({goal_context.type_name})\n'
                "ANALYSIS: Evaluate whether the activity directly contributes to this specific goal."
            )
            goal_emphasis = (
                "\nIMPORTANT: There is a related goal. Weight your score mainly on whether "
                "the activity contributes to that goal.\n"
            )

        return (
            "Classify the activity as SIGNAL (advances goals) or NOISE (distraction).\n\n"
            f'Activity: "{activity.get("description") or ""}"\n'
            f"Duration: {activity.get('duration_minutes') or 0}min\n"
            f"Energy: {activity.get('energy_before')} -> {activity.get('energy_after')}"
            f"{goal_info}\n\n"
            "CRITERIA:\n"
            "- SIGNAL (71-100): Directly contributes to goals or personal/professional growth\n"
            "- NEUTRAL (40-70): Necessary but not productive (maintenance, admin chores)\n"
            "- NOISE (0-39): Distraction, procrastination or counterproductive activity\n"
            f"{goal_emphasis}\n"
            'Respond ONLY with JSON: {"score": 0-100, "reasoning": "short explanation '
            'focused on the relation to goals"}'
        )

    def _parse_response(self, raw_content: str) -> Dict[str, Any]:
        """
        Extract and validate the ``{"score", "reasoning"}`` object.

        Raises:
            json.JSONDecodeError: The extracted span is not valid JSON.
            ValueError: No object, not an object, or unusable ``score``.
        """
        data = json.loads(extract_json_object(raw_content))

        if not isinstance(data, dict):
            raise ValueError("AI response JSON is not an object")
        if "score" not in data:
            raise ValueError("Missing 'score' in AI response")

        raw_score = data["score"]
        if isinstance(raw_score, bool):
            raise ValueError("Non-numeric 'score' in AI response")
        try:
            score = float(raw_score)
        except (TypeError, ValueError):
            raise ValueError(f"Non-numeric 'score' in AI response: {raw_score!r}")
        if not math.isfinite(score):
            raise ValueError(f"Non-finite 'score' in AI response: {raw_score!r}")

        reasoning = data.get("reasoning") or ""
        return {
            "score": clamp_score(score),
            "reasoning": str(reasoning),
        }

    def _fail(self, error_code: str, error: Exception, level: int = logging.ERROR) -> None:
        logger.log(level, f"GenerativeClassifier failed [{error_code}]: {error}")
        return None

    def health_check(self) -> Dict[str, Any]:
        check = getattr(self.client, "health_check", None)
        return check() if callable(check) else {"is_configured": self.is_configured}
