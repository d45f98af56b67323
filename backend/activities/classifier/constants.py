# activities/classifier/constants.py
"""
Shared scoring vocabulary for the rule and generative tiers.

Both tiers speak in the same ``ClassificationResult`` contract so callers can
persist whichever one the dispatch policy settles on.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any, Dict, Optional


class Classification(str, Enum):
    SIGNAL = "SIGNAL"
    NOISE = "NOISE"
    NEUTRAL = "NEUTRAL"


# Classification method tags
METHOD_RULES = "rules"
METHOD_AI = "ai"
METHOD_AI_WITH_GOAL = "ai_with_goal"
METHOD_MANUAL = "manual"

METHOD_CHOICES = (METHOD_RULES, METHOD_AI, METHOD_AI_WITH_GOAL, METHOD_MANUAL)

MIN_SCORE = 0
MAX_SCORE = 100

# Activity thresholds (strict on both sides)
ACTIVITY_SIGNAL_ABOVE = 70
ACTIVITY_NOISE_BELOW = 40

# Task thresholds (inclusive lower bounds)
TASK_SIGNAL_FROM = 60
TASK_NEUTRAL_FROM = 30

LOW_CONFIDENCE = 0.5
HIGH_CONFIDENCE = 0.8
GOAL_OVERRIDE_CONFIDENCE = 0.9


def clamp_score(value: float) -> int:
    """Round and clamp any numeric score into [0, 100]."""
    return int(max(MIN_SCORE, min(MAX_SCORE, round(value))))


def classify_activity_score(score: float) -> Classification:
    if score > ACTIVITY_SIGNAL_ABOVE:
        return Classification.SIGNAL
    if score < ACTIVITY_NOISE_BELOW:
        return Classification.NOISE
    return Classification.NEUTRAL


def classify_task_score(score: float) -> Classification:
    if score >= TASK_SIGNAL_FROM:
        return Classification.SIGNAL
    if score >= TASK_NEUTRAL_FROM:
        return Classification.NEUTRAL
    return Classification.NOISE


@dataclass(frozen=True)
class ClassificationResult:
    """
    Final output of any scoring path.

    Attributes:
        score: Integer in [0, 100].
        classification: Derived from ``score`` by the entity's thresholds.
        confidence: Coarse indicator in [0, 1], not a calibrated probability.
        reasoning: Human-readable trace of what drove the score.
        method: One of ``METHOD_CHOICES``.
    """

    score: int
    classification: Classification
    confidence: float
    reasoning: str
    method: str

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["classification"] = self.classification.value
        return data


@dataclass(frozen=True)
class GoalContext:
    """Goal details the caller resolves for goal-aware AI prompts."""

    title: str
    type_name: str
    id: Optional[int] = None
