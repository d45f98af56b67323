# activities/classifier/rules.py

import logging
from collections.abc import Mapping
from typing import Any, List, Optional, Tuple

from .constants import (
    HIGH_CONFIDENCE,
    LOW_CONFIDENCE,
    METHOD_RULES,
    ClassificationResult,
    clamp_score,
    classify_activity_score,
    classify_task_score,
)
from .detectors import (
    DEFAULT_DISTRACTION_KEYWORDS,
    DEFAULT_GOAL_KEYWORDS,
    DEFAULT_IMPACT_KEYWORDS,
    KeywordDetector,
    TextSignalDetector,
)

logger = logging.getLogger(__name__)


def _require_mapping(record: Any, kind: str) -> Mapping:
    if not isinstance(record, Mapping):
        raise TypeError(f"{kind} must be a mapping, got {type(record).__name__}")
    return record


def _as_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _confidence_for(fired: int) -> float:
    return HIGH_CONFIDENCE if fired > 2 else LOW_CONFIDENCE


class ActivityRuleScorer:
    """
    Additive point rules for free-form activity logs.

    Starts from a neutral 50 and moves the score with keyword and energy
    heuristics. Pure: no I/O, no state between calls.
    """

    BASE_SCORE = 50
    GOAL_POINTS = 30
    ENERGY_POINTS = 20
    LEVERAGE_POINTS = 20
    DISTRACTION_PENALTY = 40
    SHORT_DURATION_MINUTES = 60

    TAG_GOAL = "Advances specific goals"
    TAG_ENERGY = "Increased energy"
    TAG_LEVERAGE = "High leverage"
    TAG_DISTRACTION = "Distraction identified"

    def __init__(
        self,
        goal_detector: Optional[TextSignalDetector] = None,
        impact_detector: Optional[TextSignalDetector] = None,
        distraction_detector: Optional[TextSignalDetector] = None,
    ):
        self.goal_detector = goal_detector or KeywordDetector(DEFAULT_GOAL_KEYWORDS)
        self.impact_detector = impact_detector or KeywordDetector(DEFAULT_IMPACT_KEYWORDS)
        self.distraction_detector = distraction_detector or KeywordDetector(
            DEFAULT_DISTRACTION_KEYWORDS
        )

    def score(self, activity: Mapping) -> ClassificationResult:
        activity = _require_mapping(activity, "activity")
        description = activity.get("description") or ""

        score = self.BASE_SCORE
        reasoning: List[str] = []

        if self.goal_detector.matches(description):
            score += self.GOAL_POINTS
            reasoning.append(self.TAG_GOAL)

        if self._is_energizing(activity):
            score += self.ENERGY_POINTS
            reasoning.append(self.TAG_ENERGY)

        duration = _as_number(activity.get("duration_minutes")) or 0.0
        if duration < self.SHORT_DURATION_MINUTES and self.impact_detector.matches(description):
            score += self.LEVERAGE_POINTS
            reasoning.append(self.TAG_LEVERAGE)

        if self.distraction_detector.matches(description):
            score -= self.DISTRACTION_PENALTY
            reasoning.append(self.TAG_DISTRACTION)

        logger.debug(f"Activity rules fired: {reasoning or 'none'} (raw score {score})")
        final_score = clamp_score(score)
        return ClassificationResult(
            score=final_score,
            classification=classify_activity_score(final_score),
            confidence=_confidence_for(len(reasoning)),
            reasoning="; ".join(reasoning),
            method=METHOD_RULES,
        )

    @staticmethod
    def _is_energizing(activity: Mapping) -> bool:
        before = _as_number(activity.get("energy_before"))
        after = _as_number(activity.get("energy_after"))
        if before is None or after is None:
            return False
        return after > before


class TaskRuleScorer:
    """
    Attribute-based scoring for kanban tasks.

    Starts from 0 and rewards revenue, priority, the urgent/important pair and
    impact-to-effort leverage. Uses its own thresholds; see
    ``classify_task_score``.
    """

    REVENUE_POINTS = 40
    PRIORITY_POINTS = {"high": 30, "medium": 15}
    URGENT_IMPORTANT_POINTS = 20
    IMPORTANT_POINTS = 10
    LEVERAGE_POINTS = 10

    HIGH_LEVERAGE_ABOVE = 1.5
    LOW_LEVERAGE_BELOW = 0.5
    DEFAULT_IMPACT = 5
    DEFAULT_EFFORT = 5

    PRIORITY_ALIASES = {
        "high": "high",
        "alta": "high",
        "medium": "medium",
        "media": "medium",
        "média": "medium",
        "low": "low",
        "baixa": "low",
    }

    def score(self, task: Mapping) -> ClassificationResult:
        contributions = self.contributions(task)
        final_score = clamp_score(sum(delta for _, delta in contributions))
        logger.debug(f"Task rules fired: {len(contributions)} (score {final_score})")
        return ClassificationResult(
            score=final_score,
            classification=classify_task_score(final_score),
            confidence=_confidence_for(len(contributions)),
            reasoning="; ".join(tag for tag, _ in contributions),
            method=METHOD_RULES,
        )

    def contributions(self, task: Mapping) -> List[Tuple[str, int]]:
        """Return ``(tag, delta)`` for every rule that moved the score, in order."""
        task = _require_mapping(task, "task")
        fired: List[Tuple[str, int]] = []

        if task.get("generates_revenue"):
            fired.append((f"Generates direct revenue (+{self.REVENUE_POINTS})", self.REVENUE_POINTS))

        priority = self.normalize_priority(task.get("priority"))
        if priority in self.PRIORITY_POINTS:
            points = self.PRIORITY_POINTS[priority]
            fired.append((f"{priority.capitalize()} priority (+{points})", points))

        if task.get("urgent") and task.get("important"):
            fired.append(
                (f"Urgent and important (+{self.URGENT_IMPORTANT_POINTS})", self.URGENT_IMPORTANT_POINTS)
            )
        elif task.get("important"):
            fired.append((f"Important (+{self.IMPORTANT_POINTS})", self.IMPORTANT_POINTS))

        impact, effort = self.impact_and_effort(task)
        leverage = impact / effort
        figures = f"impact {impact:g}/effort {effort:g}"
        if leverage > self.HIGH_LEVERAGE_ABOVE:
            fired.append((f"High leverage: {figures} (+{self.LEVERAGE_POINTS})", self.LEVERAGE_POINTS))
        elif leverage < self.LOW_LEVERAGE_BELOW:
            fired.append((f"Low leverage: {figures} (-{self.LEVERAGE_POINTS})", -self.LEVERAGE_POINTS))

        return fired

    def impact_and_effort(self, task: Mapping) -> Tuple[float, float]:
        # 0 and missing both fall back to the default
        impact = _as_number(task.get("impact")) or self.DEFAULT_IMPACT
        effort = _as_number(task.get("effort")) or self.DEFAULT_EFFORT
        return impact, max(effort, 1)

    @classmethod
    def normalize_priority(cls, priority: Any) -> Optional[str]:
        if not isinstance(priority, str):
            return None
        return cls.PRIORITY_ALIASES.get(priority.strip().lower())

    def explain(self, task: Mapping, result: ClassificationResult) -> str:
        reasons = [tag for tag, _ in self.contributions(task)]
        detail = "; ".join(reasons) if reasons else "No scoring rules applied"
        return f"{result.classification.value} (Score: {result.score}): {detail}"


_default_activity_scorer = ActivityRuleScorer()
_default_task_scorer = TaskRuleScorer()


def score_activity_by_rules(activity: Mapping) -> ClassificationResult:
    return _default_activity_scorer.score(activity)


def score_task_by_rules(task: Mapping) -> ClassificationResult:
    return _default_task_scorer.score(task)


def explain_task(task: Mapping, result: ClassificationResult) -> str:
    """Display/audit text for a task's score, e.g. ``"SIGNAL (Score: 100): ..."``."""
    return _default_task_scorer.explain(task, result)
