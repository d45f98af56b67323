# activities/classifier/orchestrator.py

import logging
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional

from .constants import (
    GOAL_OVERRIDE_CONFIDENCE,
    HIGH_CONFIDENCE,
    METHOD_AI,
    METHOD_AI_WITH_GOAL,
    ClassificationResult,
    GoalContext,
    classify_activity_score,
    classify_task_score,
)
from .detectors import KeywordDetector
from .external_scorer import GenerativeClassifier
from .generative import OpenAITextClient
from .rules import ActivityRuleScorer, TaskRuleScorer

# Configure logging for pipeline auditing
logger = logging.getLogger(__name__)

# Dispatch states, logged per request
STATE_RULES_EVALUATED = "RULES_EVALUATED"
STATE_AI_SKIPPED = "AI_SKIPPED"
STATE_AI_ATTEMPTED = "AI_ATTEMPTED"
STATE_AI_MERGED = "AI_MERGED"
STATE_AI_FAILED_FALLBACK = "AI_FAILED_FALLBACK"

# How a kanban task is presented to the generative tier
TASK_AS_ACTIVITY_MINUTES = 60
TASK_AS_ACTIVITY_ENERGY = 5


class SignalOrchestrator:
    """
    The dispatch policy between the rule tier and the generative tier.

    Rules always run first and are always the fallback. The generative tier
    is consulted when rule confidence is below 0.8 or a goal context is
    supplied; a single failure falls straight back to the rule result.
    """

    def __init__(
        self,
        ai_service: Optional[GenerativeClassifier] = None,
        activity_scorer: Optional[ActivityRuleScorer] = None,
        task_scorer: Optional[TaskRuleScorer] = None,
    ):
        self.ai_service = ai_service
        self.activity_scorer = activity_scorer or ActivityRuleScorer()
        self.task_scorer = task_scorer or TaskRuleScorer()

    # ------------------------------------------------------------------
    # Individual tiers
    # ------------------------------------------------------------------

    def score_activity_by_rules(self, activity: Mapping) -> ClassificationResult:
        return self.activity_scorer.score(activity)

    def score_task_by_rules(self, task: Mapping) -> ClassificationResult:
        return self.task_scorer.score(task)

    def explain_task(self, task: Mapping, result: ClassificationResult) -> str:
        return self.task_scorer.explain(task, result)

    def classify_with_ai(
        self, activity: Mapping, goal_context: Optional[GoalContext] = None
    ) -> Optional[Dict[str, Any]]:
        if self.ai_service is None:
            logger.debug("Orchestrator: no generative tier wired")
            return None
        return self.ai_service.classify_with_ai(activity, goal_context)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def classify(
        self, activity: Mapping, goal_context: Optional[GoalContext] = None
    ) -> ClassificationResult:
        """Full classification of one activity; never fails for well-formed input."""
        rule_result = self.score_activity_by_rules(activity)
        logger.debug(
            f"Orchestrator: {STATE_RULES_EVALUATED} score={rule_result.score} "
            f"confidence={rule_result.confidence}"
        )

        low_confidence = rule_result.confidence < HIGH_CONFIDENCE
        if not low_confidence and goal_context is None:
            logger.debug(f"Orchestrator: {STATE_AI_SKIPPED}")
            return rule_result

        logger.debug(f"Orchestrator: {STATE_AI_ATTEMPTED} goal={goal_context is not None}")
        ai_result = self.classify_with_ai(activity, goal_context)
        if ai_result is None:
            logger.info(f"Orchestrator: {STATE_AI_FAILED_FALLBACK}, keeping rule result")
            return rule_result

        if low_confidence:
            confidence = max(rule_result.confidence, HIGH_CONFIDENCE)
            method = METHOD_AI_WITH_GOAL if goal_context is not None else METHOD_AI
        else:
            confidence = GOAL_OVERRIDE_CONFIDENCE
            method = METHOD_AI_WITH_GOAL

        logger.debug(f"Orchestrator: {STATE_AI_MERGED} method={method}")
        return ClassificationResult(
            score=ai_result["score"],
            classification=classify_activity_score(ai_result["score"]),
            confidence=confidence,
            reasoning=ai_result["reasoning"],
            method=method,
        )

    def classify_task(
        self,
        task: Mapping,
        goal_context: Optional[GoalContext] = None,
        use_ai: bool = False,
    ) -> ClassificationResult:
        """
        Classify a kanban task, optionally asking the generative tier.

        The AI score is read with the task thresholds; on AI failure the rule
        result comes back unchanged.
        """
        rule_result = self.score_task_by_rules(task)
        explained = ClassificationResult(
            score=rule_result.score,
            classification=rule_result.classification,
            confidence=rule_result.confidence,
            reasoning=self.explain_task(task, rule_result),
            method=rule_result.method,
        )
        if not use_ai:
            return explained

        title = task.get("title") or ""
        details = task.get("description") or ""
        as_activity = {
            "description": f"{title}: {details}",
            "duration_minutes": TASK_AS_ACTIVITY_MINUTES,
            "energy_before": TASK_AS_ACTIVITY_ENERGY,
            "energy_after": TASK_AS_ACTIVITY_ENERGY,
            "impact": task.get("impact"),
            "effort": task.get("effort"),
        }
        ai_result = self.classify_with_ai(as_activity, goal_context)
        if ai_result is None:
            logger.info(f"Orchestrator: task '{title}' {STATE_AI_FAILED_FALLBACK}")
            return explained

        return ClassificationResult(
            score=ai_result["score"],
            classification=classify_task_score(ai_result["score"]),
            confidence=max(rule_result.confidence, HIGH_CONFIDENCE),
            reasoning=ai_result["reasoning"] or "Classified by AI",
            method=METHOD_AI_WITH_GOAL if goal_context is not None else METHOD_AI,
        )

    def health_check(self) -> Dict[str, Any]:
        return {
            "orchestrator": "healthy",
            "rules_engine": "healthy",
            "ai_available": self.ai_service is not None and self.ai_service.is_configured,
            "ai_service": self.ai_service.health_check() if self.ai_service else None,
        }


@lru_cache(maxsize=1)
def get_orchestrator() -> SignalOrchestrator:
    """
    Composition root: one OpenAI-backed orchestrator per process.

    Reads keyword lists and AI settings from Django settings. Tests build
    their own ``SignalOrchestrator`` with a fake client instead.
    """
    from django.conf import settings

    client = OpenAITextClient(
        model=getattr(settings, "SIGNAL_AI_MODEL", None),
        timeout=getattr(settings, "SIGNAL_AI_TIMEOUT", None),
    )
    activity_scorer = ActivityRuleScorer(
        goal_detector=_detector_from_settings(settings, "SIGNAL_GOAL_KEYWORDS"),
        impact_detector=_detector_from_settings(settings, "SIGNAL_IMPACT_KEYWORDS"),
        distraction_detector=_detector_from_settings(settings, "SIGNAL_DISTRACTION_KEYWORDS"),
    )
    logger.info(f"Orchestrator built (ai_configured={client.is_configured})")
    return SignalOrchestrator(
        ai_service=GenerativeClassifier(client),
        activity_scorer=activity_scorer,
    )


def _detector_from_settings(settings, name: str) -> Optional[KeywordDetector]:
    keywords = getattr(settings, name, None)
    return KeywordDetector(keywords) if keywords else None
