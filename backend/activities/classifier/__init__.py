# activities/classifier/__init__.py
"""
Signal/Noise Classifier Package
===============================

Scores activities and kanban tasks as SIGNAL (advances goals), NOISE
(distraction) or NEUTRAL. Storage-agnostic: callers pass plain mappings and
persist the returned ``ClassificationResult`` themselves.

Modules:
--------
- constants: result contract, classification thresholds, method tags
- detectors: pluggable text detectors (keyword matching today)
- rules: deterministic activity and task rule scorers
- generative: OpenAI text client and JSON-from-free-text extraction
- external_scorer: prompt building and parsing for the generative tier
- orchestrator: dispatch policy between the two tiers
- efficiency: efficiency points, rankings and opportunity cost

Dispatch:
---------
    RULES_EVALUATED -> AI_SKIPPED                          -> final
                    -> AI_ATTEMPTED -> AI_MERGED           -> final
                                    -> AI_FAILED_FALLBACK  -> final

Classification Methods:
-----------------------
- "rules": rule tier only (AI skipped or failed)
- "ai": generative tier, no goal context
- "ai_with_goal": generative tier with a goal context
- "manual": set by a user, never produced here

Usage:
------
    from activities.classifier import get_orchestrator

    result = get_orchestrator().classify(
        {"description": "Draft launch plan for Q3 goal", "duration_minutes": 45,
         "energy_before": 5, "energy_after": 7},
    )
"""

from .constants import (
    METHOD_AI,
    METHOD_AI_WITH_GOAL,
    METHOD_MANUAL,
    METHOD_RULES,
    Classification,
    ClassificationResult,
    GoalContext,
)
from .detectors import KeywordDetector, TextSignalDetector
from .external_scorer import GenerativeClassifier
from .generative import OpenAITextClient, extract_json_object
from .orchestrator import SignalOrchestrator, get_orchestrator
from .rules import (
    ActivityRuleScorer,
    TaskRuleScorer,
    explain_task,
    score_activity_by_rules,
    score_task_by_rules,
)

__all__ = [
    # Core classes
    "SignalOrchestrator",
    "GenerativeClassifier",
    "OpenAITextClient",
    "ActivityRuleScorer",
    "TaskRuleScorer",
    "KeywordDetector",
    "TextSignalDetector",
    # Contract
    "Classification",
    "ClassificationResult",
    "GoalContext",
    # Functions
    "get_orchestrator",
    "score_activity_by_rules",
    "score_task_by_rules",
    "explain_task",
    "extract_json_object",
    # Constants
    "METHOD_RULES",
    "METHOD_AI",
    "METHOD_AI_WITH_GOAL",
    "METHOD_MANUAL",
]
