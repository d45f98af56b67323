# activities/tests/test_rules.py
"""
Rule Scorer Unit Tests
======================

Covers both deterministic variants:
1. Activity rules (base 50, keyword and energy heuristics, >70 / <40 thresholds)
2. Task rules (base 0, revenue/priority/urgency/leverage, >=60 / >=30 thresholds)
3. Task explanations

Everything here is pure: no database, no network.
"""

from __future__ import annotations

import itertools

from django.test import SimpleTestCase

from activities.classifier.constants import (
    METHOD_RULES,
    Classification,
    classify_activity_score,
    classify_task_score,
)
from activities.classifier.detectors import KeywordDetector, TextSignalDetector
from activities.classifier.rules import (
    ActivityRuleScorer,
    TaskRuleScorer,
    explain_task,
    score_activity_by_rules,
    score_task_by_rules,
)


def make_activity(description="", duration=30, before=5, after=5, **extra):
    activity = {
        "description": description,
        "duration_minutes": duration,
        "energy_before": before,
        "energy_after": after,
    }
    activity.update(extra)
    return activity


# ===========================================================================
# ACTIVITY VARIANT
# ===========================================================================


class TestActivityRuleScorer(SimpleTestCase):

    def test_neutral_baseline(self) -> None:
        """No keyword, flat energy, empty description -> 50 / NEUTRAL / 0.5 / ''."""
        result = score_activity_by_rules(make_activity())

        self.assertEqual(result.score, 50)
        self.assertEqual(result.classification, Classification.NEUTRAL)
        self.assertEqual(result.confidence, 0.5)
        self.assertEqual(result.reasoning, "")
        self.assertEqual(result.method, METHOD_RULES)

    def test_distraction_offsets_goal_to_boundary(self) -> None:
        """50 + 30 - 40 = 40, which is NOT below 40."""
        result = score_activity_by_rules(
            make_activity("watching youtube for research, advances goal")
        )

        self.assertEqual(result.score, 40)
        self.assertEqual(result.classification, Classification.NEUTRAL)
        self.assertEqual(result.reasoning, "Advances specific goals; Distraction identified")
        self.assertEqual(result.confidence, 0.5)

    def test_all_positive_rules_clamp_to_hundred(self) -> None:
        result = score_activity_by_rules(
            make_activity("Ship the goal feature with big impact", duration=30, before=4, after=8)
        )

        self.assertEqual(result.score, 100)
        self.assertEqual(result.classification, Classification.SIGNAL)
        self.assertEqual(result.confidence, 0.8)
        self.assertEqual(
            result.reasoning, "Advances specific goals; Increased energy; High leverage"
        )

    def test_known_distraction_is_noise(self) -> None:
        result = score_activity_by_rules(
            make_activity("Scrolling Instagram", duration=90, before=6, after=4)
        )

        self.assertEqual(result.score, 10)
        self.assertEqual(result.classification, Classification.NOISE)

    def test_keyword_matching_is_case_insensitive(self) -> None:
        result = score_activity_by_rules(make_activity("NETFLIX binge"))

        self.assertEqual(result.score, 10)

    def test_high_impact_needs_short_duration(self) -> None:
        long_session = score_activity_by_rules(make_activity("high impact review", duration=90))
        short_session = score_activity_by_rules(make_activity("high impact review", duration=45))

        self.assertEqual(long_session.score, 50)
        self.assertEqual(short_session.score, 70)
        self.assertEqual(short_session.reasoning, "High leverage")

    def test_exactly_sixty_minutes_is_not_short(self) -> None:
        result = score_activity_by_rules(make_activity("impact work", duration=60))

        self.assertEqual(result.score, 50)

    def test_missing_description_only_energy_rule_can_fire(self) -> None:
        """Energy alone gives 70, which is NOT above 70."""
        result = score_activity_by_rules({"energy_before": 3, "energy_after": 6})

        self.assertEqual(result.score, 70)
        self.assertEqual(result.classification, Classification.NEUTRAL)
        self.assertEqual(result.reasoning, "Increased energy")

    def test_missing_energy_does_not_fire_energy_rule(self) -> None:
        result = score_activity_by_rules({"description": "errands", "energy_after": 9})

        self.assertEqual(result.score, 50)

    def test_two_rules_keep_low_confidence(self) -> None:
        result = score_activity_by_rules(make_activity("Work on goal", before=5, after=6))

        self.assertEqual(result.score, 100)
        self.assertEqual(result.confidence, 0.5)

    def test_non_mapping_input_raises(self) -> None:
        with self.assertRaises(TypeError):
            score_activity_by_rules("just a string")

        with self.assertRaises(TypeError):
            score_activity_by_rules(None)

    def test_rule_scorer_is_idempotent(self) -> None:
        activity = make_activity("goal impact sprint", duration=20, before=3, after=7)

        self.assertEqual(score_activity_by_rules(activity), score_activity_by_rules(activity))

    def test_custom_detectors_replace_keyword_lists(self) -> None:
        scorer = ActivityRuleScorer(
            goal_detector=KeywordDetector(["thesis"]),
            distraction_detector=KeywordDetector(["reddit"]),
        )

        self.assertEqual(scorer.score(make_activity("thesis chapter")).score, 80)
        self.assertEqual(scorer.score(make_activity("reddit")).score, 10)
        self.assertEqual(scorer.score(make_activity("youtube")).score, 50)

    def test_detector_base_cannot_be_instantiated(self) -> None:
        with self.assertRaises(TypeError):
            TextSignalDetector()

    def test_custom_detector_plugs_into_scorer(self) -> None:
        class LongTextDetector(TextSignalDetector):
            def matches(self, text):
                return len(text or "") > 20

        scorer = ActivityRuleScorer(goal_detector=LongTextDetector())

        self.assertEqual(scorer.score(make_activity("a fairly long description here")).score, 80)
        self.assertEqual(scorer.score(make_activity("short")).score, 50)

    def test_score_always_within_bounds_and_thresholds_hold(self) -> None:
        descriptions = [
            "",
            "goal",
            "impact",
            "youtube",
            "goal impact",
            "goal impact youtube netflix",
            "twitter impact",
        ]
        durations = [0, 30, 59, 60, 240]
        energies = [(1, 10), (5, 5), (10, 1)]

        for description, duration, (before, after) in itertools.product(
            descriptions, durations, energies
        ):
            result = score_activity_by_rules(make_activity(description, duration, before, after))
            self.assertGreaterEqual(result.score, 0)
            self.assertLessEqual(result.score, 100)
            self.assertEqual(result.classification, classify_activity_score(result.score))


# ===========================================================================
# TASK VARIANT
# ===========================================================================


def make_task(**fields):
    task = {
        "generates_revenue": False,
        "priority": "low",
        "urgent": False,
        "important": False,
        "impact": 5,
        "effort": 5,
    }
    task.update(fields)
    return task


class TestTaskRuleScorer(SimpleTestCase):

    def test_revenue_high_priority_urgent_important_high_leverage(self) -> None:
        """40 + 30 + 20 + 10 = 100 -> SIGNAL."""
        for priority in ("high", "alta"):
            result = score_task_by_rules(
                make_task(
                    generates_revenue=True,
                    priority=priority,
                    urgent=True,
                    important=True,
                    impact=8,
                    effort=2,
                )
            )
            self.assertEqual(result.score, 100)
            self.assertEqual(result.classification, Classification.SIGNAL)
            self.assertEqual(result.confidence, 0.8)
            self.assertEqual(result.method, METHOD_RULES)

    def test_empty_task_scores_zero(self) -> None:
        result = score_task_by_rules({})

        self.assertEqual(result.score, 0)
        self.assertEqual(result.classification, Classification.NOISE)
        self.assertEqual(result.confidence, 0.5)
        self.assertEqual(result.reasoning, "")

    def test_medium_priority_and_important(self) -> None:
        result = score_task_by_rules(make_task(priority="medium", important=True))

        self.assertEqual(result.score, 25)
        self.assertEqual(result.classification, Classification.NOISE)

    def test_medium_alias_with_accent(self) -> None:
        result = score_task_by_rules(make_task(priority="média"))

        self.assertEqual(result.score, 15)

    def test_high_leverage_pushes_into_neutral(self) -> None:
        result = score_task_by_rules(
            make_task(priority="medium", important=True, impact=9, effort=3)
        )

        self.assertEqual(result.score, 35)
        self.assertEqual(result.classification, Classification.NEUTRAL)

    def test_low_leverage_penalty_boundary_signal(self) -> None:
        """40 + 30 - 10 = 60, which IS a signal for tasks."""
        result = score_task_by_rules(
            make_task(generates_revenue=True, priority="high", impact=2, effort=8)
        )

        self.assertEqual(result.score, 60)
        self.assertEqual(result.classification, Classification.SIGNAL)
        self.assertIn("Low leverage: impact 2/effort 8 (-10)", result.reasoning)

    def test_urgent_without_important_scores_nothing(self) -> None:
        result = score_task_by_rules(make_task(urgent=True))

        self.assertEqual(result.score, 0)

    def test_revenue_alone_is_neutral(self) -> None:
        result = score_task_by_rules(make_task(generates_revenue=True))

        self.assertEqual(result.score, 40)
        self.assertEqual(result.classification, Classification.NEUTRAL)

    def test_missing_or_zero_impact_effort_default_to_five(self) -> None:
        scorer = TaskRuleScorer()

        self.assertEqual(scorer.impact_and_effort({}), (5, 5))
        self.assertEqual(scorer.impact_and_effort({"impact": 0, "effort": 0}), (5, 5))
        self.assertEqual(scorer.impact_and_effort({"impact": "lots", "effort": None}), (5, 5))

    def test_effort_is_floored_at_one(self) -> None:
        result = score_task_by_rules({"impact": 3, "effort": -2})

        self.assertEqual(result.score, 10)

    def test_non_mapping_task_raises(self) -> None:
        with self.assertRaises(TypeError):
            score_task_by_rules(["high", True])

    def test_score_always_within_bounds_and_thresholds_hold(self) -> None:
        for revenue, priority, urgent, important, impact, effort in itertools.product(
            (True, False),
            ("high", "medium", "low", None),
            (True, False),
            (True, False),
            (1, 5, 10),
            (1, 5, 10),
        ):
            result = score_task_by_rules(
                make_task(
                    generates_revenue=revenue,
                    priority=priority,
                    urgent=urgent,
                    important=important,
                    impact=impact,
                    effort=effort,
                )
            )
            self.assertGreaterEqual(result.score, 0)
            self.assertLessEqual(result.score, 100)
            self.assertEqual(result.classification, classify_task_score(result.score))


class TestExplainTask(SimpleTestCase):

    def test_explanation_lists_every_contribution(self) -> None:
        task = make_task(
            generates_revenue=True, priority="high", urgent=True, important=True, impact=8, effort=2
        )
        result = score_task_by_rules(task)

        self.assertEqual(
            explain_task(task, result),
            "SIGNAL (Score: 100): Generates direct revenue (+40); High priority (+30); "
            "Urgent and important (+20); High leverage: impact 8/effort 2 (+10)",
        )

    def test_explanation_without_contributions(self) -> None:
        task = make_task()

        self.assertEqual(
            explain_task(task, score_task_by_rules(task)),
            "NOISE (Score: 0): No scoring rules applied",
        )

    def test_explanation_uses_the_given_result(self) -> None:
        """Usable for display of any stored result, not just the rule one."""
        task = make_task(important=True)
        stored = score_task_by_rules(make_task(generates_revenue=True, priority="high"))

        self.assertTrue(explain_task(task, stored).startswith("SIGNAL (Score: 70): Important (+10)"))
