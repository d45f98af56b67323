# activities/classifier/efficiency.py
"""
Efficiency points for logged activities.

    efficiency = (impact * 2) / duration_in_hours

Used to rank a user's activities and to flag time spent on low-leverage
work when better-yielding alternatives exist.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

logger = logging.getLogger(__name__)

EXCELLENT_FROM = 15.0
GOOD_FROM = 10.0
MODERATE_FROM = 5.0

# An alternative must beat the current efficiency by 50% to be suggested
ALTERNATIVE_FACTOR = 1.5

EFFICIENCY_LEVELS = {
    "excellent": ("Excellent", "High leverage - prioritize activities like this!"),
    "good": ("Good", "Good efficiency - productive activity"),
    "moderate": ("Moderate", "Moderate efficiency - room to improve"),
    "low": ("Low", "Low efficiency - consider alternatives"),
}


def _duration_minutes(activity: Mapping) -> float:
    value = activity.get("duration_minutes") or activity.get("duration") or 0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _number(value: Any) -> Optional[float]:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def calculate_efficiency(activity: Mapping) -> float:
    impact = _number(activity.get("impact"))
    minutes = _duration_minutes(activity)
    if not impact or minutes <= 0:
        logger.debug(f"Efficiency undefined for activity (impact={impact}, minutes={minutes})")
        return 0.0
    return round((impact * 2) / (minutes / 60), 2)


def efficiency_level(score: float) -> str:
    if score >= EXCELLENT_FROM:
        return "excellent"
    if score >= GOOD_FROM:
        return "good"
    if score >= MODERATE_FROM:
        return "moderate"
    return "low"


def classify_efficiency(score: float) -> Dict[str, str]:
    level = efficiency_level(score)
    label, description = EFFICIENCY_LEVELS[level]
    return {"level": level, "label": label, "description": description}


def _alternative_reasoning(alternative: Mapping, current: Mapping, alt_efficiency: float) -> str:
    reasons: List[str] = []

    current_efficiency = calculate_efficiency(current)
    if current_efficiency > 0:
        ratio = alt_efficiency / current_efficiency
        if ratio >= 2:
            reasons.append(f"{round(ratio)}x more efficient")

    if (_number(alternative.get("impact")) or 0) > (_number(current.get("impact")) or 0):
        reasons.append("Greater impact on the goal")

    alt_effort = _number(alternative.get("effort"))
    cur_effort = _number(current.get("effort"))
    if alt_effort is not None and cur_effort is not None and alt_effort < cur_effort:
        reasons.append("Less effort required")

    if _duration_minutes(alternative) < _duration_minutes(current):
        reasons.append("Less time required")

    return " • ".join(reasons) if reasons else "High-leverage activity"


def calculate_opportunity_cost(
    current: Mapping,
    top_activities: Iterable[Mapping] = (),
    max_alternatives: int = 3,
) -> Dict[str, Any]:
    """
    Estimate the impact lost by spending ``current``'s time on it instead of
    repeating the best markedly more efficient alternative.
    """
    current_efficiency = calculate_efficiency(current)

    better = []
    for activity in top_activities:
        efficiency = calculate_efficiency(activity)
        if efficiency > current_efficiency * ALTERNATIVE_FACTOR:
            better.append((efficiency, activity))
    better.sort(key=lambda pair: pair[0], reverse=True)
    better = better[:max_alternatives]

    if not better:
        return {
            "opportunity_cost": 0.0,
            "current_efficiency": current_efficiency,
            "alternatives": [],
            "has_opportunity_cost": False,
        }

    best_efficiency, best = better[0]
    current_hours = _duration_minutes(current) / 60
    best_hours = _duration_minutes(best) / 60

    # How many times the best alternative fits into the time spent
    repetitions = int(current_hours // best_hours) if best_hours > 0 else 0
    potential_impact = repetitions * (_number(best.get("impact")) or 0) * 2
    actual_impact = (_number(current.get("impact")) or 0) * 2
    opportunity_cost = max(0.0, potential_impact - actual_impact)

    return {
        "opportunity_cost": round(opportunity_cost, 2),
        "current_efficiency": current_efficiency,
        "alternatives": [
            {
                "title": activity.get("description") or activity.get("title"),
                "impact": activity.get("impact"),
                "effort": activity.get("effort"),
                "duration": _duration_minutes(activity),
                "efficiency": efficiency,
                "reasoning": _alternative_reasoning(activity, current, efficiency),
            }
            for efficiency, activity in better
        ],
        "has_opportunity_cost": opportunity_cost > 0,
        "metrics": {
            "current_efficiency": current_efficiency,
            "best_alternative_efficiency": best_efficiency,
            "efficiency_gap": round(best_efficiency - current_efficiency, 2),
            "time_invested": current_hours,
            "potential_impact": potential_impact,
            "actual_impact": actual_impact,
        },
    }


def efficiency_stats(activities: List[Mapping]) -> Dict[str, Any]:
    empty = {
        "total": len(activities or []),
        "average": 0.0,
        "median": 0.0,
        "highest": 0.0,
        "lowest": 0.0,
        "high_efficiency_count": 0,
        "low_efficiency_count": 0,
    }
    if not activities:
        return empty

    efficiencies = sorted(e for e in (calculate_efficiency(a) for a in activities) if e > 0)
    if not efficiencies:
        return empty

    distribution = {level: 0 for level in EFFICIENCY_LEVELS}
    for value in efficiencies:
        distribution[efficiency_level(value)] += 1

    return {
        "total": len(activities),
        "average": round(sum(efficiencies) / len(efficiencies), 2),
        # upper median, matching the dashboard figures
        "median": round(efficiencies[len(efficiencies) // 2], 2),
        "highest": round(efficiencies[-1], 2),
        "lowest": round(efficiencies[0], 2),
        "high_efficiency_count": sum(1 for e in efficiencies if e >= GOOD_FROM),
        "low_efficiency_count": sum(1 for e in efficiencies if e < MODERATE_FROM),
        "distribution": distribution,
    }


def create_ranking(activities: Iterable[Mapping], limit: int = 10) -> List[Dict[str, Any]]:
    scored = []
    for activity in activities:
        efficiency = calculate_efficiency(activity)
        if efficiency > 0:
            scored.append(
                dict(activity, efficiency=efficiency, efficiency_class=classify_efficiency(efficiency))
            )
    scored.sort(key=lambda entry: entry["efficiency"], reverse=True)
    return [dict(entry, rank=index) for index, entry in enumerate(scored[:limit], start=1)]


def should_alert_opportunity_cost(activity: Mapping) -> bool:
    """Low efficiency, or low impact for high effort."""
    if efficiency_level(calculate_efficiency(activity)) == "low":
        return True
    impact = _number(activity.get("impact"))
    effort = _number(activity.get("effort"))
    return impact is not None and effort is not None and impact < 5 and effort > 5
