"""Lightweight evaluation harness for deterministic weather scenarios."""

from __future__ import annotations

from dataclasses import asdict
from typing import Dict, List

from evaluation.scenarios import EvaluationScenario, SCENARIOS
from logic.outfit_classifier import classify
from logic.outfit_rules import recommend
from models.outfit import OutfitCategory, OutfitRecommendation


def _evaluate_expectations(
    scenario: EvaluationScenario, category: OutfitCategory, recommendation: OutfitRecommendation
) -> Dict[str, object]:
    expectations = scenario.expectations
    checks: Dict[str, bool] = {"category": category is scenario.expected_category}
    if "shoes" in expectations:
        checks["shoes"] = recommendation.shoes == expectations["shoes"]
    if "accessory_prefix" in expectations:
        prefix = list(expectations["accessory_prefix"])
        checks["accessory_prefix"] = recommendation.accessories[: len(prefix)] == prefix
    if expectations.get("notes_mention_wind"):
        checks["notes_mention_wind"] = "風" in recommendation.notes
    return {"passed": all(checks.values()), "checks": checks}


def run_scenario(scenario: EvaluationScenario) -> Dict[str, object]:
    category = classify(scenario.record)
    recommendation = recommend(scenario.record)
    evaluation = _evaluate_expectations(scenario, category, recommendation)
    return {
        "scenario": scenario.name,
        "passed": evaluation["passed"],
        "checks": evaluation["checks"],
        "category": category.value,
        "recommendation": asdict(recommendation),
    }


def run_evaluation_suite() -> List[Dict[str, object]]:
    return [run_scenario(scenario) for scenario in SCENARIOS]


def run_smoke_checks() -> List[str]:
    results = run_evaluation_suite()
    return [f"{result['scenario']}: {'passed' if result['passed'] else 'failed'}" for result in results]


__all__ = ["run_evaluation_suite", "run_scenario", "run_smoke_checks"]
