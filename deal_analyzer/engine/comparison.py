"""Side-by-side projection of saved scenarios."""

import logging

from deal_analyzer.engine.proforma import project_deal
from deal_analyzer.engine.scoring import calculate_deal_score
from deal_analyzer.models.assumptions import Scenario
from deal_analyzer.models.results import ScenarioComparison

logger = logging.getLogger(__name__)


def compare_scenarios(scenarios: list[Scenario]) -> list[ScenarioComparison]:
    """Metrics and score per scenario, in input order.

    Scenarios whose projection fails are logged and left out.
    """
    comparisons: list[ScenarioComparison] = []
    for scenario in scenarios:
        try:
            result = project_deal(scenario.inputs)
        except (ValueError, ArithmeticError, TypeError) as e:
            logger.warning("Skipping scenario %r: %s", scenario.name, e)
            continue
        comparisons.append(ScenarioComparison(
            name=scenario.name,
            metrics=result.metrics,
            score=calculate_deal_score(result.metrics),
        ))
    return comparisons
