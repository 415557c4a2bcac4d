"""Two-way sensitivity grid over the full pro forma pipeline.

Every cell re-runs the projection with two input fields overridden and
reads one metric. Cells are independent, so large grids fan out to a
thread pool and are placed back by index.
"""

import concurrent.futures
import logging
import multiprocessing
from dataclasses import fields
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Sequence

from deal_analyzer.config import settings
from deal_analyzer.engine.proforma import project_deal
from deal_analyzer.models.assumptions import DealInputs, field_name
from deal_analyzer.models.results import Metrics

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")

NUMERIC_METRICS = frozenset(f.name for f in fields(Metrics) if f.type is Decimal)


def resolve_metric(metric: str) -> str:
    """snake_case name of a numeric metric; raises ValueError for anything else."""
    name = field_name(metric)
    if name not in NUMERIC_METRICS:
        raise ValueError(f"Unknown sensitivity metric: {metric!r}")
    return name


def _evaluate_cell(
    base_inputs: DealInputs,
    x_field: str,
    x_value: Any,
    y_field: str,
    y_value: Any,
    metric: str,
) -> Decimal | None:
    try:
        inputs = base_inputs.with_field(x_field, x_value).with_field(y_field, y_value)
        return getattr(project_deal(inputs).metrics, metric)
    except Exception as e:
        logger.warning(
            "Sensitivity cell %s=%s, %s=%s failed: %s", x_field, x_value, y_field, y_value, e
        )
        return None


def sensitivity_grid(
    base_inputs: DealInputs,
    x_field: str,
    x_values: Sequence[Any],
    y_field: str,
    y_values: Sequence[Any],
    metric: str = "irr",
    max_workers: int | None = None,
) -> list[list[Decimal | None]]:
    """Metric matrix with one row per y value and one column per x value.

    Field paths are those accepted by ``DealInputs.with_field``. A cell
    whose projection fails is None. Unknown metrics and field paths raise
    ValueError before any cell is evaluated.
    """
    metric_name = resolve_metric(metric)
    base_inputs.field_value(x_field)
    base_inputs.field_value(y_field)

    matrix: list[list[Decimal | None]] = [[None] * len(x_values) for _ in y_values]
    cells = [(row, col) for row in range(len(y_values)) for col in range(len(x_values))]

    def evaluate(row: int, col: int) -> Decimal | None:
        return _evaluate_cell(
            base_inputs, x_field, x_values[col], y_field, y_values[row], metric_name
        )

    if settings.sensitivity_parallel and len(cells) >= settings.sensitivity_parallel_min_cells:
        workers = (
            max_workers
            or settings.sensitivity_max_workers
            or min(multiprocessing.cpu_count(), 8)
        )
        with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(evaluate, row, col): (row, col) for row, col in cells}
            for future in concurrent.futures.as_completed(futures):
                row, col = futures[future]
                matrix[row][col] = future.result()
    else:
        for row, col in cells:
            matrix[row][col] = evaluate(row, col)

    failed = sum(value is None for values in matrix for value in values)
    logger.debug(
        "Sensitivity %s over %s x %s: %d cells, %d failed",
        metric_name, x_field, y_field, len(cells), failed,
    )
    return matrix


def axis_range(start: Any, stop: Any, step: Any) -> list[Decimal]:
    """Inclusive axis from start to stop, rounded to two places."""
    start, stop, step = (Decimal(str(v)) for v in (start, stop, step))
    if step <= 0:
        raise ValueError("step must be positive")
    values = []
    value = start
    while value <= stop:
        values.append(value.quantize(TWO_PLACES, ROUND_HALF_UP))
        value += step
    return values
