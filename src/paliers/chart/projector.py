"""Projection of the weight log into chart-ready series."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from paliers.tracking.models import Entry

# Vertical padding (kg) above the heaviest and below the lightest weight
DEFAULT_PADDING = 4.0
DEFAULT_DATE_FORMAT = "%d/%m/%Y"

WEIGHT_LABEL = "Mon poids (kg)"
GOAL_LABEL = "Poids souhaité (kg)"


@dataclass
class ChartSeries:
    """One labeled line of the chart."""

    label: str
    values: list[float]
    kind: str  # 'weight', 'goal' or 'palier'
    show_points: bool = True
    dashed: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "label": self.label,
            "values": self.values,
            "kind": self.kind,
            "show_points": self.show_points,
            "dashed": self.dashed,
        }


@dataclass
class ChartProjection:
    """Labels, vertical range and series, ready for a chart renderer."""

    labels: list[str]
    y_min: float
    y_max: float
    series: list[ChartSeries] = field(default_factory=list)

    def get_series(self, kind: str) -> list[ChartSeries]:
        return [s for s in self.series if s.kind == kind]

    def to_dict(self) -> dict[str, Any]:
        return {
            "labels": self.labels,
            "y_min": self.y_min,
            "y_max": self.y_max,
            "series": [s.to_dict() for s in self.series],
        }


def palier_thresholds(min_weight: float, max_weight: float, palier_step: float) -> list[float]:
    """
    Multiples of palier_step strictly between min_weight and max_weight.

    Returned in descending order, the order paliers are reached when losing.

    Example:
        >>> palier_thresholds(73.0, 86.0, 5)
        [85.0, 80.0, 75.0]
        >>> palier_thresholds(75.0, 80.0, 5)  # both ends excluded
        []
    """
    if palier_step <= 0 or max_weight <= min_weight:
        return []

    thresholds = []
    k = math.ceil(max_weight / palier_step) - 1
    while k * palier_step > min_weight:
        value = k * palier_step
        if value < max_weight:
            thresholds.append(float(value))
        k -= 1
    return thresholds


def format_palier_label(value: float) -> str:
    return f"Palier {value:g} kg"


def project(
    entries: Sequence[Entry],
    goal_weight: Optional[float] = None,
    palier_step: Optional[float] = None,
    padding: float = DEFAULT_PADDING,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> Optional[ChartProjection]:
    """
    Build the chart projection for a list of entries.

    Args:
        entries: Weight entries in chronological order
        goal_weight: Goal weight drawn as a dashed line without points
        palier_step: Palier spacing; one reference line per palier inside
            the observed range
        padding: Margin added below the minimum and above the maximum
        date_format: strftime format for the labels

    Returns:
        ChartProjection, or None when there are no entries
    """
    if not entries:
        return None

    labels = [e.date.strftime(date_format) for e in entries]
    weights = [e.weight for e in entries]
    min_weight = min(weights)
    max_weight = max(weights)

    series = [ChartSeries(label=WEIGHT_LABEL, values=weights, kind="weight")]

    if goal_weight:
        series.append(
            ChartSeries(
                label=GOAL_LABEL,
                values=[goal_weight] * len(labels),
                kind="goal",
                show_points=False,
                dashed=True,
            )
        )

    if palier_step and palier_step > 0:
        for value in palier_thresholds(min_weight, max_weight, palier_step):
            series.append(
                ChartSeries(
                    label=format_palier_label(value),
                    values=[value] * len(labels),
                    kind="palier",
                    show_points=False,
                    dashed=True,
                )
            )

    return ChartProjection(
        labels=labels,
        y_min=min_weight - padding,
        y_max=max_weight + padding,
        series=series,
    )
