"""Chart projection of the weight log."""

from __future__ import annotations

from paliers.chart.projector import ChartProjection, ChartSeries, palier_thresholds, project

__all__ = [
    "ChartProjection",
    "ChartSeries",
    "palier_thresholds",
    "project",
]
