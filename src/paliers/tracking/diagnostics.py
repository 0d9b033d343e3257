"""Progress summary shown on the home screen."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from paliers.tracking.milestones import next_target, weight_delta
from paliers.tracking.models import NextTarget, WeightDelta
from paliers.tracking.state import AppState


@dataclass
class ProgressReport:
    """Where the user stands against the start, the goal and the paliers."""

    current_weight: float
    current_date: date
    entry_count: int
    start_weight: Optional[float]
    delta: Optional[WeightDelta]
    goal_weight: Optional[float]
    remaining_to_goal: Optional[float]  # kg still to lose (<= 0 means goal met)
    palier_step: float
    palier_level: int
    next_palier: Optional[NextTarget]


def generate_progress_report(state: AppState) -> Optional[ProgressReport]:
    """Build the progress report, or None when nothing has been logged."""
    latest = state.log.latest()
    if latest is None:
        return None

    config = state.config

    delta = None
    if config.start_weight:
        delta = weight_delta(config.start_weight, latest.weight)

    remaining_to_goal = None
    if config.goal_weight:
        remaining_to_goal = latest.weight - config.goal_weight

    return ProgressReport(
        current_weight=latest.weight,
        current_date=latest.date,
        entry_count=len(state.log),
        start_weight=config.start_weight,
        delta=delta,
        goal_weight=config.goal_weight,
        remaining_to_goal=remaining_to_goal,
        palier_step=config.palier_step,
        palier_level=state.milestones.palier_level,
        next_palier=next_target(latest.weight, config.palier_step),
    )


def format_next_palier(target: Optional[NextTarget]) -> str:
    if target is None:
        return "Paliers désactivés"
    if target.reached:
        return f"Palier {target.target_weight:.1f} kg atteint !"
    return f"Prochain palier : {target.target_weight:.1f} kg, encore {target.remaining:.1f} kg"


def format_progress_report(report: ProgressReport) -> str:
    """Format progress report as text."""
    lines = [
        f"Suivi de poids ({report.entry_count} mesures)",
        "=" * 45,
        f"Poids actuel :    {report.current_weight:.1f} kg ({report.current_date.isoformat()})",
    ]

    if report.start_weight is not None and report.delta is not None:
        if report.delta.direction == "lost":
            change = f"{report.delta.lost:.1f} kg perdus"
        elif report.delta.direction == "gained":
            change = f"{abs(report.delta.lost):.1f} kg pris"
        else:
            change = "inchangé"
        lines.append(f"Depuis le départ : {change} (départ {report.start_weight:.1f} kg)")

    if report.goal_weight is not None and report.remaining_to_goal is not None:
        if report.remaining_to_goal > 0:
            lines.append(
                f"Objectif :        {report.goal_weight:.1f} kg, encore {report.remaining_to_goal:.1f} kg"
            )
        else:
            lines.append(f"Objectif :        {report.goal_weight:.1f} kg atteint !")

    lines.append("")
    lines.append(f"Paliers franchis : {report.palier_level} (pas de {report.palier_step:g} kg)")
    lines.append(format_next_palier(report.next_palier))

    return "\n".join(lines)
