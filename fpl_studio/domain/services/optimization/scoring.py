"""Scoring metrics for squad allocation.

A metric that cannot be computed for a player (non-numeric or non-finite
form, for example) scores 0 for that player. FPL data quality varies and one
bad row should not abort an allocation.
"""

import math

from loguru import logger

from ...models.player import PlayerDomain
from ...models.squad import ScoringMetric


def _raw_score(player: PlayerDomain, metric: ScoringMetric) -> float:
    if metric == ScoringMetric.TOTAL_POINTS:
        return float(player.total_points)
    if metric == ScoringMetric.FORM:
        return float(player.form)
    if metric == ScoringMetric.VALUE:
        return player.total_points / player.price
    raise ValueError(f"Unsupported scoring metric: {metric}")


def score_player(player: PlayerDomain, metric: ScoringMetric) -> float:
    """Score a player under ``metric``, falling back to 0 on malformed data."""
    try:
        score = _raw_score(player, metric)
    except (TypeError, ValueError, ZeroDivisionError) as e:
        logger.warning(
            f"⚠️ Could not compute {metric.value} for {player.web_name} "
            f"(id {player.player_id}): {e}. Scoring as 0."
        )
        return 0.0

    if not math.isfinite(score):
        logger.warning(
            f"⚠️ Non-finite {metric.value} for {player.web_name} "
            f"(id {player.player_id}). Scoring as 0."
        )
        return 0.0
    return score


def efficiency(score: float, now_cost: int, cost_exponent: float) -> float:
    """Score per price^k. k > 1 penalises expensive players more than linearly."""
    return score / math.pow(now_cost / 10, cost_exponent)
