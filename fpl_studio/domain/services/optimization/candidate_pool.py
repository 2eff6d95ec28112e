"""Candidate pool construction for squad allocation."""

from typing import Callable, Iterable, List, Optional

from loguru import logger

from ...models.player import PlayerDomain
from ...models.squad import ScoredPlayer, ScoringMetric
from .scoring import score_player

AvailabilityPredicate = Callable[[PlayerDomain], bool]


def default_availability(player: PlayerDomain) -> bool:
    return player.is_available


def build_candidate_pool(
    players: Iterable[PlayerDomain],
    metric: ScoringMetric,
    is_eligible: Optional[AvailabilityPredicate] = None,
) -> List[ScoredPlayer]:
    """Filter eligible players and rank them by ``metric``, best first.

    Args:
        players: Full player collection
        metric: Scoring metric to rank by
        is_eligible: Availability predicate, defaults to excluding injured,
            suspended and unavailable players

    Returns:
        Scored players in descending score order. Equal scores keep their
        input order.
    """
    is_eligible = is_eligible or default_availability

    eligible = [player for player in players if is_eligible(player)]
    scored = [ScoredPlayer(player=p, score=score_player(p, metric)) for p in eligible]

    # sorted() is stable, so ties stay in input order
    pool = sorted(scored, key=lambda candidate: candidate.score, reverse=True)

    logger.debug(
        f"🏊 Candidate pool: {len(pool)} eligible players ranked by {metric.value}"
    )
    return pool
