"""Squad allocation: candidate pool -> formation fill -> budget reconciliation.

Each call works on its own copies of the pool and roster, so the allocator
is safe to call repeatedly or from several threads.
"""

import math
from typing import Iterable, Optional

from loguru import logger

from fpl_studio.config import AllocatorConfig, config

from ...models.player import PlayerDomain, Role
from ...models.squad import (
    AllocationResult,
    FormationTarget,
    ScoringMetric,
)
from .budget_reconciler import reconcile_budget
from .candidate_pool import AvailabilityPredicate, build_candidate_pool
from .formation_filler import fill_formation


class InsufficientPoolError(Exception):
    """Raised when the pool cannot supply a full roster."""

    def __init__(self, required: int, admitted: int, pool_size: int):
        self.required = required
        self.admitted = admitted
        self.pool_size = pool_size
        super().__init__(
            f"Cannot build full roster: admitted {admitted} of {required} players "
            f"from {pool_size} eligible candidates"
        )


def budget_to_tenths(budget: float) -> int:
    """Largest whole 0.1m amount not above ``budget``."""
    return math.floor(round(budget * 10, 6))


def allocate_squad(
    players: Iterable[PlayerDomain],
    budget: float,
    metric: ScoringMetric = ScoringMetric.FORM,
    formation: Optional[FormationTarget] = None,
    settings: Optional[AllocatorConfig] = None,
    is_eligible: Optional[AvailabilityPredicate] = None,
) -> AllocationResult:
    """Pick a roster for ``formation`` that tries to fit ``budget``.

    Args:
        players: Full player collection
        budget: Budget ceiling in millions
        metric: Scoring metric used for ranking and efficiency
        formation: Target role counts, defaults to the configured formation
        settings: Allocator tunables, defaults to the global config
        is_eligible: Availability predicate for the pool

    Returns:
        AllocationResult. Check ``over_budget``: the reconciler does not
        guarantee the budget is met.

    Raises:
        InsufficientPoolError: If fewer than ``formation.roster_size`` players
            could be admitted even after the relaxed fill.
    """
    settings = settings or config.allocator
    formation = formation or FormationTarget.from_label(settings.default_formation)
    if not math.isfinite(budget) or budget < 0:
        raise ValueError(f"Budget must be finite and non-negative, got {budget}")

    pool = build_candidate_pool(players, metric, is_eligible)

    relaxed_caps = None
    if settings.allow_relaxed_fill:
        relaxed_caps = {
            Role(role): count for role, count in settings.relaxed_role_caps.items()
        }
    roster, relaxed = fill_formation(
        pool, formation, group_cap=settings.group_cap, relaxed_role_caps=relaxed_caps
    )
    if len(roster) < formation.roster_size:
        logger.warning(
            f"❌ Insufficient pool: {len(roster)}/{formation.roster_size} players "
            f"admitted for {formation.label}"
        )
        raise InsufficientPoolError(formation.roster_size, len(roster), len(pool))

    budget_tenths = budget_to_tenths(budget)
    outcome = reconcile_budget(
        roster,
        pool,
        budget_tenths,
        group_cap=settings.group_cap,
        cost_exponent=settings.cost_exponent,
        max_iterations=settings.max_iterations,
    )

    role_counts = {role: 0 for role in Role}
    for member in outcome.roster:
        role_counts[member.role] += 1
    effective_formation = FormationTarget(counts=role_counts)

    total_cost = outcome.total_cost / 10
    over_budget = outcome.total_cost > budget_tenths
    result = AllocationResult(
        roster=tuple(outcome.roster),
        metric=metric,
        formation=effective_formation.label,
        budget=budget,
        total_cost=total_cost,
        total_score=round(sum(member.score for member in outcome.roster), 2),
        over_budget=over_budget,
        overage=max(0.0, round(total_cost - budget, 2)),
        iterations=outcome.iterations,
        swaps=tuple(outcome.swaps),
        termination=outcome.termination,
        relaxed_fill=relaxed,
    )

    logger.info(
        f"⚽ Allocated {result.formation} by {metric.value}: "
        f"£{result.total_cost:.1f}m, score {result.total_score:.1f}, "
        f"{len(result.swaps)} swaps in {result.iterations} iterations"
    )
    if over_budget:
        logger.warning(
            f"💸 Budget exceeded by £{result.overage:.1f}m "
            f"(£{result.total_cost:.1f}m vs £{budget:.1f}m): {result.termination.value}"
        )
    return result
