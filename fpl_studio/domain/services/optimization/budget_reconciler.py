"""Budget reconciliation: swap out the least cost-efficient players until the
roster fits the budget.

This is best effort. The loop stops at the first member that has no cheaper
same-role replacement, so a roster can come back over budget even when a
different sequence of swaps would have fitted.
"""

from collections import Counter
from typing import Dict, List, Optional, Set

from pydantic import BaseModel, Field

from ...models.squad import ScoredPlayer, SquadSwap, TerminationReason
from .scoring import efficiency


class ReconciliationOutcome(BaseModel):
    """Roster and bookkeeping from one reconciliation run."""

    roster: List[ScoredPlayer]
    total_cost: int = Field(..., ge=0, description="Roster cost in 0.1m units")
    iterations: int = Field(..., ge=0)
    swaps: List[SquadSwap] = Field(default_factory=list)
    termination: TerminationReason


def roster_cost(roster: List[ScoredPlayer]) -> int:
    """Total roster cost in 0.1m units."""
    return sum(member.now_cost for member in roster)


def least_efficient_index(roster: List[ScoredPlayer], cost_exponent: float) -> int:
    """Index of the member with the lowest efficiency; first one wins ties."""
    worst_idx = 0
    worst_efficiency = float("inf")
    for idx, member in enumerate(roster):
        member_efficiency = efficiency(member.score, member.now_cost, cost_exponent)
        if member_efficiency < worst_efficiency:
            worst_efficiency = member_efficiency
            worst_idx = idx
    return worst_idx


def find_replacement(
    pool: List[ScoredPlayer],
    outgoing: ScoredPlayer,
    in_roster: Set[int],
    group_counts: Dict[int, int],
    group_cap: int,
) -> Optional[ScoredPlayer]:
    """Best-ranked cheaper same-role candidate that keeps club counts legal.

    ``group_counts`` must already exclude ``outgoing``.
    """
    for candidate in pool:
        if candidate.role != outgoing.role:
            continue
        if candidate.now_cost >= outgoing.now_cost:
            continue
        if candidate.player_id in in_roster:
            continue
        if group_counts.get(candidate.team_id, 0) >= group_cap:
            continue
        return candidate
    return None


def reconcile_budget(
    roster: List[ScoredPlayer],
    pool: List[ScoredPlayer],
    budget: int,
    group_cap: int = 3,
    cost_exponent: float = 1.5,
    max_iterations: int = 1000,
) -> ReconciliationOutcome:
    """Swap members for cheaper same-role candidates until cost <= budget.

    Args:
        roster: Filled roster; not mutated
        pool: Ranked candidate pool used for replacements
        budget: Budget ceiling in 0.1m units
        group_cap: Maximum players from one club
        cost_exponent: Exponent k in score / price^k
        max_iterations: Hard cap on loop iterations

    Returns:
        ReconciliationOutcome with the final roster. Replacements take the
        outgoing member's slot so the roster stays grouped by role.
    """
    working = list(roster)
    in_roster = {member.player_id for member in working}
    group_counts: Dict[int, int] = Counter(member.team_id for member in working)
    swaps: List[SquadSwap] = []

    iterations = 0
    current_cost = roster_cost(working)
    termination = TerminationReason.WITHIN_BUDGET

    while current_cost > budget:
        if iterations >= max_iterations:
            termination = TerminationReason.ITERATION_CAP
            break
        iterations += 1

        worst_idx = least_efficient_index(working, cost_exponent)
        outgoing = working[worst_idx]
        group_counts[outgoing.team_id] -= 1

        replacement = find_replacement(
            pool, outgoing, in_roster, group_counts, group_cap
        )
        if replacement is None:
            # Put the member back and stop
            group_counts[outgoing.team_id] += 1
            termination = TerminationReason.NO_IMPROVING_SWAP
            break

        working[worst_idx] = replacement
        in_roster.discard(outgoing.player_id)
        in_roster.add(replacement.player_id)
        group_counts[replacement.team_id] = group_counts.get(replacement.team_id, 0) + 1
        swaps.append(SquadSwap(outgoing=outgoing, incoming=replacement))
        current_cost = roster_cost(working)

    return ReconciliationOutcome(
        roster=working,
        total_cost=current_cost,
        iterations=iterations,
        swaps=swaps,
        termination=termination,
    )
