"""Greedy formation filling with a relaxed second pass."""

from typing import Dict, List, Mapping, Optional, Tuple

from loguru import logger

from ...models.player import Role
from ...models.squad import FormationTarget, ScoredPlayer


def fill_formation(
    pool: List[ScoredPlayer],
    formation: FormationTarget,
    group_cap: int = 3,
    relaxed_role_caps: Optional[Mapping[Role, int]] = None,
) -> Tuple[List[ScoredPlayer], bool]:
    """Fill a roster from a ranked pool.

    The first pass admits candidates in rank order while their role has quota
    left under ``formation`` and their club is below ``group_cap``. If that
    leaves the roster short, a second pass ignores the exact quotas and uses
    ``relaxed_role_caps`` (never below the target count) instead. Passing
    ``None`` disables the second pass.

    Args:
        pool: Candidates ranked best first
        formation: Target role counts
        group_cap: Maximum players from one club
        relaxed_role_caps: Per-role maximums for the relaxed pass

    Returns:
        Tuple of (roster grouped by role, whether the relaxed pass ran).
        The roster may be shorter than the formation when the pool cannot
        supply enough legal candidates.
    """
    roster_size = formation.roster_size
    roster: List[ScoredPlayer] = []
    chosen = set()
    role_counts: Dict[Role, int] = {role: 0 for role in Role}
    group_counts: Dict[int, int] = {}

    def admit(candidate: ScoredPlayer) -> None:
        roster.append(candidate)
        chosen.add(candidate.player_id)
        role_counts[candidate.role] += 1
        group_counts[candidate.team_id] = group_counts.get(candidate.team_id, 0) + 1

    for candidate in pool:
        if len(roster) >= roster_size:
            break
        if candidate.player_id in chosen:
            continue
        if role_counts[candidate.role] >= formation.counts[candidate.role]:
            continue
        if group_counts.get(candidate.team_id, 0) >= group_cap:
            continue
        admit(candidate)

    relaxed = False
    if len(roster) < roster_size and relaxed_role_caps is not None:
        relaxed = True
        caps = {
            role: max(relaxed_role_caps.get(role, 0), formation.counts[role])
            for role in Role
        }
        logger.debug(
            f"🔁 Target {formation.label} filled {len(roster)}/{roster_size}, "
            f"relaxing to per-role caps {[caps[role] for role in Role]}"
        )
        for candidate in pool:
            if len(roster) >= roster_size:
                break
            if candidate.player_id in chosen:
                continue
            if role_counts[candidate.role] >= caps[candidate.role]:
                continue
            if group_counts.get(candidate.team_id, 0) >= group_cap:
                continue
            admit(candidate)

    roster.sort(key=lambda member: member.role.order)
    return roster, relaxed
