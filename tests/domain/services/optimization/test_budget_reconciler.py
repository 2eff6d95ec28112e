"""Unit tests for budget reconciliation."""

from fpl_studio.domain.models.player import PlayerDomain, Role
from fpl_studio.domain.models.squad import ScoredPlayer, TerminationReason
from fpl_studio.domain.services.optimization import reconcile_budget, roster_cost
from fpl_studio.domain.services.optimization.budget_reconciler import (
    find_replacement,
    least_efficient_index,
)


def scored(player_id, role, team_id, now_cost, score):
    return ScoredPlayer(
        player=PlayerDomain(
            player_id=player_id,
            web_name=f"P{player_id}",
            team_id=team_id,
            position=role,
            now_cost=now_cost,
        ),
        score=score,
    )


class TestReconcileBudget:
    """Test the swap loop and its stopping conditions."""

    def test_empty_roster_performs_no_iterations(self):
        outcome = reconcile_budget([], [], budget=0)

        assert outcome.iterations == 0
        assert outcome.roster == []
        assert outcome.termination == TerminationReason.WITHIN_BUDGET

    def test_within_budget_performs_no_iterations(self):
        roster = [scored(1, Role.MID, 1, 80, 10.0), scored(2, Role.MID, 2, 60, 8.0)]

        outcome = reconcile_budget(roster, roster, budget=140)

        assert outcome.iterations == 0
        assert outcome.swaps == []
        assert outcome.total_cost == 140

    def test_swaps_least_efficient_for_best_ranked_cheaper(self):
        premium = scored(1, Role.MID, 1, 120, 10.0)
        solid = scored(2, Role.MID, 2, 60, 9.0)
        cheap_good = scored(3, Role.MID, 3, 55, 7.0)
        cheap_poor = scored(4, Role.MID, 4, 45, 4.0)
        pool = [premium, solid, cheap_good, cheap_poor]

        outcome = reconcile_budget([premium, solid], pool, budget=120)

        assert outcome.iterations == 1
        assert [m.player_id for m in outcome.roster] == [3, 2]
        assert outcome.total_cost == 115
        assert outcome.swaps[0].outgoing == premium
        assert outcome.swaps[0].incoming == cheap_good
        assert outcome.termination == TerminationReason.WITHIN_BUDGET

    def test_no_replacement_restores_member_and_stops(self):
        roster = [scored(1, Role.GKP, 1, 50, 3.0), scored(2, Role.FWD, 2, 100, 2.0)]
        # Only a more expensive forward is available
        pool = roster + [scored(3, Role.FWD, 3, 110, 9.0)]

        outcome = reconcile_budget(roster, pool, budget=100)

        assert outcome.iterations == 1
        assert outcome.roster == roster
        assert outcome.total_cost == 150
        assert outcome.termination == TerminationReason.NO_IMPROVING_SWAP

    def test_iteration_cap_bounds_loop(self):
        roster = [scored(1, Role.DEF, 1, 100, 1.0)]
        pool = roster + [scored(i, Role.DEF, i, 100 - i, 1.0) for i in range(2, 40)]

        outcome = reconcile_budget(roster, pool, budget=0, max_iterations=5)

        assert outcome.iterations == 5
        assert len(outcome.swaps) == 5
        assert outcome.termination == TerminationReason.ITERATION_CAP

    def test_each_swap_strictly_reduces_cost(self):
        roster = [scored(1, Role.DEF, 1, 100, 1.0)]
        pool = roster + [scored(i, Role.DEF, i, 100 - i, 1.0) for i in range(2, 10)]

        outcome = reconcile_budget(roster, pool, budget=0)

        costs = [100] + [swap.incoming.now_cost for swap in outcome.swaps]
        assert costs == sorted(costs, reverse=True)
        assert len(set(costs)) == len(costs)

    def test_input_roster_not_mutated(self):
        premium = scored(1, Role.MID, 1, 120, 1.0)
        cheap = scored(2, Role.MID, 2, 50, 1.0)
        roster = [premium]

        reconcile_budget(roster, [premium, cheap], budget=60)

        assert roster == [premium]


class TestHelpers:
    def test_roster_cost_in_tenths(self):
        assert roster_cost([scored(1, Role.MID, 1, 55, 1.0), scored(2, Role.FWD, 2, 75, 1.0)]) == 130

    def test_least_efficient_ties_pick_first(self):
        roster = [
            scored(1, Role.DEF, 1, 50, 4.0),
            scored(2, Role.MID, 2, 50, 4.0),
            scored(3, Role.FWD, 3, 50, 9.0),
        ]

        assert least_efficient_index(roster, 1.5) == 0

    def test_least_efficient_prefers_expensive_average_player(self):
        roster = [
            scored(1, Role.MID, 1, 50, 5.0),
            scored(2, Role.MID, 2, 130, 12.0),
        ]

        # 12 / 13^1.5 < 5 / 5^1.5
        assert least_efficient_index(roster, 1.5) == 1

    def test_replacement_respects_club_cap(self):
        outgoing = scored(1, Role.MID, 9, 100, 1.0)
        blocked = scored(2, Role.MID, 5, 60, 9.0)
        allowed = scored(3, Role.MID, 6, 70, 5.0)

        replacement = find_replacement(
            [blocked, allowed], outgoing, in_roster={10, 11, 12}, group_counts={5: 3}, group_cap=3
        )

        assert replacement == allowed

    def test_replacement_same_club_after_removal(self):
        outgoing = scored(1, Role.MID, 5, 100, 1.0)
        same_club = scored(2, Role.MID, 5, 60, 9.0)

        # Club 5 had 3 including the outgoing player, 2 after removal
        replacement = find_replacement(
            [same_club], outgoing, in_roster=set(), group_counts={5: 2}, group_cap=3
        )

        assert replacement == same_club

    def test_replacement_skips_roster_members_and_other_roles(self):
        outgoing = scored(1, Role.DEF, 1, 60, 1.0)
        in_squad = scored(2, Role.DEF, 2, 45, 8.0)
        forward = scored(3, Role.FWD, 3, 45, 9.0)

        replacement = find_replacement(
            [forward, in_squad], outgoing, in_roster={2}, group_counts={}, group_cap=3
        )

        assert replacement is None
