"""Squad allocation for FPL starting XI selection under a budget.

This module provides:
- Scoring metrics with malformed-data fallback
- Candidate pool ranking
- Greedy formation filling with a relaxed fallback pass
- Budget reconciliation by efficiency-driven swaps

Usage:
    from fpl_studio.domain.services.optimization import allocate_squad

    result = allocate_squad(players, budget=83.0, metric=ScoringMetric.FORM)
"""

from .budget_reconciler import ReconciliationOutcome, reconcile_budget, roster_cost
from .candidate_pool import build_candidate_pool, default_availability
from .formation_filler import fill_formation
from .scoring import efficiency, score_player
from .squad_allocator import InsufficientPoolError, allocate_squad, budget_to_tenths

__all__ = [
    "ReconciliationOutcome",
    "reconcile_budget",
    "roster_cost",
    "build_candidate_pool",
    "default_availability",
    "fill_formation",
    "efficiency",
    "score_player",
    "InsufficientPoolError",
    "allocate_squad",
    "budget_to_tenths",
]
