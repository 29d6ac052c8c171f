"""Analysis functions for simulation results.

Provides analysis tools for Revnet simulation results: headline metrics,
the distribution of trader returns, how often the pool price stays inside
the Revnet's floor/ceiling band, and comparison of two runs.
"""

from typing import Any, Dict, List, Optional

import numpy as np

from .state import SimulationResults
from .metrics import calculate_key_metrics, calculate_trader_summary


# Statistical helper functions for robust metric calculations
def _mean(values):
    """Calculate mean with null check for empty sequences."""
    if not values:
        return 0.0
    return float(np.mean(values))


def _median(values):
    """Calculate median with null check for empty sequences."""
    if not values:
        return 0.0
    return float(np.median(values))


def _std(values):
    """Calculate standard deviation with null check for empty sequences."""
    if not values:
        return 0.0
    return float(np.std(values))


def _percentile(values, pct: float):
    """Calculate percentile with null check for empty sequences."""
    if not values:
        return 0.0
    return float(np.percentile(values, pct))


def analyze_results(results: SimulationResults) -> Dict[str, Any]:
    """Primary analysis function combining venue metrics and the trader summary.

    Args:
        results: Complete simulation results with snapshots and traders

    Returns:
        Dictionary of key analysis metrics
    """
    if not results.snapshots:
        return {}

    analysis = calculate_key_metrics(results.snapshots)
    analysis.update(calculate_trader_summary(results.traders))
    analysis.update(calculate_price_band_stats(results))
    return analysis


def calculate_return_distribution(results: SimulationResults) -> Dict[str, float]:
    """Distribution of per-trader returns (ETH received minus ETH spent).

    Only completed sales count; voided sales exchanged nothing and open
    positions have no realised return yet.
    """
    profits: List[float] = []
    days_held: List[int] = []
    for trader in results.traders:
        if trader.sale is None or trader.sale.voided:
            continue
        profits.append(trader.profit)
        days_held.append(trader.days_held)

    profitable = sum(1 for p in profits if p > 0)
    return {
        "completed_sales": len(profits),
        "mean_return": _mean(profits),
        "median_return": _median(profits),
        "std_return": _std(profits),
        "p10_return": _percentile(profits, 10),
        "p90_return": _percentile(profits, 90),
        "profitable_share": profitable / len(profits) if profits else 0.0,
        "mean_days_held": _mean(days_held),
        # Correlation between holding period and return (0 when undefined)
        "days_held_return_corr": _correlation(days_held, profits),
    }


def _correlation(xs, ys) -> float:
    if len(xs) < 2 or _std(xs) == 0.0 or _std(ys) == 0.0:
        return 0.0
    return float(np.corrcoef(xs, ys)[0, 1])


def calculate_price_band_stats(results: SimulationResults) -> Dict[str, float]:
    """How the pool price sits relative to the Revnet floor and ceiling.

    Arbitrage through the router keeps a live pool between the two bounds;
    days without a pool price are skipped.
    """
    priced = [s for s in results.snapshots if s.pool_token_price is not None]
    if not priced:
        return {"days_priced": 0, "share_within_band": 0.0, "share_above_ceiling": 0.0, "share_below_floor": 0.0}

    prices = np.array([s.pool_token_price for s in priced])
    ceilings = np.array([s.price_ceiling for s in priced])
    floors = np.array([s.price_floor for s in priced])

    above = prices > ceilings
    below = prices < floors
    within = ~above & ~below
    return {
        "days_priced": len(priced),
        "share_within_band": float(within.mean()),
        "share_above_ceiling": float(above.mean()),
        "share_below_floor": float(below.mean()),
    }


def compare_results(baseline: SimulationResults, variant: SimulationResults) -> Dict[str, Optional[float]]:
    """Compare treasury, supply and trader outcomes between two runs.

    Useful for one-parameter sweeps: both runs should share a seed so that
    differences come from the parameter, not the draws.
    """
    if not baseline.snapshots or not variant.snapshots:
        return {}

    base_final = baseline.snapshots[-1]
    var_final = variant.snapshots[-1]

    def _change(before: float, after: float) -> Optional[float]:
        if before == 0:
            return None
        return (after - before) / before

    base_returns = calculate_return_distribution(baseline)
    var_returns = calculate_return_distribution(variant)

    return {
        "eth_balance_change_pct": _change(base_final.eth_balance, var_final.eth_balance),
        "token_supply_change_pct": _change(base_final.token_supply, var_final.token_supply),
        "price_floor_change_pct": _change(base_final.price_floor, var_final.price_floor),
        "mean_return_delta": var_returns["mean_return"] - base_returns["mean_return"],
        "profitable_share_delta": var_returns["profitable_share"] - base_returns["profitable_share"],
    }
