"""Metrics, aggregation, and analysis tests.

Tests the polars DataFrames built from snapshots and the trader ledger, the
summary table, cumulative volumes, and the numpy-based analysis helpers."""

from revnet_sim.analysis import (
    analyze_results,
    calculate_price_band_stats,
    calculate_return_distribution,
    compare_results,
)
from revnet_sim.config import SimulationConfig
from revnet_sim.core import RevnetSimulation
from revnet_sim.metrics import (
    calculate_cumulative_volumes,
    calculate_key_metrics,
    calculate_trader_summary,
    calculate_venue_breakdown,
    calculate_weekly_aggregates,
    snapshots_to_dataframe,
    traders_to_dataframe,
)
from revnet_sim.participants import Trader
from revnet_sim.routing import Venue
from tests.utils import assert_close


def _run(days: int = 90, **kwargs):
    params = dict(days_to_calculate=days, day_deployed=10, minimum_days_held=7, sale_probability=0.1)
    params.update(kwargs)
    return RevnetSimulation(SimulationConfig(**params)).run()


def _ledger():
    """Three traders: one revnet round trip, one pool buy unsold, one voided sale."""
    a = Trader(0)
    a.record_purchase(2.0, 2.0, Venue.REVNET, 0)
    a.record_sale(2.0, 3.0, Venue.REVNET, 10)
    b = Trader(1)
    b.record_purchase(4.0, 10.0, Venue.POOL, 3)
    c = Trader(2)
    c.record_purchase(1.0, 1.0, Venue.REVNET, 5)
    c.record_sale(1.0, 0.0, Venue.VOIDED, 8)
    return [a, b, c]


def test_snapshots_dataframe_shape():
    results = _run()
    df = snapshots_to_dataframe(results.snapshots)
    assert df.height == 90
    for column in ("day", "eth_balance", "price_ceiling", "price_floor", "pool_token_price",
                   "purchase_count", "cumulative_eth_spent", "five_token_reclaim_amount"):
        assert column in df.columns
    assert df["purchase_count"].sum() == len(results.traders)


def test_empty_inputs():
    assert snapshots_to_dataframe([]).is_empty()
    assert traders_to_dataframe([]).is_empty()
    assert calculate_key_metrics([]) == {}
    assert calculate_weekly_aggregates([]) == []
    assert calculate_trader_summary([])["purchase_count"] == 0


def test_cumulative_volumes_are_running_totals():
    results = _run()
    cumulative = calculate_cumulative_volumes(results.snapshots)
    spent = cumulative["eth_spent"].to_list()
    assert all(spent[i] >= spent[i - 1] for i in range(1, len(spent)))
    total = sum(p.eth_spent for s in results.snapshots for p in s.purchases)
    assert_close(spent[-1], total, rel=1e-9)


def test_trader_summary_table():
    summary = calculate_trader_summary(_ledger())
    assert summary["purchase_count"] == 3
    assert summary["purchases_via_revnet"] == 2
    assert_close(summary["purchases_via_revnet_pct"], 200.0 / 3.0)
    assert_close(summary["avg_purchase_size"], 7.0 / 3.0)

    # Voided sale is reported separately and kept out of averages
    assert summary["sale_count"] == 1
    assert summary["voided_sale_count"] == 1
    assert summary["sales_via_revnet"] == 1
    assert_close(summary["sales_via_revnet_pct"], 100.0)
    assert_close(summary["avg_sale_size"], 3.0)
    assert_close(summary["avg_return"], 1.0)
    assert_close(summary["avg_days_held"], 10.0)


def test_traders_dataframe_columns():
    df = traders_to_dataframe(_ledger())
    assert df.height == 3
    assert df["purchase_source"].to_list() == ["revnet", "pool", "revnet"]
    assert df["sale_source"].to_list() == ["revnet", None, "voided"]
    assert df["profit"].to_list()[0] == 1.0
    assert df["days_held"].to_list() == [10, None, 3]


def test_venue_breakdown():
    breakdown = calculate_venue_breakdown(_ledger())
    rows = {(r["side"], r["venue"]): r for r in breakdown.to_dicts()}
    assert rows[("purchase", "revnet")]["trades"] == 2
    assert rows[("purchase", "pool")]["trades"] == 1
    assert_close(rows[("purchase", "pool")]["token_volume"], 10.0)
    assert rows[("sale", "voided")]["trades"] == 1


def test_weekly_aggregates():
    results = _run(days=28)
    weekly = calculate_weekly_aggregates(results.snapshots)
    assert len(weekly) == 4
    assert [w["week"] for w in weekly] == [0, 1, 2, 3]
    assert sum(w["purchase_count"] for w in weekly) == len(results.traders)


def test_analyze_results_output():
    results = _run()
    analysis = analyze_results(results)
    expected_keys = {
        "total_purchases",
        "final_eth_balance",
        "final_price_ceiling",
        "final_price_floor",
        "purchase_count",
        "avg_return",
        "share_within_band",
    }
    assert expected_keys.issubset(analysis.keys())
    assert analysis["total_purchases"] == analysis["purchase_count"]
    assert analysis["simulation_days"] == 90


def test_return_distribution():
    results = _run(days=120, sale_probability=0.3)
    returns = calculate_return_distribution(results)
    completed = [t for t in results.traders if t.sale is not None and not t.sale.voided]
    assert returns["completed_sales"] == len(completed)
    assert 0.0 <= returns["profitable_share"] <= 1.0
    assert returns["p10_return"] <= returns["median_return"] <= returns["p90_return"]


def test_price_band_stats_shares_sum_to_one():
    stats = calculate_price_band_stats(_run())
    assert stats["days_priced"] == 90
    total = stats["share_within_band"] + stats["share_above_ceiling"] + stats["share_below_floor"]
    assert_close(total, 1.0)


def test_compare_results_identical_runs():
    baseline = _run(days=60)
    variant = _run(days=60)
    comparison = compare_results(baseline, variant)
    assert comparison["eth_balance_change_pct"] == 0.0
    assert comparison["mean_return_delta"] == 0.0


def test_analysis_consistency():
    results = _run()
    analysis = analyze_results(results)
    direct = calculate_key_metrics(results.snapshots)
    assert analysis["total_purchases"] == direct["total_purchases"]
    assert analysis["final_eth_balance"] == direct["final_eth_balance"]
