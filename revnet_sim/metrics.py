"""Polars-based metrics calculation system.

Turns simulation snapshots and the trader ledger into DataFrames and the
summary tables used for reporting.
"""

from typing import Any, Dict, List

import polars as pl

from .participants import Trader
from .routing import Venue
from .state import SimulationSnapshot


def snapshots_to_dataframe(snapshots: List[SimulationSnapshot]) -> pl.DataFrame:
    """Convert list of SimulationSnapshot objects to a polars DataFrame.

    One row per day with venue state, the day's trade counts and volumes,
    and cumulative volumes.
    """
    if not snapshots:
        return pl.DataFrame()

    data = {
        # Revnet state
        "day": [s.day for s in snapshots],
        "eth_balance": [s.eth_balance for s in snapshots],
        "token_supply": [s.token_supply for s in snapshots],
        "price_ceiling": [s.price_ceiling for s in snapshots],
        "price_floor": [s.price_floor for s in snapshots],
        "tokens_sent_to_boost": [s.tokens_sent_to_boost for s in snapshots],

        # Pool state
        "pool_eth": [s.pool_eth for s in snapshots],
        "pool_token": [s.pool_token for s in snapshots],
        "pool_token_price": [s.pool_token_price for s in snapshots],

        # Reclaim curve samples
        "one_token_reclaim_amount": [s.one_token_reclaim_amount for s in snapshots],
        "five_token_reclaim_amount": [s.five_token_reclaim_amount for s in snapshots],
        "ten_token_reclaim_amount": [s.ten_token_reclaim_amount for s in snapshots],

        # Daily trading activity
        "purchase_count": [len(s.purchases) for s in snapshots],
        "pool_purchase_count": [sum(1 for p in s.purchases if p.source is Venue.POOL) for s in snapshots],
        "sale_count": [len(s.sales) for s in snapshots],
        "pool_sale_count": [sum(1 for x in s.sales if x.source is Venue.POOL) for s in snapshots],
        "voided_sale_count": [sum(1 for x in s.sales if x.voided) for s in snapshots],
        "eth_spent": [sum(p.eth_spent for p in s.purchases) for s in snapshots],
        "tokens_received": [sum(p.tokens_received for p in s.purchases) for s in snapshots],
        "tokens_spent": [sum(x.tokens_spent for x in s.sales) for s in snapshots],
        "eth_received": [sum(x.eth_received for x in s.sales) for s in snapshots],
    }

    df = pl.DataFrame(data, schema_overrides={"pool_token_price": pl.Float64})

    df = df.with_columns([
        # Cumulative volumes across both venues
        pl.col("eth_spent").cum_sum().alias("cumulative_eth_spent"),
        pl.col("tokens_received").cum_sum().alias("cumulative_tokens_received"),
        pl.col("tokens_spent").cum_sum().alias("cumulative_tokens_spent"),
        pl.col("eth_received").cum_sum().alias("cumulative_eth_received"),

        # Where the pool trades relative to the Revnet's band
        (pl.col("pool_token_price") / pl.col("price_ceiling")).alias("pool_to_ceiling_ratio"),
        (pl.col("price_ceiling") - pl.col("price_floor")).alias("ceiling_floor_spread"),
    ])

    return df


def traders_to_dataframe(traders: List[Trader]) -> pl.DataFrame:
    """One row per trader with purchase, sale and derived return columns."""
    if not traders:
        return pl.DataFrame()

    rows = []
    for t in traders:
        row: Dict[str, Any] = {
            "trader_id": t.trader_id,
            "purchase_day": t.purchase.day if t.purchase else None,
            "purchase_source": t.purchase.source.value if t.purchase else None,
            "eth_spent": t.purchase.eth_spent if t.purchase else None,
            "tokens_received": t.purchase.tokens_received if t.purchase else None,
            "sale_day": t.sale.day if t.sale else None,
            "sale_source": t.sale.source.value if t.sale else None,
            "tokens_spent": t.sale.tokens_spent if t.sale else None,
            "eth_received": t.sale.eth_received if t.sale else None,
            "days_held": t.days_held,
            "profit": t.profit,
        }
        rows.append(row)

    schema = {
        "trader_id": pl.Int64,
        "purchase_day": pl.Int64,
        "purchase_source": pl.Utf8,
        "eth_spent": pl.Float64,
        "tokens_received": pl.Float64,
        "sale_day": pl.Int64,
        "sale_source": pl.Utf8,
        "tokens_spent": pl.Float64,
        "eth_received": pl.Float64,
        "days_held": pl.Int64,
        "profit": pl.Float64,
    }
    return pl.DataFrame(rows, schema=schema)


def calculate_cumulative_volumes(snapshots: List[SimulationSnapshot]) -> pl.DataFrame:
    """Running totals of ETH and tokens exchanged, per day."""
    df = snapshots_to_dataframe(snapshots)
    if df.is_empty():
        return df
    return df.select([
        "day",
        pl.col("cumulative_eth_spent").alias("eth_spent"),
        pl.col("cumulative_tokens_received").alias("tokens_received"),
        pl.col("cumulative_tokens_spent").alias("tokens_spent"),
        pl.col("cumulative_eth_received").alias("eth_received"),
    ])


def calculate_trader_summary(traders: List[Trader]) -> Dict[str, Any]:
    """Summary table of trader activity.

    Averages over sales exclude voided sales, which exchanged nothing.
    Percentages are None when their denominator is zero.
    """
    df = traders_to_dataframe(traders)
    if df.is_empty():
        return {
            "purchase_count": 0,
            "purchases_via_revnet": 0,
            "purchases_via_revnet_pct": None,
            "avg_purchase_size": None,
            "sale_count": 0,
            "voided_sale_count": 0,
            "sales_via_revnet": 0,
            "sales_via_revnet_pct": None,
            "avg_sale_size": None,
            "avg_return": None,
            "avg_days_held": None,
        }

    purchases = df.filter(pl.col("purchase_day").is_not_null())
    sales = df.filter(pl.col("sale_source").is_not_null() & (pl.col("sale_source") != Venue.VOIDED.value))

    purchase_stats = purchases.select([
        pl.len().alias("purchase_count"),
        (pl.col("purchase_source") == Venue.REVNET.value).sum().alias("purchases_via_revnet"),
        pl.col("eth_spent").mean().alias("avg_purchase_size"),
    ]).to_dicts()[0]

    sale_stats = sales.select([
        pl.len().alias("sale_count"),
        (pl.col("sale_source") == Venue.REVNET.value).sum().alias("sales_via_revnet"),
        pl.col("eth_received").mean().alias("avg_sale_size"),
        pl.col("profit").mean().alias("avg_return"),
        pl.col("days_held").mean().alias("avg_days_held"),
    ]).to_dicts()[0]

    voided = df.filter(pl.col("sale_source") == Venue.VOIDED.value).height

    def _pct(part: int, whole: int):
        return 100.0 * part / whole if whole else None

    return {
        "purchase_count": purchase_stats["purchase_count"],
        "purchases_via_revnet": purchase_stats["purchases_via_revnet"],
        "purchases_via_revnet_pct": _pct(purchase_stats["purchases_via_revnet"], purchase_stats["purchase_count"]),
        "avg_purchase_size": purchase_stats["avg_purchase_size"],
        "sale_count": sale_stats["sale_count"],
        "voided_sale_count": voided,
        "sales_via_revnet": sale_stats["sales_via_revnet"],
        "sales_via_revnet_pct": _pct(sale_stats["sales_via_revnet"], sale_stats["sale_count"]),
        "avg_sale_size": sale_stats["avg_sale_size"],
        "avg_return": sale_stats["avg_return"],
        "avg_days_held": sale_stats["avg_days_held"],
    }


def calculate_venue_breakdown(traders: List[Trader]) -> pl.DataFrame:
    """Trade counts and volumes per side and venue."""
    df = traders_to_dataframe(traders)
    if df.is_empty():
        return pl.DataFrame()

    buys = (df
            .filter(pl.col("purchase_source").is_not_null())
            .group_by("purchase_source")
            .agg([
                pl.len().alias("trades"),
                pl.col("eth_spent").sum().alias("eth_volume"),
                pl.col("tokens_received").sum().alias("token_volume"),
            ])
            .rename({"purchase_source": "venue"})
            .with_columns(pl.lit("purchase").alias("side")))

    sells = (df
             .filter(pl.col("sale_source").is_not_null())
             .group_by("sale_source")
             .agg([
                 pl.len().alias("trades"),
                 pl.col("eth_received").sum().alias("eth_volume"),
                 pl.col("tokens_spent").sum().alias("token_volume"),
             ])
             .rename({"sale_source": "venue"})
             .with_columns(pl.lit("sale").alias("side")))

    columns = ["side", "venue", "trades", "eth_volume", "token_volume"]
    return pl.concat([buys.select(columns), sells.select(columns)]).sort(["side", "venue"])


def calculate_weekly_aggregates(snapshots: List[SimulationSnapshot]) -> List[Dict[str, Any]]:
    """Aggregate daily snapshots into 7-day buckets."""
    df = snapshots_to_dataframe(snapshots)
    if df.is_empty():
        return []

    result_df = (df
                 .with_columns((pl.col("day") // 7).alias("week"))
                 .group_by("week", maintain_order=True)
                 .agg([
                     # Sum additive metrics
                     pl.col("purchase_count").sum(),
                     pl.col("sale_count").sum(),
                     pl.col("eth_spent").sum(),
                     pl.col("eth_received").sum(),

                     # Average point-in-time metrics
                     pl.col("pool_token_price").mean().alias("avg_pool_token_price"),
                     pl.col("price_floor").mean().alias("avg_price_floor"),

                     # End-of-period balances
                     pl.col("price_ceiling").last().alias("final_price_ceiling"),
                     pl.col("eth_balance").last().alias("final_eth_balance"),
                     pl.col("token_supply").last().alias("final_token_supply"),
                 ])
                 .sort("week"))

    return result_df.to_dicts()


def calculate_key_metrics(snapshots: List[SimulationSnapshot]) -> Dict[str, Any]:
    """Calculate headline metrics for a run using polars operations."""
    if not snapshots:
        return {}

    df = snapshots_to_dataframe(snapshots)

    metrics = df.select([
        pl.col("purchase_count").sum().alias("total_purchases"),
        pl.col("pool_purchase_count").sum().alias("total_pool_purchases"),
        pl.col("sale_count").sum().alias("total_sales"),
        pl.col("pool_sale_count").sum().alias("total_pool_sales"),
        pl.col("voided_sale_count").sum().alias("total_voided_sales"),
        pl.col("eth_spent").sum().alias("total_eth_spent"),
        pl.col("eth_received").sum().alias("total_eth_received"),
        pl.col("pool_to_ceiling_ratio").mean().alias("avg_pool_to_ceiling_ratio"),
    ]).to_dicts()[0]

    final = snapshots[-1]
    metrics.update({
        "simulation_days": len(snapshots),
        "final_eth_balance": final.eth_balance,
        "final_token_supply": final.token_supply,
        "final_price_ceiling": final.price_ceiling,
        "final_price_floor": final.price_floor,
        "final_tokens_sent_to_boost": final.tokens_sent_to_boost,
        "final_pool_eth": final.pool_eth,
        "final_pool_token": final.pool_token,
        "final_pool_token_price": final.pool_token_price,
        "initial_pool_token_price": snapshots[0].pool_token_price,
    })

    return metrics
