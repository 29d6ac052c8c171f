"""Core data structures for Revnet simulation output."""

from dataclasses import dataclass, field
from typing import List, Optional

from .config import SimulationConfig
from .participants import PurchaseRecord, SaleRecord, Trader


@dataclass(frozen=True)
class SimulationSnapshot:
    """Snapshot of both venues at the end of one simulated day.

    Captures the Revnet treasury and supply, its ceiling and floor prices,
    the pool balances and marginal price, reclaim values for small
    redemptions, and every purchase and sale filled that day.
    """
    day: int                                    # Simulation day (0-based)
    eth_balance: float                          # Revnet treasury ETH
    token_supply: float                         # Outstanding Revnet tokens (incl. pool and boost)
    price_ceiling: float                        # Issuance price in ETH per token
    price_floor: float                          # Reclaim value of one token
    tokens_sent_to_boost: float                 # Cumulative boost bucket, including premint
    pool_eth: float                             # Pool ETH balance
    pool_token: float                           # Pool token balance
    pool_token_price: Optional[float]           # Pool ETH per token (None while pool is empty)
    one_token_reclaim_amount: float             # ETH for destroying 1 token
    five_token_reclaim_amount: float            # ETH for destroying 5 tokens
    ten_token_reclaim_amount: float             # ETH for destroying 10 tokens
    purchases: List[PurchaseRecord] = field(default_factory=list)  # Purchases filled this day
    sales: List[SaleRecord] = field(default_factory=list)          # Sale attempts this day


@dataclass
class SimulationResults:
    """Results from a complete simulation run.

    Contains the day-by-day snapshots, the full trader ledger and the
    configuration used. Primary output for metrics and analysis.
    """
    snapshots: List[SimulationSnapshot]         # One snapshot per simulated day
    traders: List[Trader]                       # Every trader created during the run
    config: SimulationConfig                    # Configuration used for this run
