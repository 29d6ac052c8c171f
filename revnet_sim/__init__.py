"""Revnet Simulation Package

Simulation framework for analyzing a Revnet competing with an AMM pool:
- Bonding-curve issuance at a rising price ceiling
- Tax-weighted redemptions at the price floor
- Constant-product liquidity pool and venue routing
- Seeded Monte Carlo trader arrivals and exits
- Polars-based metrics and trader summaries
"""

__version__ = "0.1.0"

# Import core simulation components
from .core import RevnetSimulation, RevnetMarketModel
from .state import SimulationSnapshot, SimulationResults
from .config import SimulationConfig, InvalidParameterError, SCENARIOS

# Import venues and routing
from .pool import LiquidityPool, DegenerateStateError
from .revnet import Revnet
from .routing import Venue, PurchaseResult, SaleResult, purchase, sell

# Import participant ledger
from .participants import Trader, PurchaseRecord, SaleRecord

# Import random streams
from .random_stream import RandomStream, RandomStreams, create_streams

# Import metrics and analysis
from .metrics import (
    snapshots_to_dataframe,
    traders_to_dataframe,
    calculate_cumulative_volumes,
    calculate_trader_summary,
    calculate_venue_breakdown,
    calculate_weekly_aggregates,
    calculate_key_metrics,
)
from .analysis import (
    analyze_results,
    calculate_return_distribution,
    calculate_price_band_stats,
    compare_results,
)

__all__ = [
    # Core simulation
    "RevnetSimulation",
    "RevnetMarketModel",
    "SimulationConfig",
    "InvalidParameterError",
    "SCENARIOS",

    # State management
    "SimulationSnapshot",
    "SimulationResults",

    # Venues and routing
    "LiquidityPool",
    "DegenerateStateError",
    "Revnet",
    "Venue",
    "PurchaseResult",
    "SaleResult",
    "purchase",
    "sell",

    # Participants
    "Trader",
    "PurchaseRecord",
    "SaleRecord",

    # Random streams
    "RandomStream",
    "RandomStreams",
    "create_streams",

    # Metrics and analysis
    "snapshots_to_dataframe",
    "traders_to_dataframe",
    "calculate_cumulative_volumes",
    "calculate_trader_summary",
    "calculate_venue_breakdown",
    "calculate_weekly_aggregates",
    "calculate_key_metrics",
    "analyze_results",
    "calculate_return_distribution",
    "calculate_price_band_stats",
    "compare_results",
]
