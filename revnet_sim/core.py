"""Core simulation engine using AgentPy framework for the Revnet model.

This module drives the day-by-day Monte Carlo: Poisson buyer arrivals with
log-normal spend, routed purchases, holding-period-gated Bernoulli exits,
trader liquidity top-ups, and one snapshot per day of both venues.
"""

from typing import List, Optional

import agentpy as ap

from .config import SimulationConfig
from .participants import PurchaseRecord, SaleRecord, Trader
from .pool import LiquidityPool
from .random_stream import create_streams
from .revnet import Revnet
from .routing import purchase, sell
from .state import SimulationResults, SimulationSnapshot


class RevnetMarketModel(ap.Model):
    """Agent-based model of a Revnet competing with an AMM pool.

    Uses AgentPy's setup/step lifecycle and data recording. Drive it with
    ``sim_setup``/``sim_step`` so that ``t`` advances: time step ``t``
    records simulated day ``t - 1``. All random draws come from three
    seeded LCG streams so that a run is fully determined by its
    configuration.
    """

    def setup(self) -> None:
        """Initialize the model using AgentPy's setup lifecycle."""
        self.simulation_config: SimulationConfig = self.p.get('simulation_config')
        if self.simulation_config is None:
            # Reconstruct config from individual parameters for experiment compatibility
            self.simulation_config = SimulationConfig()
            for key, value in self.p.items():
                if hasattr(self.simulation_config, key):
                    setattr(self.simulation_config, key, value)
            self.simulation_config.validate()
        config = self.simulation_config

        self.revnet = Revnet(
            price_ceiling_increase_percentage=config.price_ceiling_increase_percentage,
            price_ceiling_increase_frequency_in_days=config.price_ceiling_increase_frequency_in_days,
            price_floor_tax_intensity=config.price_floor_tax_intensity,
            premint_amount=config.premint_amount,
            boost_percent=config.boost_percent,
            boost_duration_in_days=config.boost_duration_in_days,
        )
        self.pool = LiquidityPool(config.initial_eth, config.initial_token, config.day_deployed)

        # Pool liquidity counts as outstanding supply
        if config.initial_token:
            self.revnet.token_supply += config.initial_token

        self.streams = create_streams(config.random_seed)

        self.traders: List[Trader] = []
        self.open_traders: List[Trader] = []
        self.snapshots: List[SimulationSnapshot] = []

    @property
    def day(self) -> int:
        return self.revnet.day

    def step(self) -> None:
        """Simulate one day using AgentPy's step lifecycle."""
        daily_purchases = self._make_purchases()
        daily_sales = self._make_sales()

        snapshot = self._take_snapshot(daily_purchases, daily_sales)
        self.snapshots.append(snapshot)

        self.record('day', snapshot.day)
        self.record('eth_balance', snapshot.eth_balance)
        self.record('token_supply', snapshot.token_supply)
        self.record('pool_token_price', snapshot.pool_token_price)
        self.record('purchase_count', len(daily_purchases))
        self.record('sale_count', len(daily_sales))

        self.revnet.increment_day()

    def _make_purchases(self) -> List[PurchaseRecord]:
        config = self.simulation_config
        day = self.day
        pool_live = self.pool.is_deployed(day)

        arrivals = self.streams.arrival.poisson(config.daily_purchases_lambda)
        daily: List[PurchaseRecord] = []
        for _ in range(arrivals):
            eth_spent = self.streams.purchase.lognormal(
                config.purchase_amount_mean,
                config.purchase_amount_deviation,
            )
            result = purchase(eth_spent, self.revnet, self.pool)

            trader = Trader(len(self.traders))
            record = trader.record_purchase(eth_spent, result.tokens_received, result.source, day)
            self.traders.append(trader)
            self.open_traders.append(trader)
            daily.append(record)

            if pool_live:
                self.pool.provide_tokens(config.token_liquidity_ratio * result.tokens_received)

        return daily

    def _make_sales(self) -> List[SaleRecord]:
        config = self.simulation_config
        day = self.day
        pool_live = self.pool.is_deployed(day)

        daily: List[SaleRecord] = []
        still_open: List[Trader] = []
        for trader in self.open_traders:
            if not trader.is_eligible_to_sell(day, config.minimum_days_held):
                still_open.append(trader)
                continue
            if not self.streams.sale.bernoulli(config.sale_probability):
                still_open.append(trader)
                continue

            tokens_spent = trader.purchase.tokens_received * (1.0 - config.token_liquidity_ratio)
            result = sell(tokens_spent, self.revnet, self.pool)
            daily.append(trader.record_sale(tokens_spent, result.eth_received, result.source, day))

            if pool_live:
                self.pool.provide_eth(config.eth_liquidity_ratio * result.eth_received)

        self.open_traders = still_open
        return daily

    def _take_snapshot(
        self,
        daily_purchases: List[PurchaseRecord],
        daily_sales: List[SaleRecord],
    ) -> SimulationSnapshot:
        revnet = self.revnet
        pool_price: Optional[float] = None
        if not self.pool.is_degenerate():
            pool_price = self.pool.get_marginal_price_of_token()

        return SimulationSnapshot(
            day=revnet.day,
            eth_balance=revnet.eth_balance,
            token_supply=revnet.token_supply,
            price_ceiling=revnet.price_ceiling(),
            price_floor=revnet.price_floor(),
            tokens_sent_to_boost=revnet.tokens_sent_to_boost,
            pool_eth=self.pool.eth,
            pool_token=self.pool.token,
            pool_token_price=pool_price,
            one_token_reclaim_amount=revnet.eth_reclaim_amount(1),
            five_token_reclaim_amount=revnet.eth_reclaim_amount(5),
            ten_token_reclaim_amount=revnet.eth_reclaim_amount(10),
            purchases=daily_purchases,
            sales=daily_sales,
        )


class RevnetSimulation:
    """High-level simulation interface.

    Validates the configuration up front and builds a fresh model for every
    run, so repeated runs never share mutable state.
    """

    def __init__(self, config: SimulationConfig):
        self.config = config
        self.config.validate()
        self._last_results: Optional[SimulationResults] = None

    def run(self, days: Optional[int] = None) -> SimulationResults:
        """Run the simulation for ``days`` days (defaults to the configured horizon)."""
        if days is None:
            days = self.config.days_to_calculate
        if days < 0:
            raise ValueError("days cannot be negative")

        params = self.config.to_agentpy_params()

        model = RevnetMarketModel(params)
        model.sim_setup(steps=days)
        while model.running:
            model.sim_step()

        self._last_results = SimulationResults(
            snapshots=model.snapshots,
            traders=model.traders,
            config=self.config,
        )

        return self._last_results

    def get_dataframe(self):
        """Get polars DataFrame of the last run's snapshots, or None before any run."""
        from .metrics import snapshots_to_dataframe

        if self._last_results is None:
            return None

        return snapshots_to_dataframe(self._last_results.snapshots)
