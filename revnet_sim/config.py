"""Configuration for Revnet simulation."""

import json
import math
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from .random_stream import MAX_POISSON_LAMBDA, MAX_STANDARD_NORMAL


class InvalidParameterError(ValueError):
    """Raised when a configuration value is outside its allowed range."""


# Largest log-normal exponent a purchase may reach; keeps pool invariants finite
MAX_LOG_PURCHASE_SIZE = 100.0


# Scenario presets - overrides applied on top of the defaults
SCENARIOS = {
    "default": {},
    "early_pool": {"day_deployed": 0},                                    # Pool live from launch
    "no_pool": {"initial_eth": 0.0, "initial_token": 0.0},                 # Revnet is the only venue
    "steep_ceiling": {"price_ceiling_increase_percentage": 0.2,
                      "price_ceiling_increase_frequency_in_days": 30},    # 20% monthly steps
    "flat_floor": {"price_floor_tax_intensity": 0.0},                      # Pro rata redemptions
    "long_boost": {"boost_percent": 0.5, "boost_duration_in_days": 365},  # Half of issuance for a year
}


@dataclass
class SimulationConfig:
    """Configuration bundle for a single simulation run.

    Holds the Revnet's issuance and redemption parameters, the liquidity
    pool's starting state, and the stochastic trader behaviour. Validated
    before any simulation work starts.
    """

    # Revnet price ceiling - issuance rate drops by this fraction every period
    price_ceiling_increase_percentage: float = 0.05   # 5% fewer tokens per ETH each period
    price_ceiling_increase_frequency_in_days: int = 7  # Period length in days

    # Revnet price floor - redemption tax curve (0 = pro rata, 1 = fully convex)
    price_floor_tax_intensity: float = 0.7

    # Boost - share of new issuance diverted during the opening window
    boost_percent: float = 0.2              # 20% of issued tokens go to the boost
    boost_duration_in_days: int = 90        # Boost window length
    premint_amount: float = 0.0             # Tokens preminted to the boost at launch

    # Liquidity pool - starting balances and deployment day
    day_deployed: int = 30                  # Pool joins routing from this day
    initial_eth: float = 100.0              # Starting ETH liquidity
    initial_token: float = 100.0            # Starting token liquidity (counted as supply)

    # Simulation controls
    days_to_calculate: int = 365            # Horizon in days
    random_seed: int = 2                    # Base seed for the three random streams

    # Trader arrivals and purchase sizes
    daily_purchases_lambda: float = 10.0    # Mean buyers per day (Poisson)
    purchase_amount_mean: float = 0.0       # Log-normal mu of ETH spent (e^0 = 1 ETH median)
    purchase_amount_deviation: float = 1.0  # Log-normal sigma of ETH spent

    # Liquidity provision by traders
    token_liquidity_ratio: float = 0.1      # Share of purchased tokens added to the pool
    eth_liquidity_ratio: float = 0.1        # Share of sale proceeds added to the pool

    # Trader exits
    sale_probability: float = 0.05          # Daily chance an eligible trader sells
    minimum_days_held: int = 30             # Holding period before a trader may sell

    def validate(self) -> None:
        """Validate configuration against model invariants.

        Raises:
            InvalidParameterError: On the first offending field.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidParameterError(f"{f.name} must be a number, got {value!r}")
            if not math.isfinite(value):
                raise InvalidParameterError(f"{f.name} must be finite, got {value}")

        # Integer-valued day counts and seed
        for name in (
            "price_ceiling_increase_frequency_in_days",
            "boost_duration_in_days",
            "day_deployed",
            "days_to_calculate",
            "random_seed",
            "minimum_days_held",
        ):
            if not isinstance(getattr(self, name), int):
                raise InvalidParameterError(f"{name} must be an integer")

        # A ceiling step of 100% would stop issuance entirely
        self._check(0 <= self.price_ceiling_increase_percentage < 1,
                    "Price ceiling increase percentage must be in [0, 1)")
        self._check(self.price_ceiling_increase_frequency_in_days > 0,
                    "Price ceiling increase frequency must be positive")
        self._check(0 <= self.price_floor_tax_intensity <= 1,
                    "Price floor tax intensity must be between 0 and 1")

        self._check(0 <= self.boost_percent <= 1, "Boost percent must be between 0 and 1")
        self._check(self.boost_duration_in_days > 0, "Boost duration must be positive")
        self._check(self.premint_amount >= 0, "Premint amount cannot be negative")

        self._check(self.day_deployed >= 0, "Pool deployment day cannot be negative")
        self._check(self.initial_eth >= 0, "Initial pool ETH cannot be negative")
        self._check(self.initial_token >= 0, "Initial pool tokens cannot be negative")

        self._check(self.days_to_calculate >= 0, "Days to calculate cannot be negative")
        self._check(self.daily_purchases_lambda >= 0, "Daily purchases lambda cannot be negative")
        self._check(self.daily_purchases_lambda <= MAX_POISSON_LAMBDA,
                    f"Daily purchases lambda cannot exceed {MAX_POISSON_LAMBDA}")
        self._check(self.purchase_amount_deviation >= 0, "Purchase amount deviation cannot be negative")
        self._check(
            self.purchase_amount_mean + MAX_STANDARD_NORMAL * self.purchase_amount_deviation <= MAX_LOG_PURCHASE_SIZE,
            f"Purchase amount mean plus {MAX_STANDARD_NORMAL:.2f} deviations cannot exceed {MAX_LOG_PURCHASE_SIZE}",
        )

        self._check(0 <= self.token_liquidity_ratio <= 1, "Token liquidity ratio must be between 0 and 1")
        self._check(0 <= self.eth_liquidity_ratio <= 1, "ETH liquidity ratio must be between 0 and 1")
        self._check(0 <= self.sale_probability <= 1, "Sale probability must be between 0 and 1")
        self._check(self.minimum_days_held >= 0, "Minimum days held cannot be negative")

    @staticmethod
    def _check(condition: bool, message: str) -> None:
        if not condition:
            raise InvalidParameterError(message)

    @classmethod
    def from_calibration_file(cls, file_path: str, overrides: Optional[dict] = None):
        """
        Load configuration from JSON.

        Structure:
        {
            "simulation_config": {...}
        }
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Calibration file not found: {file_path}")

        with path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)

        sim_config = data.get("simulation_config", {})

        overrides = overrides or {}
        sim_config.update(overrides.get("simulation_config", {}))

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(sim_config) - known)
        if unknown:
            raise InvalidParameterError(f"Unknown configuration options: {', '.join(unknown)}")

        return cls(**sim_config)

    def to_agentpy_params(self) -> dict:
        """Convert configuration to agentpy-friendly parameter dictionary.

        Every field is also passed flat, so a model given only these keys
        (e.g. from an agentpy Sample) can rebuild the configuration.
        """
        params = {f.name: getattr(self, f.name) for f in fields(self)}
        params.update({
            "steps": self.days_to_calculate,  # agentpy run() horizon
            "seed": self.random_seed,         # agentpy seeds model.random from this key
            "simulation_config": self,
        })
        return params

    @classmethod
    def create_scenario(cls, scenario: str, **kwargs):
        """Convenience helper for common Revnet design experiments."""
        if scenario not in SCENARIOS:
            available = ", ".join(sorted(SCENARIOS.keys()))
            raise ValueError(f"Unknown scenario '{scenario}'. Available: {available}")

        unknown = sorted(set(kwargs) - {f.name for f in fields(cls)})
        if unknown:
            raise InvalidParameterError(f"Unknown configuration options: {', '.join(unknown)}")

        config_params = SCENARIOS[scenario].copy()
        config_params.update(kwargs)

        return cls(**config_params)
