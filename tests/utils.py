"""Utility helpers for lightweight test execution without pytest.

Provides assertion helpers and small fixtures shared by the test modules."""

import math

from revnet_sim.pool import LiquidityPool
from revnet_sim.revnet import Revnet


def assert_close(actual: float, expected: float, rel: float = 1e-9, msg: str = ""):
    """Assert that two floating point values are approximately equal.

    Uses relative tolerance with a tiny absolute floor so comparisons
    against zero still work.
    """
    if not math.isclose(actual, expected, rel_tol=rel, abs_tol=1e-12):
        suffix = f" ({msg})" if msg else ""
        raise AssertionError(f"Expected {expected} ± {rel}, got {actual}{suffix}")


def expect_raises(exception, func, *args, **kwargs):
    """Assert that a function raises a specific exception."""
    try:
        func(*args, **kwargs)
    except exception:
        return
    raise AssertionError(f"Expected {exception.__name__} to be raised")


def make_revnet(
    ceiling_increase: float = 0.0,
    frequency: int = 1,
    tax: float = 0.0,
    premint: float = 0.0,
    boost_percent: float = 0.0,
    boost_days: int = 1,
    eth_balance: float = 0.0,
    token_supply: float = 0.0,
) -> Revnet:
    """Build a Revnet and force its treasury/supply for formula checks."""
    revnet = Revnet(ceiling_increase, frequency, tax, premint, boost_percent, boost_days)
    if eth_balance:
        revnet.eth_balance = eth_balance
    if token_supply:
        revnet.token_supply = token_supply
    return revnet


def make_pool(eth: float = 10.0, token: float = 1000.0, day_deployed: int = 0) -> LiquidityPool:
    return LiquidityPool(eth, token, day_deployed)
