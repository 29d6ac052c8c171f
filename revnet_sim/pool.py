"""Constant-product AMM liquidity pool.

Simplified x*y=k pool holding ETH and Revnet tokens with no swap fee.
Quotes are pure; ``buy_*`` methods perform the same computation and move
both balances. A pool with either balance at zero is degenerate: it cannot
quote a meaningful price, so quote and trade calls raise
``DegenerateStateError`` instead of producing non-finite values.
"""

import math


class DegenerateStateError(ArithmeticError):
    """Raised when a pool is asked to quote with zero liquidity on one side."""


def _check_amount(amount: float) -> None:
    if not math.isfinite(amount) or amount < 0:
        raise ValueError(f"Amount must be a non-negative finite number, got {amount}")


class LiquidityPool:
    """ETH/token constant-product pool that joins routing from ``day_deployed``."""

    def __init__(self, eth: float, token: float, day_deployed: int = 0) -> None:
        _check_amount(eth)
        _check_amount(token)
        self.eth = eth                      # ETH balance
        self.token = token                  # Revnet token balance
        self.day_deployed = day_deployed    # First day the pool participates in routing

    @property
    def invariant(self) -> float:
        return self.eth * self.token

    def is_deployed(self, day: int) -> bool:
        return day >= self.day_deployed

    def is_degenerate(self) -> bool:
        """True when either side of the pool is empty."""
        return self.eth <= 0 or self.token <= 0

    def _require_liquidity(self) -> None:
        if self.is_degenerate():
            raise DegenerateStateError(
                f"Pool has no liquidity to quote against (eth={self.eth}, token={self.token})"
            )

    def provide_eth(self, amount: float) -> None:
        _check_amount(amount)
        self.eth += amount

    def provide_tokens(self, amount: float) -> None:
        _check_amount(amount)
        self.token += amount

    def get_marginal_price_of_eth(self) -> float:
        """Price of 1 ETH in tokens."""
        self._require_liquidity()
        return self.token / self.eth

    def get_marginal_price_of_token(self) -> float:
        """Price of 1 token in ETH."""
        self._require_liquidity()
        return self.eth / self.token

    def get_eth_return(self, token_in: float) -> float:
        """ETH paid out for ``token_in`` tokens, without moving balances."""
        _check_amount(token_in)
        self._require_liquidity()
        new_eth = self.invariant / (self.token + token_in)
        return self.eth - new_eth

    def get_token_return(self, eth_in: float) -> float:
        """Tokens paid out for ``eth_in`` ETH, without moving balances."""
        _check_amount(eth_in)
        self._require_liquidity()
        new_token = self.invariant / (self.eth + eth_in)
        return self.token - new_token

    def buy_eth(self, token_in: float) -> float:
        """Spend tokens to buy ETH. Returns the ETH bought."""
        _check_amount(token_in)
        self._require_liquidity()
        k = self.invariant
        new_token = self.token + token_in
        new_eth = k / new_token
        eth_out = self.eth - new_eth
        self.token = new_token
        self.eth = new_eth
        return eth_out

    def buy_token(self, eth_in: float) -> float:
        """Spend ETH to buy tokens. Returns the tokens bought."""
        _check_amount(eth_in)
        self._require_liquidity()
        k = self.invariant
        new_eth = self.eth + eth_in
        new_token = k / new_eth
        token_out = self.token - new_token
        self.eth = new_eth
        self.token = new_token
        return token_out
