"""Trade routing between the liquidity pool and the Revnet.

Both routing functions apply a greedy, myopic arbitrage rule: take the venue
that gives the trader a strictly better outcome, with the Revnet as the
fallback whenever the pool is not deployed yet, cannot cover the trade, or
simply quotes worse. Outcomes are always values; a sale that no venue can
honour comes back as ``Venue.VOIDED`` with no state change.
"""

from dataclasses import dataclass
from enum import Enum

from .pool import LiquidityPool
from .revnet import Revnet


class Venue(str, Enum):
    """Where a trade was filled."""
    POOL = "pool"
    REVNET = "revnet"
    VOIDED = "voided"   # No viable venue; nothing was exchanged


@dataclass(frozen=True)
class PurchaseResult:
    tokens_received: float
    source: Venue


@dataclass(frozen=True)
class SaleResult:
    eth_received: float
    source: Venue

    @property
    def voided(self) -> bool:
        return self.source is Venue.VOIDED


def _pool_available(revnet: Revnet, pool: LiquidityPool) -> bool:
    return pool.is_deployed(revnet.day) and not pool.is_degenerate()


def purchase(eth_spent: float, revnet: Revnet, pool: LiquidityPool) -> PurchaseResult:
    """Buy tokens with ``eth_spent`` ETH at whichever venue issues more.

    Pool purchases made during the boost window send the boost share of the
    bought tokens to the boost bucket, so dilution is the same on both venues.
    """
    if _pool_available(revnet, pool):
        pool_quote = pool.get_token_return(eth_spent)
        revnet_quote = eth_spent * revnet.tokens_created_per_eth()
        if pool_quote < pool.token and pool_quote > revnet_quote:
            tokens_received = pool.buy_token(eth_spent)
            if revnet.in_boost_window():
                boosted = tokens_received * revnet.boost_percent
                revnet.send_to_boost(boosted)
                tokens_received -= boosted
            return PurchaseResult(tokens_received=tokens_received, source=Venue.POOL)

    tokens_received = revnet.create_tokens_at_ceiling(eth_spent)
    return PurchaseResult(tokens_received=tokens_received, source=Venue.REVNET)


def sell(tokens_spent: float, revnet: Revnet, pool: LiquidityPool) -> SaleResult:
    """Sell ``tokens_spent`` tokens at whichever venue pays more ETH."""
    reclaim_quote = revnet.eth_reclaim_amount(tokens_spent)

    if _pool_available(revnet, pool):
        pool_quote = pool.get_eth_return(tokens_spent)
        if pool_quote < pool.eth and pool_quote > reclaim_quote:
            return SaleResult(eth_received=pool.buy_eth(tokens_spent), source=Venue.POOL)

    if revnet.can_redeem(tokens_spent):
        return SaleResult(eth_received=revnet.destroy_tokens_at_floor(tokens_spent), source=Venue.REVNET)

    return SaleResult(eth_received=0.0, source=Venue.VOIDED)
