"""Venue routing tests (pytest-free).

Validates that purchases and sales go to whichever venue gives the trader a
strictly better outcome, subject to deployment and solvency, and that
unroutable sales are reported as voided rather than as zero-ETH sales."""

from revnet_sim.pool import LiquidityPool
from revnet_sim.routing import Venue, purchase, sell
from tests.utils import assert_close, make_pool, make_revnet


# --- Purchases ----------------------------------------------------------------

def test_purchase_uses_pool_when_it_issues_more():
    """Pool at 100 tokens/ETH beats a flat 1 token/ETH ceiling."""
    revnet = make_revnet(ceiling_increase=0.0)
    pool = make_pool(eth=10.0, token=1000.0, day_deployed=0)
    quote = pool.get_token_return(1.0)

    result = purchase(1.0, revnet, pool)

    assert result.source is Venue.POOL
    assert_close(result.tokens_received, quote)
    assert result.tokens_received > 1.0
    assert revnet.eth_balance == 0.0  # Revnet untouched


def test_purchase_falls_back_to_revnet_when_pool_is_worse():
    revnet = make_revnet(ceiling_increase=0.0)
    pool = make_pool(eth=1000.0, token=10.0, day_deployed=0)

    result = purchase(1.0, revnet, pool)

    assert result.source is Venue.REVNET
    assert_close(result.tokens_received, 1.0)
    assert_close(revnet.eth_balance, 1.0)
    assert pool.eth == 1000.0 and pool.token == 10.0


def test_purchase_ignores_undeployed_pool():
    revnet = make_revnet()
    pool = make_pool(eth=10.0, token=1000.0, day_deployed=3)
    assert purchase(1.0, revnet, pool).source is Venue.REVNET

    for _ in range(3):
        revnet.increment_day()
    assert purchase(1.0, revnet, pool).source is Venue.POOL


def test_purchase_ignores_degenerate_pool():
    revnet = make_revnet()
    for eth, token in [(0.0, 0.0), (0.0, 500.0), (5.0, 0.0)]:
        pool = LiquidityPool(eth, token, 0)
        result = purchase(2.0, revnet, pool)
        assert result.source is Venue.REVNET
        assert_close(result.tokens_received, 2.0)


def test_pool_purchase_pays_boost_during_window():
    revnet = make_revnet(boost_percent=0.2, boost_days=5)
    pool = make_pool(eth=10.0, token=1000.0)
    gross = pool.get_token_return(1.0)

    result = purchase(1.0, revnet, pool)

    assert result.source is Venue.POOL
    assert_close(revnet.tokens_sent_to_boost, 0.2 * gross)
    assert_close(result.tokens_received, 0.8 * gross)
    # Pool tokens are already outstanding; supply is unchanged
    assert revnet.token_supply == 0.0


def test_purchase_never_takes_worse_pool_price():
    """A pool fill always yields more than the Revnet would issue."""
    revnet = make_revnet(ceiling_increase=0.02, frequency=1)
    pool = make_pool(eth=50.0, token=60.0)
    for day in range(40):
        rate = revnet.tokens_created_per_eth()
        for eth in (0.1, 1.0, 5.0, 20.0):
            before_boost = revnet.tokens_sent_to_boost
            result = purchase(eth, revnet, pool)
            if result.source is Venue.POOL:
                gross = result.tokens_received + (revnet.tokens_sent_to_boost - before_boost)
                assert gross > eth * rate
        revnet.increment_day()


# --- Sales --------------------------------------------------------------------

def test_sale_uses_pool_when_it_pays_more():
    revnet = make_revnet(tax=0.5, eth_balance=10.0, token_supply=1_000.0)
    pool = make_pool(eth=100.0, token=100.0)
    pool_quote = pool.get_eth_return(10.0)
    assert pool_quote > revnet.eth_reclaim_amount(10.0)

    result = sell(10.0, revnet, pool)

    assert result.source is Venue.POOL
    assert not result.voided
    assert_close(result.eth_received, pool_quote)
    assert revnet.eth_balance == 10.0


def test_sale_falls_back_to_revnet_redemption():
    revnet = make_revnet(tax=0.0, eth_balance=100.0, token_supply=50.0)
    pool = make_pool(eth=1.0, token=1_000.0)

    result = sell(5.0, revnet, pool)

    assert result.source is Venue.REVNET
    assert_close(result.eth_received, 10.0)
    assert_close(revnet.eth_balance, 90.0)
    assert_close(revnet.token_supply, 45.0)


def test_sale_voided_when_no_venue_viable():
    """Undeployed pool and a Revnet without supply to redeem against."""
    revnet = make_revnet(tax=0.0)
    pool = make_pool(eth=10.0, token=10.0, day_deployed=100)

    result = sell(5.0, revnet, pool)

    assert result.voided
    assert result.source is Venue.VOIDED
    assert result.eth_received == 0.0
    assert pool.eth == 10.0 and pool.token == 10.0
    assert revnet.token_supply == 0.0


def test_sale_of_more_than_supply_is_voided():
    revnet = make_revnet(tax=0.5, eth_balance=10.0, token_supply=5.0)
    pool = LiquidityPool(0.0, 0.0, 0)
    result = sell(6.0, revnet, pool)
    assert result.voided
    assert revnet.eth_balance == 10.0


def test_zero_eth_redemption_is_a_sale_not_a_void():
    """Empty treasury still redeems: the trader sells for 0 ETH."""
    revnet = make_revnet(tax=0.0, token_supply=10.0)
    pool = LiquidityPool(0.0, 0.0, 0)
    result = sell(4.0, revnet, pool)
    assert result.source is Venue.REVNET
    assert not result.voided
    assert result.eth_received == 0.0
    assert_close(revnet.token_supply, 6.0)


def test_sale_never_takes_worse_pool_price():
    revnet = make_revnet(tax=0.6, eth_balance=40.0, token_supply=400.0)
    pool = make_pool(eth=30.0, token=300.0)
    for tokens in (0.5, 2.0, 10.0, 50.0, 120.0):
        reclaim = revnet.eth_reclaim_amount(tokens)
        result = sell(tokens, revnet, pool)
        if result.source is Venue.POOL:
            assert result.eth_received > reclaim
