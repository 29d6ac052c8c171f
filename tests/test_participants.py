"""Trader ledger tests (pytest-free).

Checks the write-once purchase and sale records, holding-period
eligibility, and derived holding period and profit."""

from revnet_sim.participants import Trader
from revnet_sim.routing import Venue
from tests.utils import assert_close, expect_raises


def test_new_trader_is_empty():
    trader = Trader(3)
    assert trader.purchase is None and trader.sale is None
    assert not trader.has_sold
    assert trader.days_held is None
    assert trader.profit is None
    assert not trader.is_eligible_to_sell(100, 0)


def test_purchase_then_sale():
    trader = Trader(0)
    bought = trader.record_purchase(1.5, 120.0, Venue.POOL, 4)
    assert bought.source is Venue.POOL
    assert trader.purchase is bought

    sold = trader.record_sale(108.0, 2.0, Venue.REVNET, 40)
    assert trader.has_sold
    assert not sold.voided
    assert trader.days_held == 36
    assert_close(trader.profit, 0.5)


def test_records_are_write_once():
    trader = Trader(1)
    trader.record_purchase(1.0, 1.0, Venue.REVNET, 0)
    expect_raises(ValueError, trader.record_purchase, 2.0, 2.0, Venue.REVNET, 1)

    trader.record_sale(1.0, 0.5, Venue.REVNET, 10)
    expect_raises(ValueError, trader.record_sale, 1.0, 0.5, Venue.POOL, 11)


def test_sale_requires_purchase():
    expect_raises(ValueError, Trader(2).record_sale, 1.0, 1.0, Venue.REVNET, 0)


def test_holding_period_gates_eligibility():
    trader = Trader(4)
    trader.record_purchase(1.0, 1.0, Venue.REVNET, 10)
    assert not trader.is_eligible_to_sell(39, 30)
    assert trader.is_eligible_to_sell(40, 30)
    assert trader.is_eligible_to_sell(10, 0)


def test_voided_sale_closes_position():
    """A voided attempt is the trader's one sale: zero ETH, loss of the spend."""
    trader = Trader(5)
    trader.record_purchase(2.0, 2.0, Venue.REVNET, 0)
    sale = trader.record_sale(2.0, 0.0, Venue.VOIDED, 30)
    assert sale.voided
    assert trader.has_sold
    assert not trader.is_eligible_to_sell(60, 30)
    assert_close(trader.profit, -2.0)
